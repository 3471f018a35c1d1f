"""Insight model: a structured finding extracted from one stage."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .question import ConfidenceLevel, QuestionPriority as ImportanceLevel


class InsightCategory(str, Enum):
    DISCOVERY = "discovery"
    PROBLEM = "problem"
    SOLUTION = "solution"
    QUESTION = "question"
    CONNECTION = "connection"
    RECOMMENDATION = "recommendation"
    SYNTHESIS = "synthesis"


class ExtractionMethod(str, Enum):
    LLM = "llm"
    PATTERN = "pattern"


@dataclass
class RichInsight:
    id: str
    insight: str
    category: InsightCategory
    importance: ImportanceLevel
    confidence: ConfidenceLevel
    stage_type: str
    stage_number: int
    evidence: list[str] = field(default_factory=list)
    assumptions: list[str] = field(default_factory=list)
    extraction_method: ExtractionMethod = ExtractionMethod.LLM
    quality_score: float = 5.0
    tags: list[str] = field(default_factory=list)
    source_stage_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def summary_line(self) -> str:
        """Compact form appended to the journey's running insight list."""
        return f"[{self.category.value}] {self.insight}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "insight": self.insight,
            "category": self.category.value,
            "importance": self.importance.value,
            "confidence": self.confidence.value,
            "stage_type": self.stage_type,
            "stage_number": self.stage_number,
            "evidence": self.evidence,
            "assumptions": self.assumptions,
            "extraction_method": self.extraction_method.value,
            "quality_score": self.quality_score,
            "tags": self.tags,
            "source_stage_id": self.source_stage_id,
            "created_at": self.created_at.isoformat(),
        }
