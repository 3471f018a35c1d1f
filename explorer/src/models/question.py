"""
Tracked question model.

Questions raised during a journey are tracked until answered. Status only
moves forward: unanswered -> partial -> answered, or to obsolete from any
non-terminal status.
"""

import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class QuestionPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER: tuple[QuestionPriority, ...] = tuple(QuestionPriority)


class QuestionStatus(str, Enum):
    UNANSWERED = "unanswered"
    PARTIAL = "partial"
    ANSWERED = "answered"
    OBSOLETE = "obsolete"

    @property
    def is_open(self) -> bool:
        return self in (QuestionStatus.UNANSWERED, QuestionStatus.PARTIAL)


class ConfidenceLevel(str, Enum):
    VERIFIED = "verified"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SPECULATIVE = "speculative"


CONFIDENCE_WEIGHTS = {
    ConfidenceLevel.VERIFIED: 1.0,
    ConfidenceLevel.HIGH: 0.8,
    ConfidenceLevel.MEDIUM: 0.5,
    ConfidenceLevel.LOW: 0.3,
    ConfidenceLevel.SPECULATIVE: 0.1,
}


class QuestionCategory(str, Enum):
    PROBING = "probing"
    HYPOTHETICAL = "hypothetical"
    CLARIFYING = "clarifying"
    CHALLENGE = "challenge"
    FUTURE = "future"
    META = "meta"


def generate_question_id() -> str:
    return f"question_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


@dataclass
class TrackedQuestion:
    """A deduplicated question and its answer state."""
    id: str
    question: str
    asked_in_stage: int
    stage_type: str
    priority: QuestionPriority
    status: QuestionStatus = QuestionStatus.UNANSWERED
    category: QuestionCategory = QuestionCategory.CLARIFYING
    requires_research: bool = False
    research_attempts: int = 0
    answer: Optional[str] = None
    confidence: Optional[ConfidenceLevel] = None
    answered_in_stage: Optional[int] = None
    evidence: list[str] = field(default_factory=list)
    related_insight_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "asked_in_stage": self.asked_in_stage,
            "stage_type": self.stage_type,
            "priority": self.priority.value,
            "status": self.status.value,
            "category": self.category.value,
            "requires_research": self.requires_research,
            "research_attempts": self.research_attempts,
            "answer": self.answer,
            "confidence": self.confidence.value if self.confidence else None,
            "answered_in_stage": self.answered_in_stage,
            "evidence": self.evidence,
            "related_insight_ids": self.related_insight_ids,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TrackedQuestion":
        return cls(
            id=data["id"],
            question=data["question"],
            asked_in_stage=data["asked_in_stage"],
            stage_type=data["stage_type"],
            priority=QuestionPriority(data["priority"]),
            status=QuestionStatus(data.get("status", "unanswered")),
            category=QuestionCategory(data.get("category", "clarifying")),
            requires_research=data.get("requires_research", False),
            research_attempts=data.get("research_attempts", 0),
            answer=data.get("answer"),
            confidence=ConfidenceLevel(data["confidence"]) if data.get("confidence") else None,
            answered_in_stage=data.get("answered_in_stage"),
            evidence=list(data.get("evidence", [])),
            related_insight_ids=list(data.get("related_insight_ids", [])),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else None,
        )


@dataclass
class QuestionMetrics:
    """Aggregate counts over the tracked questions."""
    total_questions: int = 0
    unanswered_count: int = 0
    partial_count: int = 0
    answered_count: int = 0
    obsolete_count: int = 0
    high_priority_unanswered: int = 0
    average_confidence: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_questions": self.total_questions,
            "unanswered_count": self.unanswered_count,
            "partial_count": self.partial_count,
            "answered_count": self.answered_count,
            "obsolete_count": self.obsolete_count,
            "high_priority_unanswered": self.high_priority_unanswered,
            "average_confidence": self.average_confidence,
        }
