"""
Artifact model.

Artifacts are the tangible outputs found in a stage's text: code, documents,
tables, diagrams and so on. They are frozen once created; a correction means
a new artifact.
"""

import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class ArtifactType(str, Enum):
    CODE = "code"
    MARKDOWN = "markdown"
    TABLE = "table"
    DIAGRAM = "diagram"
    GUIDE = "guide"
    FRAMEWORK = "framework"
    REPORT = "report"
    PRESENTATION = "presentation"
    OTHER = "other"


class Completeness(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    SKELETON = "skeleton"


def generate_artifact_id(index: int = 0) -> str:
    return f"artifact_{int(time.time() * 1000)}_{secrets.token_hex(3)}_{index}"


@dataclass(frozen=True)
class ArtifactMetadata:
    language: Optional[str] = None
    format: Optional[str] = None
    size: int = 0
    target_audience: Optional[str] = None
    usage_instructions: Optional[str] = None
    tags: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "language": self.language,
            "format": self.format,
            "size": self.size,
            "target_audience": self.target_audience,
            "usage_instructions": self.usage_instructions,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class ArtifactValidation:
    """Result of the structural checks run on an artifact."""
    completeness: Completeness
    validated: bool
    quality_score: float
    validation_method: str = "structure-check"
    validation_notes: str = ""
    syntax_valid: Optional[bool] = None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "completeness": self.completeness.value,
            "validated": self.validated,
            "quality_score": self.quality_score,
            "validation_method": self.validation_method,
            "validation_notes": self.validation_notes,
            "syntax_valid": self.syntax_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class RichArtifact:
    id: str
    type: ArtifactType
    title: str
    content: str
    stage_number: int
    stage_type: str
    metadata: ArtifactMetadata
    validation: ArtifactValidation
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def quality_score(self) -> float:
        return self.validation.quality_score

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "content": self.content,
            "stage_number": self.stage_number,
            "stage_type": self.stage_type,
            "metadata": self.metadata.to_dict(),
            "validation": self.validation.to_dict(),
            "created_at": self.created_at.isoformat(),
        }
