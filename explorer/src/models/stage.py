"""
Stage model.

A stage is one round of the exploration cycle. The cycle has eight kinds,
always visited in the same order; the last stage of a bounded journey is a
summary, which reuses the building kind with ``is_summary`` set.

Stage lifecycle: pending -> running -> complete | error. Terminal stages are
never touched again.
"""

import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .quality import QualityReport


class StageType(str, Enum):
    DISCOVERING = "discovering"
    CHASING = "chasing"
    SOLVING = "solving"
    CHALLENGING = "challenging"
    QUESTIONING = "questioning"
    SEARCHING = "searching"
    IMAGINING = "imagining"
    BUILDING = "building"


STAGE_CYCLE: tuple[StageType, ...] = tuple(StageType)
SUMMARY_STAGE_TYPE = StageType.BUILDING


class StageStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (StageStatus.COMPLETE, StageStatus.ERROR)


class JourneyStatus(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    COMPLETE = "complete"
    ERROR = "error"


def stage_type_for_index(index: int) -> StageType:
    """Stage kind at a position of the cycle (wraps around)."""
    return STAGE_CYCLE[index % len(STAGE_CYCLE)]


def generate_stage_id() -> str:
    return f"stage_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


@dataclass
class Stage:
    """One executed round of a journey."""
    id: str
    journey_id: str
    type: StageType
    stage_number: int
    prompt: str = ""
    status: StageStatus = StageStatus.PENDING
    result: str = ""
    thinking: Optional[str] = None
    is_summary: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    quality_report: Optional[QualityReport] = None
    error: Optional[str] = None

    @classmethod
    def create(
        cls,
        journey_id: str,
        stage_type: StageType,
        stage_number: int,
        is_summary: bool = False,
    ) -> "Stage":
        return cls(
            id=generate_stage_id(),
            journey_id=journey_id,
            type=stage_type,
            stage_number=stage_number,
            is_summary=is_summary,
        )

    @property
    def label(self) -> str:
        return "summary" if self.is_summary else self.type.value

    @property
    def quality_score(self) -> Optional[float]:
        return self.quality_report.overall_score if self.quality_report else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "journey_id": self.journey_id,
            "type": self.type.value,
            "stage_number": self.stage_number,
            "prompt": self.prompt,
            "status": self.status.value,
            "result": self.result,
            "thinking": self.thinking,
            "is_summary": self.is_summary,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "quality_report": self.quality_report.to_dict() if self.quality_report else None,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Stage":
        return cls(
            id=data["id"],
            journey_id=data["journey_id"],
            type=StageType(data["type"]),
            stage_number=data["stage_number"],
            prompt=data.get("prompt", ""),
            status=StageStatus(data.get("status", StageStatus.PENDING.value)),
            result=data.get("result", ""),
            thinking=data.get("thinking"),
            is_summary=bool(data.get("is_summary", False)),
            created_at=datetime.fromisoformat(data["created_at"]),
            completed_at=(
                datetime.fromisoformat(data["completed_at"])
                if data.get("completed_at") else None
            ),
            quality_report=(
                QualityReport.from_dict(data["quality_report"])
                if data.get("quality_report") else None
            ),
            error=data.get("error"),
        )
