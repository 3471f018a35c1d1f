"""
Quality report model.

A report scores one stage on six dimensions (0-10 each). The overall score is
their mean. A RevisionDecision is what the orchestrator concludes from a
report; re-execution is never performed automatically.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

QUALITY_DIMENSIONS = (
    "completeness",
    "depth",
    "specificity",
    "actionability",
    "coherence",
    "novelty",
)

NEUTRAL_SCORE = 5.0


def clamp_score(value, default: float = NEUTRAL_SCORE) -> float:
    """Coerce a raw score into [0, 10]; non-numbers become ``default``."""
    if isinstance(value, bool):
        return default
    try:
        score = float(value)
    except (TypeError, ValueError):
        return default
    if score != score:  # NaN
        return default
    return max(0.0, min(10.0, score))


@dataclass
class QualityScores:
    completeness: float = NEUTRAL_SCORE
    depth: float = NEUTRAL_SCORE
    specificity: float = NEUTRAL_SCORE
    actionability: float = NEUTRAL_SCORE
    coherence: float = NEUTRAL_SCORE
    novelty: float = NEUTRAL_SCORE

    @property
    def overall(self) -> float:
        values = [getattr(self, name) for name in QUALITY_DIMENSIONS]
        return round(sum(values) / len(values), 1)

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in QUALITY_DIMENSIONS}

    @classmethod
    def from_dict(cls, data: dict) -> "QualityScores":
        return cls(**{name: clamp_score(data.get(name)) for name in QUALITY_DIMENSIONS})


@dataclass
class QualityReport:
    """Outcome of evaluating one stage."""
    stage_id: str
    stage_type: str
    scores: QualityScores
    overall_score: float
    should_revise: bool
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    evaluated_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def neutral(cls, stage_id: str, stage_type: str) -> "QualityReport":
        """Report used when evaluation itself fails."""
        return cls(
            stage_id=stage_id,
            stage_type=stage_type,
            scores=QualityScores(),
            overall_score=NEUTRAL_SCORE,
            should_revise=False,
            weaknesses=["Quality evaluation unavailable"],
        )

    def to_dict(self) -> dict:
        return {
            "stage_id": self.stage_id,
            "stage_type": self.stage_type,
            "scores": self.scores.to_dict(),
            "overall_score": self.overall_score,
            "should_revise": self.should_revise,
            "strengths": self.strengths,
            "weaknesses": self.weaknesses,
            "improvements": self.improvements,
            "evaluated_at": self.evaluated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QualityReport":
        return cls(
            stage_id=data["stage_id"],
            stage_type=data["stage_type"],
            scores=QualityScores.from_dict(data.get("scores", {})),
            overall_score=clamp_score(data.get("overall_score")),
            should_revise=bool(data.get("should_revise", False)),
            strengths=list(data.get("strengths", [])),
            weaknesses=list(data.get("weaknesses", [])),
            improvements=list(data.get("improvements", [])),
            evaluated_at=(
                datetime.fromisoformat(data["evaluated_at"])
                if data.get("evaluated_at") else datetime.now()
            ),
        )


class RevisionAction(str, Enum):
    PROCEED = "proceed"
    RE_EXECUTE_WITH_FEEDBACK = "re_execute_with_feedback"


@dataclass
class RevisionDecision:
    """Either proceed, or re-run the stage with the given feedback."""
    action: RevisionAction
    feedback: Optional[str] = None

    @classmethod
    def proceed(cls) -> "RevisionDecision":
        return cls(RevisionAction.PROCEED)

    @classmethod
    def re_execute(cls, feedback: str) -> "RevisionDecision":
        return cls(RevisionAction.RE_EXECUTE_WITH_FEEDBACK, feedback)

    @property
    def is_revision(self) -> bool:
        return self.action == RevisionAction.RE_EXECUTE_WITH_FEEDBACK
