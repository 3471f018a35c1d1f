"""Data models for the stage explorer."""

from .artifact import (
    ArtifactMetadata,
    ArtifactType,
    ArtifactValidation,
    Completeness,
    RichArtifact,
)
from .context import ExplorationContext
from .insight import ExtractionMethod, InsightCategory, RichInsight
from .quality import (
    QualityReport,
    QualityScores,
    RevisionAction,
    RevisionDecision,
)
from .question import (
    ConfidenceLevel,
    QuestionCategory,
    QuestionMetrics,
    QuestionPriority,
    QuestionStatus,
    TrackedQuestion,
)
from .stage import (
    STAGE_CYCLE,
    SUMMARY_STAGE_TYPE,
    JourneyStatus,
    Stage,
    StageStatus,
    StageType,
    stage_type_for_index,
)

__all__ = [
    "ArtifactMetadata",
    "ArtifactType",
    "ArtifactValidation",
    "Completeness",
    "RichArtifact",
    "ExplorationContext",
    "ExtractionMethod",
    "InsightCategory",
    "RichInsight",
    "QualityReport",
    "QualityScores",
    "RevisionAction",
    "RevisionDecision",
    "ConfidenceLevel",
    "QuestionCategory",
    "QuestionMetrics",
    "QuestionPriority",
    "QuestionStatus",
    "TrackedQuestion",
    "STAGE_CYCLE",
    "SUMMARY_STAGE_TYPE",
    "JourneyStatus",
    "Stage",
    "StageStatus",
    "StageType",
    "stage_type_for_index",
]
