"""
Stage quality scoring.

Scores a completed stage on six dimensions with a cheap model. Scoring is
advisory: any failure yields a neutral report instead of an exception.
"""

from dataclasses import dataclass, field

from shared.logging import get_logger

from ..models.quality import (
    QUALITY_DIMENSIONS,
    QualityReport,
    QualityScores,
)
from ..models.stage import Stage
from ..parsing import parse_json_object
from .prompts import build_quality_evaluation_prompt

log = get_logger("explorer", "quality.scorer")

DEFAULT_QUALITY_MODEL = "claude-haiku-4-5"
DEFAULT_THRESHOLD = 6.0
TREND_TOLERANCE = 0.5


def _string_list(value) -> list[str]:
    """Items of a list field as strings; any other shape counts as empty."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


class QualityScorer:
    """
    Evaluates stage output quality.

    Usage:
        scorer = QualityScorer(client, threshold=6.0)
        report = await scorer.evaluate_stage_quality(stage)
        if report.should_revise:
            ...
    """

    def __init__(
        self,
        client,
        model: str = DEFAULT_QUALITY_MODEL,
        threshold: float = DEFAULT_THRESHOLD,
        max_tokens: int = 1000,
    ):
        self.client = client
        self.model = model
        self.threshold = threshold
        self.max_tokens = max_tokens

    async def evaluate_stage_quality(self, stage: Stage) -> QualityReport:
        stage_type = stage.type.value
        try:
            response = await self.client.execute(
                build_quality_evaluation_prompt(stage_type, stage.result),
                streaming_enabled=False,
                model=self.model,
                max_tokens=self.max_tokens,
            )
            data = parse_json_object(response.content)
            raw_scores = data.get("scores") if isinstance(data.get("scores"), dict) else {}
            scores = QualityScores.from_dict(raw_scores)
            overall = scores.overall
            report = QualityReport(
                stage_id=stage.id,
                stage_type=stage_type,
                scores=scores,
                overall_score=overall,
                should_revise=overall < self.threshold,
                strengths=_string_list(data.get("strengths")),
                weaknesses=_string_list(data.get("weaknesses")),
                improvements=_string_list(data.get("improvements")),
            )
        except Exception as e:
            log.warning("quality.scorer.evaluation_failed", stage_id=stage.id, error=str(e))
            return QualityReport.neutral(stage.id, stage_type)

        log.info(
            "quality.scorer.evaluated",
            stage_id=stage.id,
            stage_type=stage_type,
            overall=overall,
            should_revise=report.should_revise,
        )
        return report


@dataclass
class QualityStatistics:
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0
    needs_revision: int = 0
    total_stages: int = 0
    trend: str = "stable"
    by_dimension: dict[str, float] = field(default_factory=dict)


def quality_trend(reports: list[QualityReport]) -> str:
    """Compare the later half of the scores to the earlier half."""
    scores = [r.overall_score for r in reports]
    if len(scores) < 2:
        return "stable"
    half = len(scores) // 2
    earlier = sum(scores[:half]) / half
    later = sum(scores[half:]) / (len(scores) - half)
    if later - earlier > TREND_TOLERANCE:
        return "improving"
    if earlier - later > TREND_TOLERANCE:
        return "declining"
    return "stable"


def quality_statistics(reports: list[QualityReport]) -> QualityStatistics:
    if not reports:
        return QualityStatistics(by_dimension={name: 0.0 for name in QUALITY_DIMENSIONS})

    scores = [r.overall_score for r in reports]
    return QualityStatistics(
        average=round(sum(scores) / len(scores), 2),
        min=min(scores),
        max=max(scores),
        needs_revision=sum(1 for r in reports if r.should_revise),
        total_stages=len(reports),
        trend=quality_trend(reports),
        by_dimension={
            name: round(sum(getattr(r.scores, name) for r in reports) / len(reports), 2)
            for name in QUALITY_DIMENSIONS
        },
    )
