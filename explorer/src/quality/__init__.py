"""Stage quality scoring."""

from .scorer import QualityScorer, QualityStatistics, quality_statistics, quality_trend

__all__ = ["QualityScorer", "QualityStatistics", "quality_statistics", "quality_trend"]
