"""Insight extraction from stage output."""

from .extractor import InsightExtractor, insight_quality_score, insight_tags

__all__ = ["InsightExtractor", "insight_quality_score", "insight_tags"]
