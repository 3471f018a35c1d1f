"""Artifact extraction, validation and metadata."""

from .pipeline import (
    ArtifactExtractionPipeline,
    ExtractionStats,
    enrich_artifact,
    extraction_stats,
    fallback_extraction,
)
from .validation import calculate_quality_score, validate_code, validate_non_code

__all__ = [
    "ArtifactExtractionPipeline",
    "ExtractionStats",
    "enrich_artifact",
    "extraction_stats",
    "fallback_extraction",
    "calculate_quality_score",
    "validate_code",
    "validate_non_code",
]
