"""
Text similarity used for question deduplication and answer matching.

Usage:
    from shared.similarity import get_similarity_strategy

    matcher = get_similarity_strategy("jaccard")
    score = matcher.similarity("Why does X happen?", "why does x happen")
"""

from .strategies import (
    JaccardWordSimilarity,
    SimilarityStrategy,
    get_similarity_strategy,
)
from .text_processing import jaccard_similarity, normalize_text, word_set

__all__ = [
    "SimilarityStrategy",
    "JaccardWordSimilarity",
    "get_similarity_strategy",
    "normalize_text",
    "word_set",
    "jaccard_similarity",
]
