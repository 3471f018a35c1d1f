"""
Pluggable string-similarity strategies.

Question deduplication and answer matching both go through a
SimilarityStrategy, so the algorithm can be swapped without touching the
lifecycle code that consumes the scores.
"""

from abc import ABC, abstractmethod

from .text_processing import jaccard_similarity, normalize_text, word_set


class SimilarityStrategy(ABC):
    """Compares two strings and returns a score in [0, 1]."""

    name: str = "base"

    def normalize(self, text: str) -> str:
        return normalize_text(text)

    def is_exact_match(self, a: str, b: str) -> bool:
        """True when both strings normalize to the same text."""
        return self.normalize(a) == self.normalize(b)

    @abstractmethod
    def similarity(self, a: str, b: str) -> float:
        """Score in [0, 1]. Must be symmetric."""


class JaccardWordSimilarity(SimilarityStrategy):
    """Intersection over union of the normalized word sets."""

    name = "jaccard"

    def similarity(self, a: str, b: str) -> float:
        return jaccard_similarity(word_set(a), word_set(b))


_STRATEGIES = {
    JaccardWordSimilarity.name: JaccardWordSimilarity,
}


def get_similarity_strategy(name: str = "jaccard") -> SimilarityStrategy:
    """Build a strategy by its configured name."""
    try:
        return _STRATEGIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown similarity strategy '{name}'. "
            f"Available: {', '.join(sorted(_STRATEGIES))}"
        ) from None
