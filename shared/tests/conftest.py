"""Shared fixtures for shared library tests."""

import pytest

from shared.similarity import JaccardWordSimilarity


@pytest.fixture
def jaccard():
    """Default word-set similarity strategy."""
    return JaccardWordSimilarity()


@pytest.fixture
def phrase_pairs():
    """Pairs of phrases with varying overlap."""
    return [
        ("Why does X happen?", "why does x happen"),
        ("How does caching affect latency?", "What limits throughput?"),
        ("", "Some question"),
        ("root cause of outages", "the root cause of the outages"),
        ("!!!", "???"),
    ]
