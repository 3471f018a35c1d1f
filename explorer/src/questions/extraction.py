"""
Question extraction from questioning-stage output.

Two shapes are recognised:
- numbered lines, optionally prefixed with priority markers
  (``1. ⭐⭐⭐ Why does the cache miss?``)
- bullet lines (``- How is the budget split?``)

Only capitalised sentences ending in ``?`` count as questions.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..models.question import QuestionPriority

NUMBERED_QUESTION_PATTERN = re.compile(
    r"(?:^|\n)\d+\.\s*([⭐🔴🟠🟡⚪]*)\s*([A-Z][^?\n]+\?)"
)
BULLET_QUESTION_PATTERN = re.compile(r"(?:^|\n)[-•]\s*([A-Z][^?\n]+\?)")


@dataclass
class QuestionCandidate:
    text: str
    priority: Optional[QuestionPriority] = None


def priority_from_markers(markers: str) -> Optional[QuestionPriority]:
    """Map emoji priority markers to a priority; None when there are none."""
    if not markers:
        return None
    if "⭐⭐⭐" in markers or "🔴" in markers:
        return QuestionPriority.CRITICAL
    if "⭐⭐" in markers or "🟠" in markers:
        return QuestionPriority.HIGH
    if "⭐" in markers or "🟡" in markers:
        return QuestionPriority.MEDIUM
    if "⚪" in markers:
        return QuestionPriority.LOW
    return None


def extract_questions(content: str) -> list[QuestionCandidate]:
    """Pull question candidates out of free text, numbered lines first."""
    candidates = []
    for match in NUMBERED_QUESTION_PATTERN.finditer(content):
        candidates.append(
            QuestionCandidate(
                text=match.group(2).strip(),
                priority=priority_from_markers(match.group(1)),
            )
        )
    for match in BULLET_QUESTION_PATTERN.finditer(content):
        candidates.append(QuestionCandidate(text=match.group(1).strip()))
    return candidates
