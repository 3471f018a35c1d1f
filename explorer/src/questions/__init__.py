"""Question extraction, deduplication and answer tracking."""

from .answers import AnswerCandidate, extract_answers
from .extraction import QuestionCandidate, extract_questions, priority_from_markers
from .tracker import (
    AnswerMatchResult,
    QuestionLifecycleTracker,
    categorize_question,
    infer_priority,
    requires_research,
)

__all__ = [
    "AnswerCandidate",
    "extract_answers",
    "QuestionCandidate",
    "extract_questions",
    "priority_from_markers",
    "AnswerMatchResult",
    "QuestionLifecycleTracker",
    "categorize_question",
    "infer_priority",
    "requires_research",
]
