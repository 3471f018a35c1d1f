"""
Answer block extraction from searching-stage output.

The searching prompt asks for blocks shaped like::

    **Q:** Why does the cache miss?
    **Answer**: Because keys are rebuilt on every deploy.
    **Evidence**:
    - deploy logs show key churn
    **Confidence Level**: high

Confidence labels are matched to answers by position (the n-th confidence
label belongs to the n-th answer). If the text interleaves blocks
irregularly a confidence can land on the wrong answer.
"""

import re
from dataclasses import dataclass, field

from ..models.question import ConfidenceLevel

ANSWER_BLOCK_PATTERN = re.compile(
    r"(?<![A-Za-z])(?:\*\*)?Q:(?:\*\*)?\s*(?P<question>[^\n]+?)\s*(?:\*\*)?[ \t]*\n"
    r"\s*(?:\*\*)?Answer(?:\*\*)?:(?:\*\*)?\s*(?P<answer>.+?)"
    r"(?=\n\s*\n|\n\s*\*\*|\n\s*(?:Evidence|Sources?|Confidence(?: Level)?):|\Z)",
    re.DOTALL,
)
CONFIDENCE_PATTERN = re.compile(
    r"(?:\*\*)?Confidence(?: Level)?(?:\*\*)?:(?:\*\*)?\s*(verified|high|medium|low|speculative)",
    re.IGNORECASE,
)
EVIDENCE_PATTERN = re.compile(
    r"(?:\*\*)?Evidence(?:\*\*)?:(?:\*\*)?[ \t]*\n(?P<body>.*?)(?=\n\s*\*\*|\n\s*\n|\Z)",
    re.DOTALL | re.IGNORECASE,
)

DEFAULT_CONFIDENCE = ConfidenceLevel.MEDIUM


@dataclass
class AnswerCandidate:
    question: str
    answer: str
    confidence: ConfidenceLevel = DEFAULT_CONFIDENCE
    evidence: list[str] = field(default_factory=list)


def _evidence_lines(segment: str) -> list[str]:
    match = EVIDENCE_PATTERN.search(segment)
    if not match:
        return []
    return [
        line.strip()
        for line in match.group("body").split("\n")
        if line.strip().startswith("-")
    ]


def extract_answers(content: str) -> list[AnswerCandidate]:
    """Extract (question, answer) pairs with their confidence and evidence."""
    answer_matches = list(ANSWER_BLOCK_PATTERN.finditer(content))
    confidences = [
        ConfidenceLevel(m.group(1).lower()) for m in CONFIDENCE_PATTERN.finditer(content)
    ]

    candidates = []
    for i, match in enumerate(answer_matches):
        # Evidence belongs to the text between this block and the next one
        segment_end = (
            answer_matches[i + 1].start() if i + 1 < len(answer_matches) else len(content)
        )
        segment = content[match.end():segment_end]
        candidates.append(
            AnswerCandidate(
                question=match.group("question").strip().strip("*").strip(),
                answer=match.group("answer").strip(),
                confidence=confidences[i] if i < len(confidences) else DEFAULT_CONFIDENCE,
                evidence=_evidence_lines(segment),
            )
        )
    return candidates
