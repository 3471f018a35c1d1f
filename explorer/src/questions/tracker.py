"""
Question lifecycle tracking.

Keeps the canonical set of questions raised during a journey, deduplicated
by text similarity, and follows each one from unanswered to answered.
One tracker belongs to one journey; never share it across journeys.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from shared.logging import get_logger
from shared.similarity import JaccardWordSimilarity, SimilarityStrategy

from ..models.question import (
    CONFIDENCE_WEIGHTS,
    PRIORITY_ORDER,
    ConfidenceLevel,
    QuestionCategory,
    QuestionMetrics,
    QuestionPriority,
    QuestionStatus,
    TrackedQuestion,
    generate_question_id,
)
from .answers import AnswerCandidate, extract_answers
from .extraction import extract_questions

log = get_logger("explorer", "questions.tracker")

DEDUP_THRESHOLD = 0.85
ANSWER_MATCH_THRESHOLD = 0.8

CRITICAL_KEYWORDS = ("why", "root cause", "fundamental", "assumption", "critical")
HIGH_KEYWORDS = ("how", "what if", "evidence", "impact", "consequence")
LOW_KEYWORDS = ("what is", "define", "example")
RESEARCH_KEYWORDS = (
    "evidence", "data", "study", "research", "statistics", "source", "example", "case",
)


def infer_priority(question: str) -> QuestionPriority:
    """Guess a priority from the wording of the question."""
    lower = question.lower()
    if any(keyword in lower for keyword in CRITICAL_KEYWORDS):
        return QuestionPriority.CRITICAL
    if any(keyword in lower for keyword in HIGH_KEYWORDS):
        return QuestionPriority.HIGH
    if any(keyword in lower for keyword in LOW_KEYWORDS):
        return QuestionPriority.LOW
    return QuestionPriority.MEDIUM


def requires_research(question: str) -> bool:
    lower = question.lower()
    return any(keyword in lower for keyword in RESEARCH_KEYWORDS)


def categorize_question(question: str) -> QuestionCategory:
    lower = question.lower().strip()
    if lower.startswith("why"):
        return QuestionCategory.PROBING
    if lower.startswith("what if"):
        return QuestionCategory.HYPOTHETICAL
    if lower.startswith("how"):
        return QuestionCategory.CLARIFYING
    if "challenge" in lower or "disagree" in lower:
        return QuestionCategory.CHALLENGE
    if "future" in lower or "will" in lower:
        return QuestionCategory.FUTURE
    if "should we" in lower or "are we" in lower:
        return QuestionCategory.META
    return QuestionCategory.CLARIFYING


@dataclass
class AnswerMatchResult:
    """Outcome of matching one searching stage's answers to tracked questions."""
    matched: list[tuple[str, AnswerCandidate]] = field(default_factory=list)
    unmatched: list[AnswerCandidate] = field(default_factory=list)

    @property
    def matched_count(self) -> int:
        return len(self.matched)


class QuestionLifecycleTracker:
    """
    Canonical question store for one journey.

    Usage:
        tracker = QuestionLifecycleTracker()
        q = tracker.track_question("Why does X happen?", 5, "questioning")
        tracker.mark_answered(q.id, "Because Y.", ConfidenceLevel.HIGH, 6)
    """

    def __init__(
        self,
        similarity: Optional[SimilarityStrategy] = None,
        dedup_threshold: float = DEDUP_THRESHOLD,
        answer_match_threshold: float = ANSWER_MATCH_THRESHOLD,
    ):
        self.similarity = similarity or JaccardWordSimilarity()
        self.dedup_threshold = dedup_threshold
        self.answer_match_threshold = answer_match_threshold
        self.questions: dict[str, TrackedQuestion] = {}
        self._by_stage: dict[int, list[str]] = {}
        self._by_priority: dict[QuestionPriority, list[str]] = {
            priority: [] for priority in PRIORITY_ORDER
        }

    def __len__(self) -> int:
        return len(self.questions)

    # --- lifecycle -------------------------------------------------------

    def track_question(
        self,
        text: str,
        stage_number: int,
        stage_type: str,
        priority: Optional[QuestionPriority] = None,
    ) -> TrackedQuestion:
        """
        Track a question, or return the existing record if a near-identical
        one is already tracked.
        """
        existing = self._find_similar(text)
        if existing:
            log.info(
                "questions.tracker.duplicate",
                question_id=existing.id,
                question=text[:60],
            )
            return existing

        determined = priority or infer_priority(text)
        question = TrackedQuestion(
            id=generate_question_id(),
            question=text.strip(),
            asked_in_stage=stage_number,
            stage_type=stage_type,
            priority=determined,
            category=categorize_question(text),
            requires_research=requires_research(text),
        )

        self.questions[question.id] = question
        self._by_stage.setdefault(stage_number, []).append(question.id)
        self._by_priority[determined].append(question.id)

        log.info(
            "questions.tracker.tracked",
            question_id=question.id,
            priority=determined.value,
            question=text[:60],
        )
        return question

    def mark_answered(
        self,
        question_id: str,
        answer: str,
        confidence: ConfidenceLevel,
        answered_in_stage: Optional[int] = None,
        evidence: Optional[list[str]] = None,
    ) -> None:
        question = self._get_or_warn(question_id)
        if not question:
            return

        question.status = QuestionStatus.ANSWERED
        question.answer = answer.strip()
        question.confidence = confidence
        question.answered_in_stage = answered_in_stage
        question.evidence = list(evidence or [])
        question.updated_at = datetime.now()

        log.info(
            "questions.tracker.answered",
            question_id=question_id,
            confidence=confidence.value,
        )

    def mark_partial(
        self,
        question_id: str,
        partial_answer: str,
        confidence: ConfidenceLevel,
        answered_in_stage: Optional[int] = None,
    ) -> None:
        question = self._get_or_warn(question_id)
        if not question:
            return
        if not question.status.is_open:
            log.warning(
                "questions.tracker.partial_ignored",
                question_id=question_id,
                status=question.status.value,
            )
            return

        question.status = QuestionStatus.PARTIAL
        question.answer = partial_answer.strip()
        question.confidence = confidence
        question.answered_in_stage = answered_in_stage
        question.research_attempts += 1
        question.updated_at = datetime.now()

        log.info(
            "questions.tracker.partial",
            question_id=question_id,
            research_attempts=question.research_attempts,
        )

    def mark_obsolete(self, question_id: str) -> None:
        question = self._get_or_warn(question_id)
        if not question:
            return
        if not question.status.is_open:
            log.warning(
                "questions.tracker.obsolete_ignored",
                question_id=question_id,
                status=question.status.value,
            )
            return

        question.status = QuestionStatus.OBSOLETE
        question.updated_at = datetime.now()
        log.info("questions.tracker.obsolete", question_id=question_id)

    def link_to_insight(self, question_id: str, insight_id: str) -> None:
        question = self._get_or_warn(question_id)
        if not question:
            return
        if insight_id not in question.related_insight_ids:
            question.related_insight_ids.append(insight_id)
            question.updated_at = datetime.now()

    def clear(self) -> None:
        """Forget every question (for a new journey)."""
        self.questions.clear()
        self._by_stage.clear()
        for ids in self._by_priority.values():
            ids.clear()

    # --- stage entry points ----------------------------------------------

    def track_from_output(
        self, content: str, stage_number: int, stage_type: str
    ) -> list[TrackedQuestion]:
        """Extract and track every question in a questioning stage's output."""
        tracked = []
        seen = set()
        for candidate in extract_questions(content):
            question = self.track_question(
                candidate.text, stage_number, stage_type, candidate.priority
            )
            if question.id not in seen:
                seen.add(question.id)
                tracked.append(question)

        log.info(
            "questions.tracker.extracted",
            stage_number=stage_number,
            found=len(tracked),
            total=len(self.questions),
        )
        return tracked

    def match_answers(self, content: str, stage_number: int) -> AnswerMatchResult:
        """Mark tracked questions answered from a searching stage's output."""
        result = AnswerMatchResult()
        for candidate in extract_answers(content):
            question = self.find_matching_question(candidate.question)
            if question is None:
                log.warning(
                    "questions.tracker.unmatched_answer",
                    question=candidate.question[:60],
                    stage_number=stage_number,
                )
                result.unmatched.append(candidate)
                continue

            self.mark_answered(
                question.id,
                candidate.answer,
                candidate.confidence,
                stage_number,
                candidate.evidence,
            )
            result.matched.append((question.id, candidate))

        log.info(
            "questions.tracker.answers_matched",
            stage_number=stage_number,
            matched=result.matched_count,
            unmatched=len(result.unmatched),
        )
        return result

    def find_matching_question(self, text: str) -> Optional[TrackedQuestion]:
        """Exact normalized match first, else the best match at or above the threshold."""
        for question in self.questions.values():
            if self.similarity.is_exact_match(text, question.question):
                return question

        best, best_score = None, 0.0
        for question in self.questions.values():
            score = self.similarity.similarity(text, question.question)
            if score > best_score:
                best, best_score = question, score
        if best is not None and best_score >= self.answer_match_threshold:
            return best
        return None

    # --- queries ----------------------------------------------------------

    def get_question(self, question_id: str) -> Optional[TrackedQuestion]:
        return self.questions.get(question_id)

    def get_all_questions(self) -> list[TrackedQuestion]:
        return list(self.questions.values())

    def export(self) -> list[dict]:
        return [q.to_dict() for q in self.questions.values()]

    def get_unanswered_questions(self) -> list[TrackedQuestion]:
        """Questions still open (unanswered or partial)."""
        return [q for q in self.questions.values() if q.status.is_open]

    def get_questions_requiring_research(self) -> list[TrackedQuestion]:
        return [
            q for q in self.questions.values()
            if q.status.is_open and q.requires_research
        ]

    def get_questions_by_stage(self, stage_number: int) -> list[TrackedQuestion]:
        return [self.questions[qid] for qid in self._by_stage.get(stage_number, [])]

    def get_priority_questions(self, limit: int = 10) -> list[TrackedQuestion]:
        """Open questions, critical first, in tracking order within a priority."""
        results = []
        for priority in PRIORITY_ORDER:
            for qid in self._by_priority[priority]:
                question = self.questions[qid]
                if question.status.is_open:
                    results.append(question)
                    if len(results) >= limit:
                        return results
        return results

    def get_metrics(self) -> QuestionMetrics:
        questions = list(self.questions.values())
        by_status = {status: 0 for status in QuestionStatus}
        for q in questions:
            by_status[q.status] += 1

        high_priority_unanswered = sum(
            1 for q in questions
            if q.status == QuestionStatus.UNANSWERED
            and q.priority in (QuestionPriority.CRITICAL, QuestionPriority.HIGH)
        )

        weights = [
            CONFIDENCE_WEIGHTS[q.confidence]
            for q in questions
            if q.status == QuestionStatus.ANSWERED and q.confidence
        ]
        average_confidence = sum(weights) / len(weights) if weights else 0.0

        return QuestionMetrics(
            total_questions=len(questions),
            unanswered_count=by_status[QuestionStatus.UNANSWERED],
            partial_count=by_status[QuestionStatus.PARTIAL],
            answered_count=by_status[QuestionStatus.ANSWERED],
            obsolete_count=by_status[QuestionStatus.OBSOLETE],
            high_priority_unanswered=high_priority_unanswered,
            average_confidence=average_confidence,
        )

    # --- helpers ------------------------------------------------------------

    def _get_or_warn(self, question_id: str) -> Optional[TrackedQuestion]:
        question = self.questions.get(question_id)
        if question is None:
            log.warning("questions.tracker.not_found", question_id=question_id)
        return question

    def _find_similar(self, text: str) -> Optional[TrackedQuestion]:
        for existing in self.questions.values():
            if self.similarity.is_exact_match(text, existing.question):
                return existing
            if self.similarity.similarity(text, existing.question) > self.dedup_threshold:
                return existing
        return None
