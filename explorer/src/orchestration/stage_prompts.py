"""
Stage prompt construction.

Every stage prompt shares the same frame (date, original input, journey
planning note, recent stage context, insights) and adds a stage-specific
objective and output format. The questioning and searching formats are the
ones the question tracker parses, so keep them in step with
questions/extraction.py and questions/answers.py.
"""

from datetime import datetime
from typing import Optional

from ..models.context import ExplorationContext
from ..models.question import QuestionPriority, QuestionStatus, TrackedQuestion
from ..models.stage import StageType

STAGE_OBJECTIVES = {
    StageType.DISCOVERING: (
        "Research and deeply explore this topic from multiple angles: core concepts, "
        "history, current state, interdisciplinary connections and edge cases."
    ),
    StageType.CHASING: (
        "Identify underlying problems, root causes and hidden opportunities that "
        "weren't immediately obvious. Separate surface symptoms from root causes."
    ),
    StageType.SOLVING: (
        "Generate 5-7 diverse solutions. For each give implementation details, "
        "feasibility, risks, first steps and success metrics, then rank them."
    ),
    StageType.CHALLENGING: (
        "Act as a rigorous adversary. Surface explicit, implicit and hidden "
        "assumptions, failure modes and blind spots, with mitigations."
    ),
    StageType.QUESTIONING: (
        "Generate 15-20 deep questions across clarifying, probing, hypothetical, "
        "challenge, meta and future-oriented categories."
    ),
    StageType.SEARCHING: (
        "Systematically answer the priority questions below with credible evidence, "
        "and note what remains uncertain."
    ),
    StageType.IMAGINING: (
        "Imagine at least four scenarios (best case, worst case, most likely, wildcard) "
        "with timelines, drivers and early warning signals."
    ),
    StageType.BUILDING: (
        "Build 1-3 concrete, immediately usable artifacts (code, documents, tables, "
        "diagrams, guides or frameworks) from everything learned so far."
    ),
}

QUESTIONING_FORMAT = [
    "=== RESPONSE FORMAT ===",
    "List every question on its own numbered line, prefixed with priority markers:",
    "  ⭐⭐⭐ critical, ⭐⭐ high, ⭐ medium, ⚪ low",
    "",
    "1. ⭐⭐⭐ Why does ...?",
    "2. ⭐⭐ How would ...?",
    "",
    "Each question must start with a capital letter and end with '?'.",
]

SEARCHING_FORMAT = [
    "=== RESPONSE FORMAT ===",
    "For each question you answer, copy it verbatim and use exactly:",
    "",
    "**Q:** [question verbatim from the list]",
    "**Answer**: [comprehensive answer]",
    "**Evidence**:",
    "- [specific fact or example] (Source: [citation])",
    "**Confidence Level**: verified | high | medium | low | speculative",
    "",
    "Leave a blank line between answers.",
]

BUILDING_FORMAT = [
    "=== RESPONSE FORMAT ===",
    "Put every code artifact in a fenced block tagged with its language.",
    "Give each artifact a title, usage instructions and its intended audience.",
]

PRIORITY_MARKERS = {
    QuestionPriority.CRITICAL: "🔴",
    QuestionPriority.HIGH: "🟠",
    QuestionPriority.MEDIUM: "🟡",
    QuestionPriority.LOW: "⚪",
}

RESULT_PREVIEW_CHARS = 200
SUMMARY_PREVIEW_CHARS = 300


def _date_line() -> str:
    return f"Current date: {datetime.now().strftime('%Y-%m-%d')}"


def _recent_stages(context: ExplorationContext, count: int, chars: int) -> list[str]:
    return [
        f"[{stage.label}]: {stage.result[:chars]}..."
        for stage in context.completed_stages[-count:]
    ]


def format_priority_questions(questions: list[TrackedQuestion]) -> str:
    if not questions:
        return "No specific questions to research - explore the topic broadly."
    lines = []
    for i, question in enumerate(questions, 1):
        partial = " [PARTIALLY ANSWERED]" if question.status == QuestionStatus.PARTIAL else ""
        lines.append(
            f"{i}. {PRIORITY_MARKERS[question.priority]} "
            f"[{question.priority.value.upper()}]{partial} {question.question}"
        )
    return "\n".join(lines)


class StagePromptBuilder:
    """Builds the prompt for each stage from the running context."""

    def __init__(self, insight_window: int = 10, stage_window: int = 3):
        self.insight_window = insight_window
        self.stage_window = stage_window

    def build(
        self,
        stage_type: StageType,
        context: ExplorationContext,
        stage_input: str,
        stages_remaining: Optional[int] = None,
        priority_questions: Optional[list[TrackedQuestion]] = None,
    ) -> str:
        prompt_parts = [
            f"You are in the {stage_type.value.upper()} stage of an exploration journey.",
            _date_line(),
            "",
            f"Original question: {stage_input}",
        ]

        if stages_remaining:
            prompt_parts.extend([
                "",
                f"Journey planning: {stages_remaining} stages remain, including this one.",
                "The last stage is reserved for a comprehensive summary.",
            ])

        if stage_type == StageType.CHASING and context.chased_topics:
            prompt_parts.extend(["", "=== TOPICS ALREADY CHASED (do not repeat) ==="])
            prompt_parts.extend(f"{i}. {topic}" for i, topic in enumerate(context.chased_topics, 1))
            prompt_parts.append("Find NEW problems and root causes in unexplored territory.")

        if context.completed_stages:
            prompt_parts.extend(["", "=== PREVIOUS STAGES ==="])
            prompt_parts.extend(
                _recent_stages(context, self.stage_window, RESULT_PREVIEW_CHARS)
            )

        if context.insights:
            prompt_parts.extend(["", "=== INSIGHTS SO FAR ==="])
            prompt_parts.extend(context.insights[-self.insight_window:])

        if stage_type == StageType.SEARCHING:
            questions = priority_questions or []
            prompt_parts.extend([
                "",
                f"=== PRIORITY QUESTIONS TO ANSWER ({len(questions)} open) ===",
                format_priority_questions(questions),
            ])

        prompt_parts.extend(["", "=== OBJECTIVE ===", STAGE_OBJECTIVES[stage_type], ""])

        if stage_type == StageType.QUESTIONING:
            prompt_parts.extend(QUESTIONING_FORMAT)
        elif stage_type == StageType.SEARCHING:
            prompt_parts.extend(SEARCHING_FORMAT)
        elif stage_type == StageType.BUILDING:
            prompt_parts.extend(BUILDING_FORMAT)
        else:
            prompt_parts.extend([
                "Be specific and information-dense. Distinguish facts from speculation",
                "and note your confidence where it matters.",
            ])

        return "\n".join(prompt_parts)

    def build_summary(self, context: ExplorationContext, stage_input: str) -> str:
        """Prompt for the final stage that synthesises the whole journey."""
        prompt_parts = [
            "You are creating the FINAL SUMMARY of this exploration journey.",
            _date_line(),
            "",
            f"Original question: {stage_input}",
            "",
            "Journey overview:",
            f"- Stages completed: {len(context.completed_stages)}",
            f"- Insights gathered: {len(context.insights)}",
            f"- Questions tracked: {len(context.tracked_questions)}",
            f"- Artifacts built: {len(context.artifacts)}",
        ]

        if context.insights:
            prompt_parts.extend(["", "=== ALL INSIGHTS ==="])
            prompt_parts.extend(context.insights)

        prompt_parts.extend(["", "=== STAGE HISTORY ==="])
        for stage in context.completed_stages:
            prompt_parts.append(
                f"Stage {stage.stage_number} - {stage.label.upper()}: "
                f"{stage.result[:SUMMARY_PREVIEW_CHARS]}..."
            )

        open_questions = [q for q in context.tracked_questions.values() if q.status.is_open]
        if open_questions:
            prompt_parts.extend(["", "=== STILL-OPEN QUESTIONS ==="])
            prompt_parts.extend(f"- {q.question}" for q in open_questions)

        prompt_parts.extend([
            "",
            "=== RESPONSE FORMAT ===",
            "# Journey Summary: [title]",
            "## Executive Summary",
            "## Key Findings (5-10, each with evidence)",
            "## Critical Questions Addressed",
            "## Recommendations & Next Steps (immediate, 1-3 months, 3+ months)",
            "## Artifacts Created",
            "## Areas for Further Exploration",
        ])
        return "\n".join(prompt_parts)
