"""Tests for stage prompt building and chased-topic extraction."""

from explorer.src.models import (
    ExplorationContext,
    QuestionStatus,
    Stage,
    StageStatus,
    StageType,
)
from explorer.src.orchestration.stage_prompts import (
    StagePromptBuilder,
    format_priority_questions,
)
from explorer.src.orchestration.topics import extract_chased_topics
from explorer.src.questions import QuestionLifecycleTracker

INPUT = "How do small teams ship faster?"


def context_with_stages(count: int) -> ExplorationContext:
    context = ExplorationContext(journey_id="journey_1", original_input=INPUT)
    for i in range(count):
        stage = Stage.create("journey_1", StageType.DISCOVERING, i + 1)
        stage.status = StageStatus.COMPLETE
        stage.result = f"Result of stage {i + 1}"
        context.completed_stages.append(stage)
    context.current_stage_index = count - 1
    return context


class TestStagePromptBuilder:
    """Tests for StagePromptBuilder."""

    def test_frame(self):
        builder = StagePromptBuilder()
        prompt = builder.build(StageType.DISCOVERING, context_with_stages(0), INPUT, 8)

        assert prompt.startswith("You are in the DISCOVERING stage")
        assert f"Original question: {INPUT}" in prompt
        assert "8 stages remain" in prompt
        assert "PREVIOUS STAGES" not in prompt

    def test_recent_stages_window(self):
        builder = StagePromptBuilder(stage_window=2)
        prompt = builder.build(StageType.SOLVING, context_with_stages(4), INPUT)

        assert "Result of stage 4" in prompt
        assert "Result of stage 3" in prompt
        assert "Result of stage 2" not in prompt
        assert "stages remain" not in prompt

    def test_insight_window(self):
        context = context_with_stages(1)
        context.insights = [f"[discovery] insight {i}" for i in range(12)]

        prompt = StagePromptBuilder(insight_window=10).build(StageType.SOLVING, context, INPUT)

        assert "insight 11" in prompt
        assert "insight 1\n" not in prompt

    def test_chasing_lists_chased_topics(self):
        context = context_with_stages(1)
        context.add_chased_topic("release batches are too large")

        prompt = StagePromptBuilder().build(StageType.CHASING, context, INPUT)

        assert "TOPICS ALREADY CHASED" in prompt
        assert "1. release batches are too large" in prompt

    def test_questioning_format(self):
        prompt = StagePromptBuilder().build(StageType.QUESTIONING, context_with_stages(4), INPUT)
        assert "⭐⭐⭐ critical" in prompt

    def test_searching_lists_priority_questions(self):
        tracker = QuestionLifecycleTracker()
        critical = tracker.track_question("Why do deploys fail?", 5, "questioning")
        tracker.track_question("Which team owns billing?", 5, "questioning")
        tracker.questions[critical.id].status = QuestionStatus.PARTIAL

        prompt = StagePromptBuilder().build(
            StageType.SEARCHING,
            context_with_stages(5),
            INPUT,
            priority_questions=tracker.get_priority_questions(15),
        )

        assert "PRIORITY QUESTIONS TO ANSWER (2 open)" in prompt
        assert "1. 🔴 [CRITICAL] [PARTIALLY ANSWERED] Why do deploys fail?" in prompt
        assert "2. 🟡 [MEDIUM] Which team owns billing?" in prompt
        assert "**Answer**:" in prompt

    def test_format_without_questions(self):
        assert "explore the topic broadly" in format_priority_questions([])

    def test_summary_prompt(self):
        context = context_with_stages(7)
        context.insights = ["[problem] Releases are too big"]
        tracker = QuestionLifecycleTracker()
        tracker.track_question("Why do deploys fail?", 5, "questioning")
        context.tracked_questions = tracker.questions

        prompt = StagePromptBuilder().build_summary(context, INPUT)

        assert prompt.startswith("You are creating the FINAL SUMMARY")
        assert "- Stages completed: 7" in prompt
        assert "[problem] Releases are too big" in prompt
        assert "STILL-OPEN QUESTIONS" in prompt
        assert "# Journey Summary" in prompt


class TestExtractChasedTopics:
    """Tests for chased-topic extraction."""

    def test_headers_and_phrases(self):
        content = (
            "1. **Release batching is out of control**\n"
            "Root cause: reviewers cannot keep up with change volume\n"
            "Assumption: every service needs the same release cadence\n"
        )

        topics = extract_chased_topics(content)

        assert topics == [
            "Release batching is out of control",
            "reviewers cannot keep up with change volume",
            "every service needs the same release cadence",
        ]

    def test_filters_short_and_boilerplate(self):
        content = (
            "Problem: too short\n"
            "Issue: follow the structured approach below for every step\n"
        )
        assert extract_chased_topics(content) == []

    def test_no_duplicates(self):
        content = "Problem: reviewers cannot keep up\nProblem: reviewers cannot keep up\n"
        assert extract_chased_topics(content) == ["reviewers cannot keep up"]
