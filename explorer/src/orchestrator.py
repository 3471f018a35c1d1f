"""
Orchestrator - drives one exploration journey through the stage cycle.

Each stage:
- builds its prompt from the running context
- streams a generative call, fanning partial output out to observers
- routes the result to the collaborators for its stage type
  (insights always; chased topics, questions, answers or artifacts by type)
- optionally scores quality and logs any revision recommendation
- persists the stage (best effort) and decides what happens next

The next stage is never run inline. It is scheduled after a short delay,
and the journey status is re-read before it runs, so a pause or stop issued
in between always wins.
"""

import asyncio
from datetime import datetime
from typing import Optional

from llm.src.models import ChunkType, StreamChunk
from shared.logging import get_logger
from shared.similarity import get_similarity_strategy

from explorer.src.artifacts import ArtifactExtractionPipeline
from explorer.src.config import ExplorationConfig
from explorer.src.errors import ExplorationError, JourneyNotStartedError
from explorer.src.insights import InsightExtractor
from explorer.src.models import (
    SUMMARY_STAGE_TYPE,
    ExplorationContext,
    JourneyStatus,
    QualityReport,
    RevisionDecision,
    Stage,
    StageStatus,
    StageType,
    stage_type_for_index,
)
from explorer.src.orchestration.control import NextAction, decide_next_action
from explorer.src.orchestration.observers import (
    CallbackObserver,
    ObserverSet,
    StageObserver,
    StreamEvent,
)
from explorer.src.orchestration.stage_prompts import StagePromptBuilder
from explorer.src.orchestration.topics import extract_chased_topics
from explorer.src.quality import QualityScorer
from explorer.src.questions import QuestionLifecycleTracker
from explorer.src.storage.db import generate_journey_id

log = get_logger("explorer", "orchestrator")


class StageOrchestrator:
    """
    Runs one journey, one stage at a time.

    Usage:
        orchestrator = StageOrchestrator(config, client, store=db)
        stage = await orchestrator.start("How do small teams ship faster?")
        await orchestrator.wait_until_idle()

    ``store`` is the journey-status collaborator (a JourneyDatabase or anything
    with the same methods). Without one, status lives in memory and is changed
    through pause(), stop() and resume().
    """

    def __init__(
        self,
        config: ExplorationConfig,
        client,
        store=None,
        insight_extractor: Optional[InsightExtractor] = None,
        quality_scorer: Optional[QualityScorer] = None,
        artifact_pipeline: Optional[ArtifactExtractionPipeline] = None,
        prompt_builder: Optional[StagePromptBuilder] = None,
        similarity=None,
        journey_id: Optional[str] = None,
    ):
        self.config = config
        self.client = client
        self.store = store

        self.insight_extractor = insight_extractor or InsightExtractor(
            client, model=config.insight_model
        )
        if quality_scorer is None and config.enable_quality_scoring:
            quality_scorer = QualityScorer(
                client, model=config.quality_model, threshold=config.quality_threshold
            )
        self.quality_scorer = quality_scorer
        self.artifact_pipeline = artifact_pipeline or ArtifactExtractionPipeline(
            client, model=config.artifact_model
        )
        self.prompt_builder = prompt_builder or StagePromptBuilder()

        # One tracker per journey; the context exposes its question map
        self.tracker = QuestionLifecycleTracker(
            similarity or get_similarity_strategy(config.similarity_strategy),
            dedup_threshold=config.dedup_threshold,
            answer_match_threshold=config.answer_match_threshold,
        )
        self.context = ExplorationContext(journey_id=journey_id or generate_journey_id())
        self.context.tracked_questions = self.tracker.questions

        self.observers = ObserverSet()
        self.status = JourneyStatus.RUNNING
        self.active_stage: Optional[Stage] = None

        self._started = False
        self._lock = asyncio.Lock()
        self._scheduled: Optional[asyncio.Task] = None

    @property
    def journey_id(self) -> str:
        return self.context.journey_id

    # --- public operations ----------------------------------------------

    async def start(self, input_text: str) -> Stage:
        """Begin the journey with the first stage of the cycle."""
        if self._started:
            raise ExplorationError(f"Journey {self.journey_id} has already started")

        self._started = True
        self.context.original_input = input_text
        self.status = JourneyStatus.RUNNING
        log.info(
            "orchestrator.journey.started",
            journey_id=self.journey_id,
            max_stages=self.config.max_stages,
            auto_progress=self.config.auto_progress,
        )

        if self.store is not None:
            try:
                await asyncio.to_thread(
                    self.store.create_journey,
                    input_text,
                    self.config.max_stages,
                    self.journey_id,
                )
            except Exception as e:
                log.warning(
                    "orchestrator.persistence_failed",
                    operation="create_journey",
                    journey_id=self.journey_id,
                    error=str(e),
                )

        return await self._run_stage()

    async def next(self) -> Stage:
        """Run the stage after the last completed one (a summary if it is the last allowed)."""
        if not self._started:
            raise JourneyNotStartedError("next() called before start()")
        if self.status != JourneyStatus.COMPLETE and self._is_finished():
            await self._set_status(JourneyStatus.COMPLETE)
        if self.status == JourneyStatus.COMPLETE:
            raise ExplorationError(f"Journey {self.journey_id} is already complete")
        return await self._run_stage()

    async def pause(self) -> None:
        await self._set_status(JourneyStatus.PAUSED)

    async def stop(self) -> None:
        """Request a stop; the journey ends with one summary stage."""
        await self._set_status(JourneyStatus.STOPPED)

    async def resume(self) -> None:
        """Resume a paused journey by scheduling its next stage."""
        if self.status != JourneyStatus.PAUSED:
            return
        if self._is_finished():
            await self._set_status(JourneyStatus.COMPLETE)
            return
        await self._set_status(JourneyStatus.RUNNING)
        if self._started and not self._is_busy():
            self._schedule(summary=False)

    async def wait_until_idle(self) -> None:
        """Wait until no stage is scheduled or running."""
        while self._scheduled is not None and not self._scheduled.done():
            await self._scheduled

    def get_context(self) -> ExplorationContext:
        """A deep copy of the running context."""
        return self.context.snapshot()

    def add_observer(self, observer) -> StageObserver:
        """Register an observer; a plain callable receives StreamEvents."""
        if not isinstance(observer, StageObserver):
            observer = CallbackObserver(observer)
        self.observers.add(observer)
        return observer

    def remove_observer(self, observer: StageObserver) -> None:
        self.observers.remove(observer)

    def get_summary(self) -> str:
        """Human-readable dump of the journey so far."""
        context = self.context
        current = (
            stage_type_for_index(context.current_stage_index).value
            if context.current_stage_index >= 0 else "not started"
        )
        metrics = self.tracker.get_metrics()
        lines = [
            "Journey Summary",
            "===============",
            f"ID: {context.journey_id}",
            f"Status: {self.status.value}",
            f"Stages Completed: {len(context.completed_stages)}",
            f"Current Stage: {current}",
            f"Insights: {len(context.insights)}",
            f"Questions: {metrics.total_questions} "
            f"({metrics.answered_count} answered, {metrics.unanswered_count} unanswered)",
            f"Artifacts: {len(context.artifacts)}",
            "",
            "Stages:",
        ]
        for i, stage in enumerate(context.completed_stages, 1):
            score = f" [quality {stage.quality_score:.1f}]" if stage.quality_score is not None else ""
            lines.append(
                f"{i}. {stage.label.upper()} - {stage.status.value} "
                f"({stage.created_at.strftime('%H:%M:%S')}){score}"
            )
        return "\n".join(lines)

    # --- stage execution ------------------------------------------------

    async def _run_stage(self, summary: Optional[bool] = None) -> Stage:
        async with self._lock:
            stages_remaining = self._stages_remaining()
            if summary is None:
                summary = stages_remaining == 1
            stage_type = (
                SUMMARY_STAGE_TYPE if summary
                else stage_type_for_index(self.context.current_stage_index + 1)
            )

            stage = await self._execute_stage(stage_type, summary, stages_remaining)
            await self._persist_stage(stage)

            self.context.completed_stages.append(stage)
            self.context.current_stage_index = stage.stage_number - 1

        await self._after_stage(stage)
        return stage

    def _stages_remaining(self) -> Optional[int]:
        if self.config.max_stages is None:
            return None
        return self.config.max_stages - len(self.context.completed_stages)

    async def _execute_stage(
        self,
        stage_type: StageType,
        is_summary: bool,
        stages_remaining: Optional[int],
    ) -> Stage:
        stage_number = len(self.context.completed_stages) + 1
        stage = Stage.create(self.journey_id, stage_type, stage_number, is_summary=is_summary)

        if is_summary:
            stage.prompt = self.prompt_builder.build_summary(
                self.context, self.context.original_input
            )
        else:
            priority_questions = None
            if stage_type == StageType.SEARCHING:
                priority_questions = self.tracker.get_priority_questions(
                    self.config.searching_question_limit
                )
            stage.prompt = self.prompt_builder.build(
                stage_type,
                self.context,
                self.context.original_input,
                stages_remaining=stages_remaining,
                priority_questions=priority_questions,
            )

        stage.status = StageStatus.RUNNING
        self.active_stage = stage
        self.observers.stage_started(stage)
        log.info(
            "orchestrator.stage.started",
            journey_id=self.journey_id,
            stage_number=stage_number,
            stage_type=stage.label,
            stages_remaining=stages_remaining,
        )

        try:
            response = await self.client.execute(
                stage.prompt,
                streaming_enabled=True,
                on_chunk=lambda chunk: self._on_stream(stage, chunk),
                on_thinking=lambda chunk: self._on_stream(stage, chunk),
                model=self.config.model_for(stage_type),
                thinking_budget=self.config.thinking_budget_for(stage_type),
                max_tokens=self.config.max_tokens,
            )
        except Exception as e:
            stage.status = StageStatus.ERROR
            stage.error = str(e)
            stage.result = f"Error: {e}"
            log.error(
                "orchestrator.stage.failed",
                journey_id=self.journey_id,
                stage_number=stage_number,
                stage_type=stage.label,
                error=str(e),
            )
        else:
            stage.result = response.content
            stage.thinking = response.thinking or None
            await self._process_output(stage)

            stage.status = StageStatus.COMPLETE
            log.info(
                "orchestrator.stage.completed",
                journey_id=self.journey_id,
                stage_number=stage_number,
                stage_type=stage.label,
                insights=len(self.context.insights),
                questions=len(self.tracker),
                artifacts=len(self.context.artifacts),
            )

        stage.completed_at = datetime.now()
        self.active_stage = None
        self.observers.stage_finished(stage)
        return stage

    def _on_stream(self, stage: Stage, chunk: StreamChunk) -> None:
        if chunk.type == ChunkType.THINKING:
            stage.thinking = (stage.thinking or "") + chunk.text
        else:
            stage.result += chunk.text
        self.observers.stream_event(StreamEvent(stage.id, chunk.type, chunk.text))

    async def _process_output(self, stage: Stage) -> None:
        """Routing and scoring; a failure here never discards the stage output."""
        try:
            await self._route_output(stage)
        except Exception as e:
            log.warning(
                "orchestrator.routing_failed",
                stage_id=stage.id,
                stage_type=stage.label,
                error=str(e),
            )

        if self.quality_scorer is None or stage.is_summary:
            return
        try:
            await self._score_quality(stage)
        except Exception as e:
            log.warning(
                "orchestrator.quality_failed",
                stage_id=stage.id,
                stage_type=stage.label,
                error=str(e),
            )

    async def _route_output(self, stage: Stage) -> None:
        """Feed the stage result to the collaborators for its type."""
        content = stage.result
        stage_type = stage.type

        insights = await self.insight_extractor.extract_insights(
            content, stage_type.value, stage.stage_number
        )
        self.context.rich_insights.extend(insights)
        self.context.insights.extend(insight.summary_line for insight in insights)

        if stage_type == StageType.CHASING:
            added = [t for t in extract_chased_topics(content) if self.context.add_chased_topic(t)]
            log.info(
                "orchestrator.topics.chased",
                added=len(added),
                total=len(self.context.chased_topics),
            )

        elif stage_type == StageType.QUESTIONING:
            self.tracker.track_from_output(content, stage.stage_number, stage_type.value)

        elif stage_type == StageType.SEARCHING:
            self.tracker.match_answers(content, stage.stage_number)

        elif stage_type == StageType.BUILDING and self.config.save_artifacts:
            artifacts = await self.artifact_pipeline.extract_artifacts(
                content, stage.stage_number, stage_type.value
            )
            self.context.artifacts.extend(artifacts)

        if stage_type in (StageType.QUESTIONING, StageType.SEARCHING):
            metrics = self.tracker.get_metrics()
            log.info("orchestrator.questions.metrics", **metrics.to_dict())

    async def _score_quality(self, stage: Stage) -> None:
        report = await self.quality_scorer.evaluate_stage_quality(stage)
        stage.quality_report = report
        self.context.quality_reports.append(report)

        decision = self._revision_decision(report)
        if decision.is_revision:
            log.warning(
                "orchestrator.revision.recommended",
                stage_id=stage.id,
                overall=report.overall_score,
                threshold=self.config.quality_threshold,
                feedback=decision.feedback,
            )
        elif report.should_revise:
            log.info(
                "orchestrator.revision.disabled",
                stage_id=stage.id,
                overall=report.overall_score,
            )

    def _revision_decision(self, report: QualityReport) -> RevisionDecision:
        """Revision is only ever recommended; the stage is not re-run."""
        if report.should_revise and self.config.auto_revise and self.config.max_revisions > 0:
            feedback = "\n".join(f"- {item}" for item in report.improvements)
            return RevisionDecision.re_execute(feedback or "Raise overall quality.")
        return RevisionDecision.proceed()

    async def _persist_stage(self, stage: Stage) -> None:
        if self.store is None:
            return
        try:
            await asyncio.to_thread(self.store.create_stage, stage)
        except Exception as e:
            log.warning(
                "orchestrator.persistence_failed",
                operation="create_stage",
                stage_id=stage.id,
                error=str(e),
            )

    # --- progression ----------------------------------------------------

    async def _after_stage(self, stage: Stage) -> None:
        status = await self._read_status()
        action = decide_next_action(
            status,
            len(self.context.completed_stages),
            self.config.max_stages,
            stage.is_summary,
            self.config.auto_progress,
        )
        log.info(
            "orchestrator.journey.decision",
            journey_id=self.journey_id,
            status=status.value,
            completed=len(self.context.completed_stages),
            action=action.value,
        )

        if action == NextAction.SCHEDULE_NEXT:
            self._schedule(summary=False)
        elif action == NextAction.SCHEDULE_SUMMARY:
            self._schedule(summary=True)
        elif action == NextAction.COMPLETE:
            await self._set_status(JourneyStatus.COMPLETE)

    def _schedule(self, summary: bool) -> None:
        self._scheduled = asyncio.create_task(self._run_scheduled(summary))

    def _is_finished(self) -> bool:
        """True once the summary has run or the stage limit is reached."""
        last = self.context.last_stage
        return last is not None and decide_next_action(
            JourneyStatus.RUNNING,
            len(self.context.completed_stages),
            self.config.max_stages,
            last.is_summary,
        ) == NextAction.COMPLETE

    def _is_busy(self) -> bool:
        return self._lock.locked() or (
            self._scheduled is not None and not self._scheduled.done()
        )

    async def _run_scheduled(self, summary: bool) -> None:
        await asyncio.sleep(self.config.stage_delay_seconds)

        status = await self._read_status()
        if status == JourneyStatus.PAUSED:
            log.info("orchestrator.journey.paused", journey_id=self.journey_id)
            return
        if status == JourneyStatus.STOPPED:
            last = self.context.last_stage
            if last is not None and last.is_summary:
                return
            summary = True
        elif status in (JourneyStatus.COMPLETE, JourneyStatus.ERROR):
            return
        elif self._is_finished():
            await self._set_status(JourneyStatus.COMPLETE)
            return

        try:
            await self._run_stage(summary=True if summary else None)
        except Exception as e:
            log.error(
                "orchestrator.scheduled_stage_failed",
                journey_id=self.journey_id,
                error=str(e),
            )
            await self._set_status(JourneyStatus.ERROR)

    async def _read_status(self) -> JourneyStatus:
        """Journey status from the store when there is one, else the local copy."""
        if self.store is None:
            return self.status
        try:
            status = await asyncio.to_thread(self.store.get_journey_status, self.journey_id)
        except Exception as e:
            log.warning(
                "orchestrator.status_check_failed",
                journey_id=self.journey_id,
                error=str(e),
            )
            return self.status
        if status is not None:
            self.status = status
        return self.status

    async def _set_status(self, status: JourneyStatus) -> None:
        self.status = status
        log.info("orchestrator.journey.status", journey_id=self.journey_id, status=status.value)
        if self.store is None:
            return
        try:
            await asyncio.to_thread(self.store.set_journey_status, self.journey_id, status)
        except Exception as e:
            log.warning(
                "orchestrator.persistence_failed",
                operation="set_journey_status",
                journey_id=self.journey_id,
                error=str(e),
            )
