"""
Exploration context: the running state of one journey.

Owned by a single StageOrchestrator. Callers get deep-copied snapshots.
"""

import copy
from dataclasses import dataclass, field
from typing import Optional

from .artifact import RichArtifact
from .insight import RichInsight
from .quality import QualityReport
from .question import TrackedQuestion
from .stage import Stage


@dataclass
class ExplorationContext:
    journey_id: str
    original_input: str = ""
    # Index of the most recently completed stage; -1 before the first
    current_stage_index: int = -1
    completed_stages: list[Stage] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    rich_insights: list[RichInsight] = field(default_factory=list)
    tracked_questions: dict[str, TrackedQuestion] = field(default_factory=dict)
    artifacts: list[RichArtifact] = field(default_factory=list)
    chased_topics: list[str] = field(default_factory=list)
    quality_reports: list[QualityReport] = field(default_factory=list)

    @property
    def started(self) -> bool:
        return bool(self.completed_stages)

    @property
    def last_stage(self) -> Optional[Stage]:
        return self.completed_stages[-1] if self.completed_stages else None

    def add_chased_topic(self, topic: str) -> bool:
        """Record a topic; returns False when it was already chased."""
        if topic in self.chased_topics:
            return False
        self.chased_topics.append(topic)
        return True

    def snapshot(self) -> "ExplorationContext":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "journey_id": self.journey_id,
            "original_input": self.original_input,
            "current_stage_index": self.current_stage_index,
            "completed_stages": [s.to_dict() for s in self.completed_stages],
            "insights": list(self.insights),
            "rich_insights": [i.to_dict() for i in self.rich_insights],
            "tracked_questions": [q.to_dict() for q in self.tracked_questions.values()],
            "artifacts": [a.to_dict() for a in self.artifacts],
            "chased_topics": list(self.chased_topics),
            "quality_reports": [r.to_dict() for r in self.quality_reports],
        }
