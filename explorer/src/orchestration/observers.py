"""
Observers for an in-flight journey.

Observers receive streamed output while a stage runs, plus stage lifecycle
notifications. Streamed events are delivered in order within a stage, from
the thread running the generative call.
"""

from abc import ABC
from dataclasses import dataclass

from llm.src.models import ChunkType
from shared.logging import get_logger

from ..models.stage import Stage

log = get_logger("explorer", "orchestration.observers")


@dataclass
class StreamEvent:
    stage_id: str
    type: ChunkType
    text: str

    def to_dict(self) -> dict:
        return {"stage_id": self.stage_id, "type": self.type.value, "text": self.text}


class StageObserver(ABC):
    """Base class for journey observers; override what you need."""

    def on_stage_started(self, stage: Stage) -> None:
        pass

    def on_stream_event(self, event: StreamEvent) -> None:
        pass

    def on_stage_finished(self, stage: Stage) -> None:
        pass


class CallbackObserver(StageObserver):
    """Adapts a plain ``callback(event)`` into an observer of streamed output."""

    def __init__(self, callback):
        self.callback = callback

    def on_stream_event(self, event: StreamEvent) -> None:
        self.callback(event)


class ObserverSet:
    """Fans notifications out to every observer; one failing observer never breaks a stage."""

    def __init__(self):
        self._observers: list[StageObserver] = []

    def add(self, observer: StageObserver) -> None:
        self._observers.append(observer)

    def remove(self, observer: StageObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def __len__(self) -> int:
        return len(self._observers)

    def _notify(self, method: str, payload) -> None:
        for observer in list(self._observers):
            try:
                getattr(observer, method)(payload)
            except Exception as e:
                log.warning(
                    "observers.callback_failed",
                    observer=type(observer).__name__,
                    hook=method,
                    error=str(e),
                )

    def stage_started(self, stage: Stage) -> None:
        self._notify("on_stage_started", stage)

    def stream_event(self, event: StreamEvent) -> None:
        self._notify("on_stream_event", event)

    def stage_finished(self, stage: Stage) -> None:
        self._notify("on_stage_finished", stage)
