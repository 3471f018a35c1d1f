"""
Next-action decision after a stage completes.

Kept free of I/O so the table can be tested on its own. The external journey
status always wins over continuing.
"""

from enum import Enum
from typing import Optional

from ..models.stage import JourneyStatus


class NextAction(str, Enum):
    HALT = "halt"
    SCHEDULE_NEXT = "schedule_next"
    SCHEDULE_SUMMARY = "schedule_summary"
    COMPLETE = "complete"


def decide_next_action(
    journey_status: Optional[JourneyStatus],
    stages_completed: int,
    max_stages: Optional[int],
    last_was_summary: bool,
    auto_progress: bool = True,
) -> NextAction:
    """
    Decide what follows the stage that just completed.

    paused                          -> halt
    stopped, last not a summary     -> one final summary
    completed == max - 1            -> summary
    completed <  max                -> next stage
    completed >= max or summary run -> complete

    ``max_stages`` of None means the journey never ends on its own. Without
    auto-progress nothing is scheduled, though a stop still gets its summary
    and a finished journey is still marked complete.
    """
    if journey_status == JourneyStatus.PAUSED:
        return NextAction.HALT

    if journey_status == JourneyStatus.STOPPED:
        return NextAction.HALT if last_was_summary else NextAction.SCHEDULE_SUMMARY

    if last_was_summary or (max_stages is not None and stages_completed >= max_stages):
        return NextAction.COMPLETE

    if not auto_progress:
        return NextAction.HALT

    if max_stages is not None and stages_completed == max_stages - 1:
        return NextAction.SCHEDULE_SUMMARY

    return NextAction.SCHEDULE_NEXT
