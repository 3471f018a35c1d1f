"""Tests for the next-action decision table."""

import pytest

from explorer.src.models import JourneyStatus
from explorer.src.orchestration.control import NextAction, decide_next_action


class TestDecideNextAction:
    """Tests for decide_next_action."""

    @pytest.mark.parametrize("completed,last_was_summary", [(1, False), (7, False), (8, True)])
    def test_paused_always_halts(self, completed, last_was_summary):
        assert decide_next_action(
            JourneyStatus.PAUSED, completed, 8, last_was_summary
        ) == NextAction.HALT

    def test_stopped_gets_summary(self):
        assert decide_next_action(JourneyStatus.STOPPED, 3, 8, False) == NextAction.SCHEDULE_SUMMARY

    def test_stopped_after_summary_halts(self):
        assert decide_next_action(JourneyStatus.STOPPED, 4, 8, True) == NextAction.HALT

    def test_stop_wins_without_auto_progress(self):
        assert decide_next_action(
            JourneyStatus.STOPPED, 3, 8, False, auto_progress=False
        ) == NextAction.SCHEDULE_SUMMARY

    def test_continue(self):
        assert decide_next_action(JourneyStatus.RUNNING, 3, 8, False) == NextAction.SCHEDULE_NEXT

    def test_summary_before_last_stage(self):
        assert decide_next_action(JourneyStatus.RUNNING, 7, 8, False) == NextAction.SCHEDULE_SUMMARY

    @pytest.mark.parametrize("completed,last_was_summary", [(8, True), (8, False), (9, False), (3, True)])
    def test_complete(self, completed, last_was_summary):
        assert decide_next_action(
            JourneyStatus.RUNNING, completed, 8, last_was_summary
        ) == NextAction.COMPLETE

    def test_without_auto_progress_halts(self):
        assert decide_next_action(
            JourneyStatus.RUNNING, 3, 8, False, auto_progress=False
        ) == NextAction.HALT

    def test_completion_without_auto_progress(self):
        assert decide_next_action(
            JourneyStatus.RUNNING, 8, 8, True, auto_progress=False
        ) == NextAction.COMPLETE

    def test_unbounded_never_completes(self):
        assert decide_next_action(JourneyStatus.RUNNING, 500, None, False) == NextAction.SCHEDULE_NEXT

    def test_unknown_status_treated_as_continue(self):
        assert decide_next_action(None, 2, 8, False) == NextAction.SCHEDULE_NEXT
