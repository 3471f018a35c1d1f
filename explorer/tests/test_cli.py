"""Tests for command-line argument handling."""

from explorer.journey_explorer import COMMANDS, parse_run_args


class TestParseRunArgs:
    """Tests for parse_run_args."""

    def test_question_only(self):
        assert parse_run_args(["Why", "are", "deploys", "slow?"]) == ("Why are deploys slow?", None)

    def test_stages_flag(self):
        assert parse_run_args(["--stages", "4", "Why", "slow?"]) == ("Why slow?", 4)

    def test_stages_after_question(self):
        assert parse_run_args(["Why slow?", "--stages", "12"]) == ("Why slow?", 12)

    def test_empty(self):
        assert parse_run_args([]) == ("", None)


def test_commands_registered():
    assert {"run", "status", "pause", "stop", "list", "help"} <= set(COMMANDS)
