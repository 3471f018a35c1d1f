"""Tests for configuration loading and JSON response parsing."""

import pytest

from explorer.src.config import EXPLORER_ROOT, ExplorationConfig, load_config
from explorer.src.errors import ResponseParseError
from explorer.src.models import StageType
from explorer.src.parsing import parse_json_object


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "missing.yaml") == {}

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("exploration:\n  max_stages: 4\n", encoding="utf-8")

        assert load_config(path) == {"exploration": {"max_stages": 4}}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}

    def test_shipped_config_parses(self):
        config = ExplorationConfig.from_dict(load_config())
        assert config.max_stages == 8


class TestExplorationConfig:
    """Tests for ExplorationConfig."""

    def test_defaults(self):
        config = ExplorationConfig.from_dict({})

        assert config.max_stages == 8
        assert config.auto_progress is True
        assert config.dedup_threshold == 0.85
        assert config.answer_match_threshold == 0.8
        assert config.thinking_budget_for(StageType.SOLVING) == 15000

    def test_overrides(self):
        config = ExplorationConfig.from_dict({
            "exploration": {"max_stages": 3, "auto_progress": False, "stage_delay_seconds": 0},
            "llm": {"stages": {"chasing": {"model": "claude-opus-4-1", "thinking_budget": 2000}}},
            "quality": {"enabled": False, "threshold": 7},
            "tracking": {"similarity": "jaccard", "dedup_threshold": 0.9},
            "storage": {"database": "data/test.db"},
        })

        assert config.max_stages == 3
        assert config.auto_progress is False
        assert config.stage_delay_seconds == 0.0
        assert config.model_for(StageType.CHASING) == "claude-opus-4-1"
        assert config.thinking_budget_for(StageType.CHASING) == 2000
        assert config.model_for(StageType.SOLVING) == "claude-sonnet-4-5"
        assert config.enable_quality_scoring is False
        assert config.quality_threshold == 7.0
        assert config.similarity_strategy == "jaccard"
        assert config.dedup_threshold == 0.9
        assert config.database_path == EXPLORER_ROOT / "data" / "test.db"

    def test_unbounded_journey(self):
        assert ExplorationConfig.from_dict({"exploration": {"max_stages": None}}).max_stages is None

    def test_thinking_disabled(self):
        config = ExplorationConfig(extended_thinking=False)
        assert config.thinking_budget_for(StageType.DISCOVERING) is None

    def test_unknown_stage_rejected(self):
        with pytest.raises(ValueError):
            ExplorationConfig.from_dict({"llm": {"stages": {"dreaming": {"model": "x"}}}})


class TestParseJsonObject:
    """Tests for parse_json_object."""

    def test_plain(self):
        assert parse_json_object('{"insights": []}') == {"insights": []}

    def test_fenced(self):
        assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    def test_surrounded_by_prose(self):
        assert parse_json_object('Here you go: {"a": 1} hope it helps') == {"a": 1}

    def test_required_list(self):
        with pytest.raises(ResponseParseError):
            parse_json_object('{"artifacts": "none"}', required_list="artifacts")

    @pytest.mark.parametrize("text", ["", "no json here", "[1, 2]", "{broken"])
    def test_unreadable(self, text):
        with pytest.raises(ResponseParseError):
            parse_json_object(text)
