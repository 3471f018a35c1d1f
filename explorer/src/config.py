"""
Configuration for the stage explorer.

Settings live in explorer/config.yaml. Environment variables (including
ANTHROPIC_API_KEY) are read from .env at load time.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .models.stage import StageType

EXPLORER_ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = EXPLORER_ROOT / "config.yaml"

DEFAULT_THINKING_BUDGETS = {
    StageType.DISCOVERING: 12000,
    StageType.CHASING: 8000,
    StageType.SOLVING: 15000,
    StageType.CHALLENGING: 14000,
    StageType.QUESTIONING: 6000,
    StageType.SEARCHING: 8000,
    StageType.IMAGINING: 12000,
    StageType.BUILDING: 15000,
}

DEFAULT_STAGE_MODELS = {
    StageType.DISCOVERING: "claude-sonnet-4-5",
    StageType.CHASING: "claude-haiku-4-5",
    StageType.SOLVING: "claude-sonnet-4-5",
    StageType.CHALLENGING: "claude-opus-4-1",
    StageType.QUESTIONING: "claude-haiku-4-5",
    StageType.SEARCHING: "claude-sonnet-4-5",
    StageType.IMAGINING: "claude-sonnet-4-5",
    StageType.BUILDING: "claude-opus-4-1",
}


def load_config(path: Optional[Path] = None) -> dict:
    """Load config.yaml; a missing file gives an empty config."""
    load_dotenv()
    config_path = Path(path) if path else CONFIG_PATH
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass
class ExplorationConfig:
    max_stages: Optional[int] = 8
    auto_progress: bool = True
    stage_delay_seconds: float = 2.0
    extended_thinking: bool = True
    save_artifacts: bool = True
    max_tokens: int = 16000
    stage_models: dict[StageType, str] = field(default_factory=lambda: dict(DEFAULT_STAGE_MODELS))
    thinking_budgets: dict[StageType, int] = field(
        default_factory=lambda: dict(DEFAULT_THINKING_BUDGETS)
    )
    enable_quality_scoring: bool = True
    quality_threshold: float = 6.0
    quality_model: str = "claude-haiku-4-5"
    auto_revise: bool = False
    max_revisions: int = 1
    insight_model: str = "claude-haiku-4-5"
    artifact_model: str = "claude-sonnet-4-5"
    similarity_strategy: str = "jaccard"
    dedup_threshold: float = 0.85
    answer_match_threshold: float = 0.8
    searching_question_limit: int = 15
    database_path: Path = EXPLORER_ROOT / "data" / "journeys.db"

    def model_for(self, stage_type: StageType) -> str:
        return self.stage_models[stage_type]

    def thinking_budget_for(self, stage_type: StageType) -> Optional[int]:
        if not self.extended_thinking:
            return None
        return self.thinking_budgets[stage_type]

    @classmethod
    def from_dict(cls, config: dict) -> "ExplorationConfig":
        exploration = config.get("exploration", {}) or {}
        llm = config.get("llm", {}) or {}
        quality = config.get("quality", {}) or {}
        extraction = config.get("extraction", {}) or {}
        tracking = config.get("tracking", {}) or {}
        storage = config.get("storage", {}) or {}
        defaults = cls()

        stage_models = dict(defaults.stage_models)
        thinking_budgets = dict(defaults.thinking_budgets)
        for name, settings in (llm.get("stages", {}) or {}).items():
            stage_type = StageType(name)
            if settings.get("model"):
                stage_models[stage_type] = settings["model"]
            if settings.get("thinking_budget") is not None:
                thinking_budgets[stage_type] = int(settings["thinking_budget"])

        database_path = storage.get("database")
        if database_path:
            database_path = Path(database_path)
            if not database_path.is_absolute():
                database_path = EXPLORER_ROOT / database_path
        else:
            database_path = defaults.database_path

        return cls(
            max_stages=exploration.get("max_stages", defaults.max_stages),
            auto_progress=exploration.get("auto_progress", defaults.auto_progress),
            stage_delay_seconds=float(
                exploration.get("stage_delay_seconds", defaults.stage_delay_seconds)
            ),
            extended_thinking=exploration.get("extended_thinking", defaults.extended_thinking),
            save_artifacts=exploration.get("save_artifacts", defaults.save_artifacts),
            max_tokens=int(llm.get("max_tokens", defaults.max_tokens)),
            stage_models=stage_models,
            thinking_budgets=thinking_budgets,
            enable_quality_scoring=quality.get("enabled", defaults.enable_quality_scoring),
            quality_threshold=float(quality.get("threshold", defaults.quality_threshold)),
            quality_model=quality.get("model", defaults.quality_model),
            auto_revise=quality.get("auto_revise", defaults.auto_revise),
            max_revisions=int(quality.get("max_revisions", defaults.max_revisions)),
            insight_model=extraction.get("insight_model", defaults.insight_model),
            artifact_model=extraction.get("artifact_model", defaults.artifact_model),
            similarity_strategy=tracking.get("similarity", defaults.similarity_strategy),
            dedup_threshold=float(tracking.get("dedup_threshold", defaults.dedup_threshold)),
            answer_match_threshold=float(
                tracking.get("answer_match_threshold", defaults.answer_match_threshold)
            ),
            searching_question_limit=int(
                tracking.get("searching_question_limit", defaults.searching_question_limit)
            ),
            database_path=database_path,
        )
