"""Shared fixtures for stage explorer tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from explorer.src.config import ExplorationConfig
from explorer.src.models import JourneyStatus
from explorer.src.questions import QuestionLifecycleTracker
from explorer.src.storage.db import JourneyDatabase
from llm.src.models import ChunkType, StreamChunk

from explorer.tests.samples import (
    BUILDING_OUTPUT,
    QUESTIONING_OUTPUT,
    SEARCHING_OUTPUT,
    make_response,
)


@pytest.fixture
def sample_config():
    """Exploration config for fast, deterministic tests."""
    return ExplorationConfig(
        max_stages=8,
        auto_progress=False,
        stage_delay_seconds=0.0,
        enable_quality_scoring=False,
    )


@pytest.fixture
def tracker():
    """Fresh question tracker."""
    return QuestionLifecycleTracker()


@pytest.fixture
def scripted_client():
    """
    Generative client whose streamed stage output depends on the prompt.

    Stage prompts name their stage in upper case; the matching canned output
    is streamed through on_chunk before the response is returned.
    """
    outputs = {
        "QUESTIONING stage": QUESTIONING_OUTPUT,
        "SEARCHING stage": SEARCHING_OUTPUT,
        "BUILDING stage": BUILDING_OUTPUT,
        "FINAL SUMMARY": "# Journey Summary: Friday deploys\n## Executive Summary\nDone.",
    }

    async def execute(prompt, *, streaming_enabled=True, on_chunk=None, on_thinking=None, **kwargs):
        first_line = prompt.split("\n", 1)[0]
        content = "Generic stage output about release engineering."
        for marker, text in outputs.items():
            if marker in first_line:
                content = text
                break
        if streaming_enabled and on_thinking:
            on_thinking(StreamChunk(ChunkType.THINKING, "thinking..."))
        if streaming_enabled and on_chunk:
            for line in content.splitlines(keepends=True):
                on_chunk(StreamChunk(ChunkType.CONTENT, line))
        return make_response(content, thinking="thinking...")

    client = MagicMock()
    client.execute = AsyncMock(side_effect=execute)
    return client


@pytest.fixture
def status_store():
    """In-memory journey-status collaborator."""
    store = MagicMock()
    store.status = JourneyStatus.RUNNING
    store.get_journey_status.side_effect = lambda journey_id: store.status

    def set_status(journey_id, status):
        store.status = status

    store.set_journey_status.side_effect = set_status
    return store


@pytest.fixture
def db(tmp_path):
    """Journey database in a temporary directory."""
    return JourneyDatabase(tmp_path / "data" / "journeys.db")
