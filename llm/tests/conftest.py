"""Shared fixtures for LLM library tests."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest


def _text_delta(text):
    return SimpleNamespace(
        type="content_block_delta",
        delta=SimpleNamespace(type="text_delta", text=text),
    )


def _thinking_delta(thinking):
    return SimpleNamespace(
        type="content_block_delta",
        delta=SimpleNamespace(type="thinking_delta", thinking=thinking),
    )


@pytest.fixture
def stream_events():
    """A short stream: one thinking delta, two text deltas, plus noise."""
    return [
        SimpleNamespace(type="message_start"),
        _thinking_delta("Let me consider. "),
        _text_delta("Hello "),
        _text_delta("world"),
        SimpleNamespace(type="message_stop"),
    ]


@pytest.fixture
def mock_anthropic_client(stream_events):
    """Create a mock Anthropic client supporting stream() and create()."""
    client = MagicMock()

    final_message = SimpleNamespace(
        usage=SimpleNamespace(input_tokens=12, output_tokens=34),
        stop_reason="end_turn",
    )
    stream = MagicMock()
    stream.__iter__.return_value = iter(stream_events)
    stream.get_final_message.return_value = final_message

    stream_cm = MagicMock()
    stream_cm.__enter__.return_value = stream
    stream_cm.__exit__.return_value = False
    client.messages.stream.return_value = stream_cm

    response = SimpleNamespace(
        content=[
            SimpleNamespace(type="thinking", thinking="Quietly."),
            SimpleNamespace(type="text", text="Claude response"),
        ],
        usage=SimpleNamespace(input_tokens=5, output_tokens=7),
        stop_reason="end_turn",
    )
    client.messages.create.return_value = response
    return client
