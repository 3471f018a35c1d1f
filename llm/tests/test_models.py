"""Tests for LLM library models."""

from llm.src.models import (
    ChunkType,
    GenerationError,
    LLMResponse,
    StreamChunk,
    TokenUsage,
)


class TestChunkType:
    """Tests for ChunkType enum."""

    def test_values(self):
        assert ChunkType.CONTENT.value == "content"
        assert ChunkType.THINKING.value == "thinking"

    def test_is_string_enum(self):
        assert ChunkType.CONTENT == "content"


class TestStreamChunk:
    """Tests for StreamChunk."""

    def test_to_dict(self):
        chunk = StreamChunk(ChunkType.THINKING, "hmm")
        assert chunk.to_dict() == {"type": "thinking", "text": "hmm"}


class TestTokenUsage:
    """Tests for TokenUsage."""

    def test_total(self):
        assert TokenUsage(input_tokens=3, output_tokens=4).total_tokens == 7

    def test_defaults_to_zero(self):
        assert TokenUsage().total_tokens == 0


class TestLLMResponse:
    """Tests for LLMResponse."""

    def test_to_dict_with_usage(self):
        response = LLMResponse(
            content="text",
            thinking="trace",
            usage=TokenUsage(1, 2),
            model="claude-sonnet-4-5",
        )
        data = response.to_dict()
        assert data["content"] == "text"
        assert data["thinking"] == "trace"
        assert data["usage"] == {"input_tokens": 1, "output_tokens": 2}

    def test_to_dict_without_usage(self):
        assert LLMResponse(content="x").to_dict()["usage"] is None


class TestGenerationError:
    """Tests for GenerationError."""

    def test_carries_model(self):
        error = GenerationError("boom", model="m")
        assert str(error) == "boom"
        assert error.model == "m"
