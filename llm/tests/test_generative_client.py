"""Tests for the generative client."""

import os
from unittest.mock import MagicMock, patch

import pytest

from llm.src.client import GenerativeClient
from llm.src.models import ChunkType, GenerationError


class TestGenerativeClientInit:
    """Tests for GenerativeClient initialization."""

    def test_api_key_from_arg(self):
        client = GenerativeClient(api_key="test-key")
        assert client.api_key == "test-key"

    def test_api_key_from_env(self):
        with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "env-key"}):
            client = GenerativeClient()
            assert client.api_key == "env-key"

    def test_lazy_client(self):
        client = GenerativeClient(api_key="k")
        assert client._client is None

    def test_missing_key_raises_generation_error(self):
        """Creating the SDK client without a key fails loudly."""
        with patch.dict(os.environ, {}, clear=True):
            client = GenerativeClient()
            with pytest.raises(GenerationError):
                client._get_client()


class TestBuildParams:
    """Tests for request parameter assembly."""

    def test_no_thinking_without_budget(self):
        client = GenerativeClient(api_key="k")
        params = client._build_params("hi", "m", None, 16000)
        assert "thinking" not in params
        assert params["messages"] == [{"role": "user", "content": "hi"}]

    def test_thinking_budget_capped_below_max_tokens(self):
        """The budget always leaves room for the answer."""
        client = GenerativeClient(api_key="k")
        params = client._build_params("hi", "m", 15000, 16000)
        assert params["thinking"] == {"type": "enabled", "budget_tokens": 14976}

    def test_tiny_max_tokens_disables_thinking(self):
        client = GenerativeClient(api_key="k")
        params = client._build_params("hi", "m", 8000, 1500)
        assert "thinking" not in params


class TestExecuteStreaming:
    """Tests for streamed execution."""

    @pytest.mark.asyncio
    async def test_streams_chunks_in_order(self, mock_anthropic_client):
        """Content and thinking chunks reach their callbacks in stream order."""
        client = GenerativeClient(api_key="k")
        client._client = mock_anthropic_client
        content_chunks = []
        thinking_chunks = []

        response = await client.execute(
            "prompt",
            on_chunk=content_chunks.append,
            on_thinking=thinking_chunks.append,
            thinking_budget=8000,
        )

        assert [c.text for c in content_chunks] == ["Hello ", "world"]
        assert all(c.type == ChunkType.CONTENT for c in content_chunks)
        assert [c.text for c in thinking_chunks] == ["Let me consider. "]
        assert response.content == "Hello world"
        assert response.thinking == "Let me consider. "
        assert response.usage.output_tokens == 34
        assert response.chunks_streamed == 3

    @pytest.mark.asyncio
    async def test_model_override(self, mock_anthropic_client):
        client = GenerativeClient(api_key="k")
        client._client = mock_anthropic_client

        response = await client.execute("prompt", model="claude-haiku-4-5")

        kwargs = mock_anthropic_client.messages.stream.call_args.kwargs
        assert kwargs["model"] == "claude-haiku-4-5"
        assert response.model == "claude-haiku-4-5"


class TestExecuteNonStreaming:
    """Tests for non-streamed execution."""

    @pytest.mark.asyncio
    async def test_collects_text_and_thinking_blocks(self, mock_anthropic_client):
        client = GenerativeClient(api_key="k")
        client._client = mock_anthropic_client

        response = await client.execute("prompt", streaming_enabled=False)

        assert response.content == "Claude response"
        assert response.thinking == "Quietly."
        assert response.usage.total_tokens == 12
        mock_anthropic_client.messages.stream.assert_not_called()


class TestExecuteFailures:
    """Tests for failure handling."""

    @pytest.mark.asyncio
    async def test_api_error_becomes_generation_error(self):
        client = GenerativeClient(api_key="k", max_connection_retries=0)
        sdk = MagicMock()
        sdk.messages.create.side_effect = RuntimeError("overloaded")
        client._client = sdk

        with pytest.raises(GenerationError, match="overloaded"):
            await client.execute("prompt", streaming_enabled=False)

    @pytest.mark.asyncio
    async def test_connection_error_retried(self, mock_anthropic_client):
        """A connection error before any output is retried with a fresh client."""
        client = GenerativeClient(api_key="k", max_connection_retries=1)
        failing = MagicMock()
        failing.messages.create.side_effect = RuntimeError("Connection reset")
        client._client = failing

        with patch("llm.src.client.asyncio.sleep"), \
                patch.object(client, "_get_client", side_effect=[failing, mock_anthropic_client]):
            response = await client.execute("prompt", streaming_enabled=False)

        assert response.content == "Claude response"
