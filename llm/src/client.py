"""
Generative text client.

Wraps the Anthropic Messages API behind a single ``execute`` call. When
streaming is enabled, text and thinking deltas are forwarded to the
``on_chunk``/``on_thinking`` callbacks as they arrive. The blocking SDK runs
in a worker thread, so callbacks are invoked from that thread in stream order.
"""

import asyncio
import os
import time
from typing import Callable, Optional

from shared.logging import get_logger

from .models import ChunkType, GenerationError, LLMResponse, StreamChunk, TokenUsage

log = get_logger("llm", "client")

ChunkCallback = Callable[[StreamChunk], None]

DEFAULT_MODEL = "claude-sonnet-4-5"
DEFAULT_MAX_TOKENS = 16000


class GenerativeClient:
    """
    Client for the generative text service.

    Usage:
        client = GenerativeClient()
        response = await client.execute(
            "Explore this idea...",
            on_chunk=lambda chunk: print(chunk.text, end=""),
        )
        print(response.content)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        max_connection_retries: int = 2,
    ):
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.default_model = default_model
        self.max_tokens = max_tokens
        self.max_connection_retries = max_connection_retries
        self._client = None

    def _get_client(self):
        """Lazy initialization of the Anthropic client."""
        if self._client is None:
            if not self.api_key:
                raise GenerationError("ANTHROPIC_API_KEY not set")
            import anthropic
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def _build_params(
        self,
        prompt: str,
        model: str,
        thinking_budget: Optional[int],
        max_tokens: int,
    ) -> dict:
        params = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if thinking_budget:
            # The thinking budget has to leave room for the answer itself
            budget = min(thinking_budget, max_tokens - 1024)
            if budget >= 1024:
                params["thinking"] = {"type": "enabled", "budget_tokens": budget}
        return params

    def _stream(
        self,
        params: dict,
        on_chunk: Optional[ChunkCallback],
        on_thinking: Optional[ChunkCallback],
        progress: dict,
    ) -> tuple[str, str, TokenUsage, Optional[str]]:
        client = self._get_client()
        text_parts = []
        thinking_parts = []

        with client.messages.stream(**params) as stream:
            for event in stream:
                if getattr(event, "type", None) != "content_block_delta":
                    continue
                delta = event.delta
                delta_type = getattr(delta, "type", None)
                if delta_type == "text_delta":
                    text_parts.append(delta.text)
                    progress["chunks"] += 1
                    if on_chunk:
                        on_chunk(StreamChunk(ChunkType.CONTENT, delta.text))
                elif delta_type == "thinking_delta":
                    thinking_parts.append(delta.thinking)
                    progress["chunks"] += 1
                    if on_thinking:
                        on_thinking(StreamChunk(ChunkType.THINKING, delta.thinking))
            final = stream.get_final_message()

        usage = TokenUsage(
            input_tokens=getattr(final.usage, "input_tokens", 0),
            output_tokens=getattr(final.usage, "output_tokens", 0),
        )
        return "".join(text_parts), "".join(thinking_parts), usage, final.stop_reason

    def _create(self, params: dict) -> tuple[str, str, TokenUsage, Optional[str]]:
        client = self._get_client()
        response = client.messages.create(**params)

        text_content = ""
        thinking_content = ""
        for block in response.content:
            block_type = getattr(block, "type", None)
            if block_type == "thinking":
                thinking_content += block.thinking
            elif hasattr(block, "text"):
                text_content += block.text

        usage = TokenUsage(
            input_tokens=getattr(response.usage, "input_tokens", 0),
            output_tokens=getattr(response.usage, "output_tokens", 0),
        )
        return text_content, thinking_content, usage, response.stop_reason

    async def execute(
        self,
        prompt: str,
        *,
        streaming_enabled: bool = True,
        on_chunk: Optional[ChunkCallback] = None,
        on_thinking: Optional[ChunkCallback] = None,
        model: Optional[str] = None,
        thinking_budget: Optional[int] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """
        Run one generation request.

        Args:
            prompt: The prompt to send
            streaming_enabled: Stream deltas to the callbacks as they arrive
            on_chunk: Called with each content chunk
            on_thinking: Called with each thinking chunk
            model: Model override (defaults to the client's default model)
            thinking_budget: Extended thinking budget in tokens, None to disable
            max_tokens: Maximum tokens in the response

        Returns:
            LLMResponse with the full content, thinking trace and usage

        Raises:
            GenerationError: if the service call fails
        """
        model = model or self.default_model
        params = self._build_params(
            prompt, model, thinking_budget, max_tokens or self.max_tokens
        )
        log.info(
            "llm.request.started",
            model=model,
            prompt_chars=len(prompt),
            streaming=streaming_enabled,
            thinking="thinking" in params,
        )

        start_time = time.time()
        progress = {"chunks": 0}

        for attempt in range(self.max_connection_retries + 1):
            try:
                if streaming_enabled:
                    content, thinking, usage, stop_reason = await asyncio.to_thread(
                        self._stream, params, on_chunk, on_thinking, progress
                    )
                else:
                    content, thinking, usage, stop_reason = await asyncio.to_thread(
                        self._create, params
                    )
                break
            except GenerationError:
                raise
            except Exception as e:
                error_str = str(e).lower()
                retryable = "connection" in error_str or "timeout" in error_str
                # Once chunks reached the callbacks a retry would replay them
                if retryable and progress["chunks"] == 0 and attempt < self.max_connection_retries:
                    wait_time = 2 ** attempt
                    log.warning(
                        "llm.request.retrying",
                        attempt=attempt + 1,
                        wait_seconds=wait_time,
                        error=str(e),
                    )
                    self._client = None
                    await asyncio.sleep(wait_time)
                    continue
                log.error("llm.request.failed", model=model, error=str(e))
                raise GenerationError(str(e), model=model) from e

        elapsed = time.time() - start_time
        log.info(
            "llm.request.complete",
            model=model,
            response_chars=len(content),
            thinking_chars=len(thinking),
            output_tokens=usage.output_tokens,
            elapsed_seconds=round(elapsed, 2),
        )
        return LLMResponse(
            content=content,
            thinking=thinking or None,
            usage=usage,
            model=model,
            stop_reason=stop_reason,
            response_time_seconds=elapsed,
            chunks_streamed=progress["chunks"],
        )
