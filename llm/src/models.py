"""Data models for the LLM library."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ChunkType(str, Enum):
    """Kinds of incremental output produced while streaming."""
    CONTENT = "content"
    THINKING = "thinking"


class GenerationError(Exception):
    """Raised when the generative service fails to produce a response."""

    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model


@dataclass
class StreamChunk:
    """One incremental piece of a streamed response."""
    type: ChunkType
    text: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "text": self.text}


@dataclass
class TokenUsage:
    """Token accounting reported by the service."""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def to_dict(self) -> dict:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
        }


@dataclass
class LLMResponse:
    """Response from a generation request."""
    content: str
    thinking: Optional[str] = None
    usage: Optional[TokenUsage] = None
    model: Optional[str] = None
    stop_reason: Optional[str] = None
    response_time_seconds: float = 0.0
    chunks_streamed: int = field(default=0, repr=False)

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "thinking": self.thinking,
            "usage": self.usage.to_dict() if self.usage else None,
            "model": self.model,
            "stop_reason": self.stop_reason,
            "response_time_seconds": self.response_time_seconds,
        }
