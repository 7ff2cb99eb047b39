# src/llm/models.py - v3
"""Provider-neutral request and response types for the generation transport."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

# Provider finish reasons meaning the output hit the token ceiling
_TRUNCATION_REASONS = frozenset({"length", "max_tokens"})


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class CompletionRequest(BaseModel):
    """Everything an adapter needs for one generation call."""

    messages: list[Message] = Field(min_length=1)
    system: str | None = None
    max_tokens: int = 4096
    temperature: float = 0.4
    json_mode: bool = False


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    finish_reason: str | None = None
    latency_ms: int = 0
    raw_response: Any = None

    @property
    def truncated(self) -> bool:
        """Whether generation stopped at max_tokens (JSON is then likely cut off)."""
        return (self.finish_reason or "").lower() in _TRUNCATION_REASONS
