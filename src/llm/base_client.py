# src/llm/base_client.py - v3
"""Abstract LLM client interface.

Adapters only move text: they implement _send() for one provider call.
complete() wraps it with request construction, timing and a truncation
warning. Prompt contracts, JSON cleanup and shape validation belong to
generation.client.GenerationClient.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from topicforge.llm.models import CompletionRequest, LLMResponse, Message

logger = logging.getLogger(__name__)


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.4,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Text completion.

        json_mode asks providers that support it for a JSON mime type; the
        caller still validates the returned text.
        """
        request = CompletionRequest(
            messages=messages,
            system=system,
            max_tokens=max_tokens,
            temperature=temperature,
            json_mode=json_mode,
        )
        started = time.monotonic()
        response = await self._send(request)
        latency_ms = int((time.monotonic() - started) * 1000)

        if response.truncated:
            logger.warning(
                "%s output hit max_tokens=%d (%s); JSON may be incomplete",
                self.provider_name, max_tokens, response.finish_reason,
            )
        return response.model_copy(update={"latency_ms": latency_ms})

    @abstractmethod
    async def _send(self, request: CompletionRequest) -> LLMResponse:
        """Issue exactly one provider call."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, openai, anthropic)."""
