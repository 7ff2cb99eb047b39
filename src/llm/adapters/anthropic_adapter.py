# src/llm/adapters/anthropic_adapter.py - v4
"""Anthropic Claude adapter, official anthropic SDK.

Claude has no JSON mime type, so json_mode is carried by the prompt
contract alone. The SDK client is created on first call and reused.
"""

from __future__ import annotations

import logging
from typing import Any

from topicforge.llm.base_client import BaseLLMClient
from topicforge.llm.models import CompletionRequest, LLMResponse

logger = logging.getLogger(__name__)


class AnthropicAdapter(BaseLLMClient):
    """Claude models via the Messages API."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        timeout_s: float | None = None,
        **kwargs: Any,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._timeout_s = timeout_s
        self._client: Any = None

    @property
    def provider_name(self) -> str:
        return "anthropic"

    async def _send(self, request: CompletionRequest) -> LLMResponse:
        response = await self._get_client().messages.create(**self.build_params(request))
        return LLMResponse(
            content=joined_text(response),
            model=response.model,
            provider="anthropic",
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            finish_reason=getattr(response, "stop_reason", None),
            raw_response=response,
        )

    def build_params(self, request: CompletionRequest) -> dict[str, Any]:
        """Messages API parameters; system messages fold into the system field."""
        system_parts = [m.content for m in request.messages if m.role == "system"]
        if request.system:
            system_parts.insert(0, request.system)

        params: dict[str, Any] = {
            "model": self._model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [
                {"role": m.role, "content": m.content}
                for m in request.messages
                if m.role != "system"
            ],
        }
        if system_parts:
            params["system"] = "\n\n".join(system_parts)
        return params

    def _get_client(self) -> Any:
        if self._client is None:
            import anthropic

            options: dict[str, Any] = {"api_key": self._api_key or ""}
            if self._timeout_s is not None:
                options["timeout"] = self._timeout_s
            self._client = anthropic.AsyncAnthropic(**options)
            logger.debug("Anthropic client created for %s", self._model)
        return self._client


def joined_text(response: Any) -> str:
    """Concatenate the text blocks of a Messages API response."""
    return "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    )
