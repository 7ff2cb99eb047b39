# src/llm/adapters/openai_adapter.py - v3
"""OpenAI chat completions adapter, official openai SDK."""

from __future__ import annotations

from typing import Any

from topicforge.llm.base_client import BaseLLMClient
from topicforge.llm.models import CompletionRequest, LLMResponse


class OpenAIAdapter(BaseLLMClient):
    """GPT models via AsyncOpenAI."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str = "",
        timeout_s: float | None = None,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._timeout_s = timeout_s

    @property
    def provider_name(self) -> str:
        return "openai"

    async def _send(self, request: CompletionRequest) -> LLMResponse:
        import openai

        client = openai.AsyncOpenAI(api_key=self._api_key, timeout=self._timeout_s)
        messages: list[dict[str, Any]] = []
        if request.system:
            messages.append({"role": "system", "content": request.system})
        messages.extend({"role": m.role, "content": m.content} for m in request.messages)

        params: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        # json_object cannot return a bare array, so array prompts run unconstrained
        if request.json_mode:
            params["response_format"] = {"type": "json_object"}

        resp = await client.chat.completions.create(**params)
        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            model=self._model,
            provider="openai",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            finish_reason=getattr(choice, "finish_reason", None),
            raw_response=resp,
        )
