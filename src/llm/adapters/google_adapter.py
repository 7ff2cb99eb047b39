# src/llm/adapters/google_adapter.py - v3
"""Google Gemini adapter (default provider), google-generativeai SDK."""

from __future__ import annotations

from typing import Any

from topicforge.llm.base_client import BaseLLMClient
from topicforge.llm.models import CompletionRequest, LLMResponse


class GoogleAdapter(BaseLLMClient):
    """Gemini models via generate_content_async."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash-001",
        api_key: str = "",
        timeout_s: float | None = None,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._timeout_s = timeout_s

    @property
    def provider_name(self) -> str:
        return "google"

    async def _send(self, request: CompletionRequest) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=request.system)

        config: dict[str, Any] = {
            "max_output_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        if request.json_mode:
            config["response_mime_type"] = "application/json"

        # Gemini calls the assistant role "model"; system text goes in system_instruction
        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in request.messages
            if m.role != "system"
        ]
        options = {"timeout": self._timeout_s} if self._timeout_s is not None else None

        resp = await model.generate_content_async(
            contents, generation_config=config, request_options=options,
        )
        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=resp.text or "",
            model=self._model,
            provider="google",
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            finish_reason=_finish_reason(resp),
            raw_response=resp,
        )


def _finish_reason(resp: Any) -> str | None:
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    if reason is None:
        return None
    return getattr(reason, "name", str(reason))
