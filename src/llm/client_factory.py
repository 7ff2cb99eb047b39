# src/llm/client_factory.py - v4
"""Build the generation backend's LLM client from a provider name.

Adapters are imported on first use so only the SDK of the configured
provider has to be importable. build_service calls create_default_client
once at startup.
"""

from __future__ import annotations

import importlib
import logging

from topicforge.config.settings import Settings
from topicforge.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

_ADAPTERS: dict[str, str] = {
    "google": "topicforge.llm.adapters.google_adapter.GoogleAdapter",
    "openai": "topicforge.llm.adapters.openai_adapter.OpenAIAdapter",
    "anthropic": "topicforge.llm.adapters.anthropic_adapter.AnthropicAdapter",
}

# Settings attribute holding each built-in provider's API key
_KEY_FIELDS: dict[str, str] = {
    "google": "google_ai_api_key",
    "openai": "openai_api_key",
    "anthropic": "anthropic_api_key",
}


class UnsupportedProviderError(ValueError):
    """No adapter registered under the requested provider name."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the adapter registered for provider.

    Explicit kwargs take precedence over values derived from settings
    (API key and request timeout).

    Raises:
        UnsupportedProviderError: If provider has no registered adapter.
    """
    try:
        class_path = _ADAPTERS[provider]
    except KeyError:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_ADAPTERS))}"
        ) from None

    options: dict[str, object] = {"model": model}
    if settings is not None:
        key_field = _KEY_FIELDS.get(provider)
        if key_field:
            options["api_key"] = getattr(settings, key_field)
        options["timeout_s"] = settings.generation_timeout_s
    options.update(kwargs)

    logger.debug("LLM client %s/%s", provider, model)
    return _load(class_path)(**options)


def create_default_client(settings: Settings) -> BaseLLMClient:
    """Client for LLM_PROVIDER / LLM_MODEL."""
    return create_llm_client(settings.llm_provider, settings.llm_model, settings)


def register_provider(name: str, class_path: str) -> None:
    """Make an extra BaseLLMClient subclass available under name."""
    _ADAPTERS[name] = class_path
    logger.info("Registered LLM provider %s (%s)", name, class_path)


def _load(class_path: str) -> type[BaseLLMClient]:
    module_name, _, attr = class_path.rpartition(".")
    return getattr(importlib.import_module(module_name), attr)
