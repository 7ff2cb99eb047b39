# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: generation
provider, rate budget, response cache bounds, document store, external
search integrations and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from topicforge.generation.prompts import FALLBACK_RELATED_SUFFIXES


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === GENERATION ===
    llm_provider: Literal["google", "openai", "anthropic"] = "google"
    llm_model: str = "gemini-2.0-flash-001"
    llm_temperature: float = 0.4
    llm_max_tokens: int = 4096
    generation_timeout_s: float = 60.0

    # Provider API keys
    google_ai_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # === Rate limiting (upstream quota is global) ===
    rate_limit_max_requests: int = 60
    rate_limit_window_ms: int = 60_000

    # === Response cache ===
    cache_max_size: int = 1000
    cache_max_age_s: float = 24 * 60 * 60
    cache_key_max_part_length: int = 100

    # === Topic content ===
    related_topics_min: int = 3
    related_topics_max: int = 5
    slug_max_attempts: int = 100

    # === Document store ===
    store_backend: Literal["memory", "sqlite"] = "sqlite"
    store_path: Path | None = Path("~/.topicforge/topics.db")
    store_settle_delay_s: float = 0.0

    # === External search ===
    brave_api_key: str = ""
    google_books_api_key: str = ""
    search_max_results: int = 9
    search_timeout_s: float = 15.0
    wikipedia_max_content_chars: int = 50_000

    # === Maintenance ===
    maintenance_delay_s: float = 1.0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator(
        "rate_limit_max_requests",
        "rate_limit_window_ms",
        "cache_max_size",
        "slug_max_attempts",
        "search_max_results",
    )
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @field_validator("cache_max_age_s", "store_settle_delay_s", "maintenance_delay_s")
    @classmethod
    def validate_non_negative(cls, v: float, info) -> float:  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.related_topics_min < 1:
            errors.append("RELATED_TOPICS_MIN must be >= 1")
        if self.related_topics_min > self.related_topics_max:
            errors.append("RELATED_TOPICS_MIN must be <= RELATED_TOPICS_MAX")
        if self.related_topics_min > len(FALLBACK_RELATED_SUFFIXES):
            errors.append(
                f"RELATED_TOPICS_MIN must be <= {len(FALLBACK_RELATED_SUFFIXES)}"
            )

        if self.cache_key_max_part_length < 16:
            errors.append("CACHE_KEY_MAX_PART_LENGTH must be >= 16")

        if self.store_backend == "sqlite" and self.store_path is None:
            errors.append("STORE_PATH must be set when STORE_BACKEND=sqlite")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def llm_api_key(self) -> str:
        """API key for the configured provider."""
        return {
            "google": self.google_ai_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }[self.llm_provider]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
