# src/core/errors.py - v1
"""Error taxonomy for the topic pipeline.

Generation failures propagate unchanged to callers; storage conflicts are
retried by the slug allocator and resolver; search failures are contained
per enrichment category.
"""

from __future__ import annotations

from typing import Any


class TopicForgeError(Exception):
    """Base class for all pipeline errors."""


class RateLimited(TopicForgeError):
    """Admission denied by the sliding-window rate limiter."""

    def __init__(self, limit: int, window_ms: int, retry_after_s: float = 0.0):
        self.limit = limit
        self.window_ms = window_ms
        self.retry_after_s = retry_after_s
        super().__init__(
            f"Rate limit exceeded ({limit} requests per {window_ms} ms), "
            f"retry in {retry_after_s:.1f}s"
        )


class GenerationError(TopicForgeError):
    """Base class for failures talking to the generation service."""


class GenerationUnavailable(GenerationError):
    """Network error, timeout or provider failure during generation."""


class GenerationParseError(GenerationError):
    """Generated text did not clean up into valid JSON."""

    def __init__(self, message: str, raw_text: str, cleaned_text: str):
        self.raw_text = raw_text
        self.cleaned_text = cleaned_text
        super().__init__(message)


class InvalidContentShape(GenerationError):
    """Parsed JSON is missing required fields or has the wrong types."""

    def __init__(self, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message)


class SlugCollisionExhausted(TopicForgeError):
    """Slug allocation gave up after a bounded number of attempts."""

    def __init__(self, title: str, attempts: int):
        self.title = title
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a unique slug for {title!r} after {attempts} attempts"
        )


class StorageConflict(TopicForgeError):
    """Uniqueness violation reported by the document store."""

    def __init__(self, field: str, value: str | None):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate {field}: {value!r}")


class TopicNotFound(TopicForgeError):
    """No topic exists for the identifier and none was created."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Topic not found: {identifier!r}")


class SearchUnavailable(TopicForgeError):
    """An external search integration is misconfigured or unreachable."""
