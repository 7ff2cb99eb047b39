# src/generation/client.py - v1
"""Generation Client: one rate-limited call per operation, strict shapes.

Usage:
    client = GenerationClient(llm, rate_limiter)
    content = await client.generate_topic("Quantum Entanglement")

The client has no side effects beyond the outbound call; persistence and
caching are the caller's job.
"""

from __future__ import annotations

import logging
from typing import Any

from topicforge.core.errors import (
    GenerationError,
    GenerationUnavailable,
    InvalidContentShape,
    TopicForgeError,
)
from topicforge.core.models import DetailContent, Section, TopicContent
from topicforge.generation.parsing import load_json, load_json_object
from topicforge.generation.prompts import (
    SYSTEM_PROMPT,
    FALLBACK_RELATED_SUFFIXES,
    detail_prompt,
    fallback_related_topics,
    related_topics_prompt,
    topic_prompt,
)
from topicforge.llm.base_client import BaseLLMClient
from topicforge.llm.models import Message
from topicforge.llm.rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


class GenerationClient:
    """Wraps a BaseLLMClient with prompt contracts and JSON validation."""

    def __init__(
        self,
        llm: BaseLLMClient,
        rate_limiter: SlidingWindowRateLimiter,
        max_tokens: int = 4096,
        temperature: float = 0.4,
        related_min: int = 3,
        related_max: int = 5,
    ) -> None:
        if related_min > len(FALLBACK_RELATED_SUFFIXES):
            raise ValueError(
                f"related_min must be <= {len(FALLBACK_RELATED_SUFFIXES)}, got {related_min}"
            )
        self._llm = llm
        self._rate_limiter = rate_limiter
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._related_min = related_min
        self._related_max = related_max

    async def generate_topic(self, title: str) -> TopicContent:
        """Generate summary, sections and related topics for a title.

        Raises:
            RateLimited: Admission denied; no request was sent.
            GenerationUnavailable: Transport failure or timeout.
            GenerationParseError: Response is not valid JSON after cleanup.
            InvalidContentShape: Missing summary or sections.
        """
        text = await self._complete(topic_prompt(title), json_mode=True)
        payload = load_json_object(text)
        if not isinstance(payload, dict):
            raise InvalidContentShape("Topic response is not a JSON object", payload)

        summary = payload.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            raise InvalidContentShape("Topic response has no summary", payload)
        raw_sections = payload.get("sections")
        if not isinstance(raw_sections, list):
            raise InvalidContentShape("Topic response sections is not a list", payload)

        sections = [s for s in (_to_section(item) for item in raw_sections) if s]
        related = _distinct_strings(payload.get("relatedTopics"))

        if len(related) < self._related_min:
            logger.info(
                "Topic %r came back with %d related topics, requesting more",
                title, len(related),
            )
            related = _merge_unique(related, await self.generate_related_topics(title))

        return TopicContent(
            summary=summary.strip(),
            sections=sections,
            related_topics=related[: self._related_max],
        )

    async def generate_related_topics(self, title: str) -> list[str]:
        """One supplementary call for related topics, with a fixed fallback.

        Never raises for generation failures: the deterministic suggestions
        are returned instead. Either way the result holds at least
        related_min case-insensitively distinct entries.
        """
        try:
            text = await self._complete(related_topics_prompt(title, self._related_min))
            parsed = load_json(text)
            if isinstance(parsed, dict):
                parsed = parsed.get("relatedTopics")
            related = _distinct_strings(parsed)
            if len(related) < self._related_min:
                raise InvalidContentShape(
                    f"Expected {self._related_min} related topics, got {len(related)}",
                    parsed,
                )
            return related[: self._related_max]
        except TopicForgeError as e:
            logger.warning("Related topics for %r fell back to defaults: %s", title, e)
            return fallback_related_topics(title, self._related_min)

    async def generate_detail(
        self,
        title: str,
        fact: str,
        prompt_override: str | None = None,
    ) -> DetailContent:
        """Deep-dive content for one fact (or item) within a topic.

        Raises:
            RateLimited, GenerationUnavailable, GenerationParseError,
            InvalidContentShape: As for generate_topic.
        """
        prompt = prompt_override or detail_prompt(title, fact)
        text = await self._complete(prompt, json_mode=True)
        payload = load_json_object(text)
        if not isinstance(payload, dict):
            raise InvalidContentShape("Detail response is not a JSON object", payload)

        caption = payload.get("caption")
        points = payload.get("points")
        if not isinstance(caption, str):
            raise InvalidContentShape("Detail response caption is not a string", payload)
        if not isinstance(points, list):
            raise InvalidContentShape("Detail response points is not a list", payload)

        return DetailContent(caption=caption, points=[str(p) for p in points])

    async def _complete(self, prompt: str, json_mode: bool = False) -> str:
        """Admit, then send exactly one request."""
        self._rate_limiter.try_admit()
        try:
            response = await self._llm.complete(
                messages=[Message(role="user", content=prompt)],
                system=SYSTEM_PROMPT,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                json_mode=json_mode,
            )
        except GenerationError:
            raise
        except Exception as e:
            logger.warning("Generation call to %s failed: %s", self._llm.provider_name, e)
            raise GenerationUnavailable(
                f"{self._llm.provider_name} generation failed: {e}"
            ) from e

        logger.debug(
            "Generation via %s: %d ms, %d output tokens",
            response.provider, response.latency_ms, response.output_tokens,
        )
        return response.content


def _to_section(item: Any) -> Section | None:
    if not isinstance(item, dict):
        return None
    category = item.get("category")
    if not isinstance(category, str) or not category.strip():
        return None
    return Section(category=category.strip(), facts=_clean_strings(item.get("facts")))


def _clean_strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]


def _distinct_strings(value: Any) -> list[str]:
    """_clean_strings with case-insensitive duplicates removed, first spelling kept."""
    return _merge_unique(_clean_strings(value), [])


def _merge_unique(first: list[str], second: list[str]) -> list[str]:
    seen: set[str] = set()
    merged: list[str] = []
    for item in [*first, *second]:
        key = item.casefold()
        if key not in seen:
            seen.add(key)
            merged.append(item)
    return merged
