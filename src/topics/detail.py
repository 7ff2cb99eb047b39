# src/topics/detail.py - v1
"""Detail lookups: cache-first deep dives for facts and enrichment items.

Detail entries are never persisted on the topic; they live in the shared
ResponseCache keyed by (kind, topic title, fact text or item identity).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from topicforge.cache.keys import make_cache_key
from topicforge.cache.response_cache import ResponseCache
from topicforge.core.models import DetailContent, EnrichmentCategory, EnrichmentItem, Topic
from topicforge.generation import prompts
from topicforge.generation.client import GenerationClient
from topicforge.logging.context import set_topic_context

if TYPE_CHECKING:
    from topicforge.enrichment.wikipedia import WikipediaSearch

logger = logging.getLogger(__name__)


class DetailService:
    """Serve detail entries from cache, generating on miss."""

    def __init__(
        self,
        generation: GenerationClient,
        cache: ResponseCache[DetailContent],
        wikipedia: WikipediaSearch | None = None,
        max_key_part_length: int = 100,
    ) -> None:
        self._generation = generation
        self._cache = cache
        self._wikipedia = wikipedia
        self._max_key_part_length = max_key_part_length

    async def lookup_detail(self, topic: Topic, fact: str) -> DetailContent:
        """Deep dive into one fact string of a topic.

        Raises:
            RateLimited, GenerationError: On a cache miss whose generation failed.
        """
        set_topic_context(topic.title, "detail")
        key = self._key("detail", topic.title, fact)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Detail cache hit for %s", key)
            return _detached(cached)

        content = await self._generation.generate_detail(topic.title, fact)
        self._cache.set(key, content)
        return _detached(content)

    async def lookup_item_detail(
        self,
        topic: Topic,
        category: EnrichmentCategory,
        item: EnrichmentItem,
    ) -> DetailContent:
        """Deep dive into one book, video or encyclopedia result."""
        set_topic_context(topic.title, f"detail:{category}")
        if category == "books":
            key = self._key("book", item.title, ",".join(item.authors))
        elif category == "videos":
            key = self._key("video", item.url, item.title)
        elif category == "wiki":
            key = self._key("wiki", item.title)
        else:
            raise ValueError(f"Unknown enrichment category: {category!r}")

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Item detail cache hit for %s", key)
            return _detached(cached)

        prompt = await self._item_prompt(category, item)
        content = await self._generation.generate_detail(
            item.title, item.description, prompt_override=prompt
        )
        self._cache.set(key, content)
        return _detached(content)

    async def _item_prompt(self, category: EnrichmentCategory, item: EnrichmentItem) -> str:
        if category == "books":
            authors = ", ".join(item.authors) or "an unknown author"
            return prompts.BOOK_DETAIL_PROMPT.format(
                title=item.title, authors=authors,
                description=item.description, url=item.url,
            )
        if category == "videos":
            return prompts.VIDEO_DETAIL_PROMPT.format(
                title=item.title, description=item.description, url=item.url,
            )
        text = item.description
        if self._wikipedia is not None:
            try:
                text = await self._wikipedia.fetch_page_text(item.title) or text
            except Exception as e:
                logger.warning("Wikipedia text for %r unavailable: %s", item.title, e)
        return prompts.WIKI_DETAIL_PROMPT.format(title=item.title, text=text)

    def _key(self, *parts: str) -> str:
        return make_cache_key(*parts, max_part_length=self._max_key_part_length)


def _detached(content: DetailContent) -> DetailContent:
    # Callers get their own copy; the cached entry stays as generated
    return content.model_copy(deep=True)
