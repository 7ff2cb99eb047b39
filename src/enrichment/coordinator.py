# src/enrichment/coordinator.py - v1
"""Section Enrichment Coordinator: lazy fetch-or-reuse per (topic, category).

States per pair: unfetched -> fetching -> cached. Persisted non-empty
results are served without a network call. A failing integration is logged
and leaves the pair unfetched so a later expansion can retry; it never
touches the other categories.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Literal

from topicforge.core.models import (
    ENRICHMENT_CATEGORIES,
    EnrichmentCategory,
    EnrichmentItem,
    EnrichmentResults,
    Topic,
    utcnow,
)
from topicforge.enrichment.base_search import BaseSearchProvider
from topicforge.logging.context import set_topic_context
from topicforge.storage.base_topic_store import BaseTopicStore, title_key

logger = logging.getLogger(__name__)

EnrichmentState = Literal["unfetched", "fetching", "cached"]


class EnrichmentCoordinator:
    """Expand enrichment categories on demand and persist the results."""

    def __init__(
        self,
        store: BaseTopicStore,
        providers: dict[EnrichmentCategory, BaseSearchProvider],
    ) -> None:
        self._store = store
        self._providers = providers
        self._inflight: dict[tuple[str, EnrichmentCategory], asyncio.Task[list[EnrichmentItem]]] = {}

    async def expand(self, topic: Topic, category: EnrichmentCategory) -> list[EnrichmentItem]:
        """Return the category's items, fetching and persisting them on first use.

        Never raises for integration failures; returns [] instead.
        """
        _check_category(category)
        set_topic_context(topic.title, f"expand:{category}")

        persisted = await self._persisted(topic, category)
        if persisted.items:
            return persisted.items

        key = (title_key(topic.title), category)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(topic, category))
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        return await asyncio.shield(task)

    async def state(self, topic: Topic, category: EnrichmentCategory) -> EnrichmentState:
        """Current state of one (topic, category) pair."""
        _check_category(category)
        if (title_key(topic.title), category) in self._inflight:
            return "fetching"
        persisted = await self._persisted(topic, category)
        return "cached" if persisted.items else "unfetched"

    async def _fetch(self, topic: Topic, category: EnrichmentCategory) -> list[EnrichmentItem]:
        provider = self._providers.get(category)
        if provider is None:
            logger.warning("No search provider configured for %s", category)
            return []

        try:
            items = await provider.search(topic.title)
        except Exception as e:
            logger.warning(
                "Enrichment %s for %r failed, left unfetched: %s",
                category, topic.title, e,
            )
            return []

        results = EnrichmentResults(items=items, last_updated=utcnow())
        try:
            await self._store.update_one(topic.title, {f"enrichment.{category}": results})
        except Exception:
            logger.exception("Persisting %s enrichment for %r failed", category, topic.title)
            return items
        logger.info("Stored %d %s results for %r", len(items), category, topic.title)
        return items

    async def _persisted(self, topic: Topic, category: EnrichmentCategory) -> EnrichmentResults:
        # Re-read so results persisted by another caller since topic was loaded are reused
        current = await self._store.find_by_title(topic.title)
        source = current if current is not None else topic
        return source.enrichment.get(category)

    def _forget(self, key: tuple[str, EnrichmentCategory], task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]


def _check_category(category: str) -> None:
    if category not in ENRICHMENT_CATEGORIES:
        raise ValueError(
            f"Unknown enrichment category: {category!r}. "
            f"Available: {', '.join(ENRICHMENT_CATEGORIES)}"
        )
