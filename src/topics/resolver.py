# src/topics/resolver.py - v1
"""Topic Resolver: return an existing topic or create it exactly once.

Lookup order is slug (lowercased) first, then case-insensitive title, with
slug backfill for legacy records. Creation generates content first and
persists only a fully validated topic; failures leave storage untouched.
"""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import unquote

from topicforge.core.errors import StorageConflict
from topicforge.core.models import Enrichment, Topic, TopicContent, utcnow
from topicforge.generation.client import GenerationClient
from topicforge.identity.slug import SlugAllocator
from topicforge.logging.context import set_topic_context
from topicforge.storage.base_topic_store import BaseTopicStore, title_key

logger = logging.getLogger(__name__)


class TopicResolver:
    """Resolve identifiers to persisted Topic records."""

    def __init__(
        self,
        store: BaseTopicStore,
        generation: GenerationClient,
        allocator: SlugAllocator,
        settle_delay_s: float = 0.0,
    ) -> None:
        self._store = store
        self._generation = generation
        self._allocator = allocator
        self._settle_delay_s = settle_delay_s
        self._inflight: dict[str, asyncio.Task[Topic]] = {}

    async def resolve(self, identifier: str) -> Topic:
        """Return the topic for a slug or title, generating it on first use.

        Raises:
            ValueError: If the identifier is blank.
            RateLimited, GenerationError: Generation failed; nothing persisted.
            SlugCollisionExhausted: Slug allocation gave up.
        """
        value = _normalize_identifier(identifier)
        set_topic_context(value, "resolve")

        topic = await self.find(value)
        if topic is not None:
            return await self._backfill_related(topic)

        key = title_key(value)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._create(value))
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.debug("Joining in-flight creation of %r", value)
        # Shielded: an abandoned caller still lets the creation land in storage
        return await asyncio.shield(task)

    async def find(self, identifier: str) -> Topic | None:
        """Lookup only: slug first, then title, backfilling a missing slug."""
        value = _normalize_identifier(identifier)
        topic = await self._store.find_by_slug(value.lower())
        if topic is None:
            topic = await self._store.find_by_title(value)
        if topic is not None and not topic.has_slug:
            topic = await self._allocator.assign_slug(topic)
            await self._settle()
        return topic

    async def _create(self, title: str) -> Topic:
        logger.info("Generating new topic %r", title)
        content = await self._generation.generate_topic(title)

        try:
            topic = await self._allocator.create_topic(
                title, lambda slug: _build_topic(title, slug, content)
            )
        except StorageConflict as e:
            if e.field != "title":
                raise
            logger.info("Topic %r was created concurrently, re-reading", title)
            await self._settle()
            existing = await self.find(title)
            if existing is None:
                raise
            return existing

        await self._settle()
        logger.info("Created topic %r with slug %r", topic.title, topic.slug)
        return topic

    async def _backfill_related(self, topic: Topic) -> Topic:
        if topic.related_topics:
            return topic
        logger.info("Backfilling related topics for %r", topic.title)
        related = await self._generation.generate_related_topics(topic.title)
        updated = await self._store.update_one(topic.title, {"related_topics": related})
        await self._settle()
        return updated or topic.model_copy(update={"related_topics": related})

    async def _settle(self) -> None:
        if self._settle_delay_s > 0:
            await asyncio.sleep(self._settle_delay_s)

    def _forget(self, key: str, task: asyncio.Task[Topic]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Creation of %r failed: %s", key, task.exception())


def _normalize_identifier(identifier: str) -> str:
    value = unquote(identifier).strip()
    if not value:
        raise ValueError("Topic identifier must not be blank")
    return value


def _build_topic(title: str, slug: str, content: TopicContent) -> Topic:
    now = utcnow()
    return Topic(
        title=title,
        slug=slug,
        summary=content.summary,
        sections=content.sections,
        related_topics=content.related_topics,
        enrichment=Enrichment(),
        created_at=now,
        updated_at=now,
    )
