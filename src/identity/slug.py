# src/identity/slug.py - v1
"""Slug Allocator: deterministic, collision-resistant URL identifiers.

The pre-check against the store is only an optimisation; the storage
uniqueness constraint on slug is what makes allocation safe, and a
conflict there restarts the whole compute -> check -> insert sequence.
"""

from __future__ import annotations

import hashlib
import logging
import re
from typing import Callable

from topicforge.core.errors import SlugCollisionExhausted, StorageConflict
from topicforge.core.models import Topic
from topicforge.storage.base_topic_store import BaseTopicStore

logger = logging.getLogger(__name__)

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lowercase, collapse non [a-z0-9] runs to '-', trim dashes.

    Titles without any ASCII letters or digits get a stable hashed slug.
    """
    slug = _NON_SLUG_RE.sub("-", title.lower()).strip("-")
    if slug:
        return slug
    digest = hashlib.sha256(title.strip().encode("utf-8")).hexdigest()[:8]
    return f"topic-{digest}"


class SlugAllocator:
    """Assign globally unique slugs, retrying on storage conflicts."""

    def __init__(self, store: BaseTopicStore, max_attempts: int = 100) -> None:
        self._store = store
        self._max_attempts = max_attempts

    async def allocate(self, title: str, exclude_title: str | None = None) -> str:
        """First free slug among base, base-1, base-2, ...

        Raises:
            SlugCollisionExhausted: If every candidate up to the cap is taken.
        """
        base = slugify(title)
        candidate = base
        for n in range(1, self._max_attempts + 1):
            if not await self._store.slug_taken(candidate, exclude_title=exclude_title):
                return candidate
            candidate = f"{base}-{n}"
        raise SlugCollisionExhausted(title, self._max_attempts)

    async def create_topic(self, title: str, build: Callable[[str], Topic]) -> Topic:
        """Allocate a slug and insert build(slug), retrying on slug conflicts.

        Title conflicts are not retried here; they propagate so the resolver
        can converge on the record that won.

        Raises:
            StorageConflict: On a title uniqueness violation.
            SlugCollisionExhausted: After max_attempts slug conflicts.
        """
        for attempt in range(1, self._max_attempts + 1):
            slug = await self.allocate(title)
            try:
                return await self._store.insert(build(slug))
            except StorageConflict as e:
                if e.field != "slug":
                    raise
                logger.info(
                    "Slug %r for %r taken concurrently (attempt %d), retrying",
                    slug, title, attempt,
                )
        raise SlugCollisionExhausted(title, self._max_attempts)

    async def assign_slug(self, topic: Topic) -> Topic:
        """Backfill a slug onto an existing record that lacks one."""
        for attempt in range(1, self._max_attempts + 1):
            slug = await self.allocate(topic.title, exclude_title=topic.title)
            try:
                updated = await self._store.update_one(topic.title, {"slug": slug})
            except StorageConflict as e:
                if e.field != "slug":
                    raise
                logger.info(
                    "Slug %r for %r taken concurrently (attempt %d), retrying",
                    slug, topic.title, attempt,
                )
                continue
            logger.info("Assigned slug %r to topic %r", slug, topic.title)
            return updated or topic.model_copy(update={"slug": slug})
        raise SlugCollisionExhausted(topic.title, self._max_attempts)
