# src/storage/memory_store.py - v1
"""In-process topic store (STORE_BACKEND=memory).

Used by tests and ephemeral runs. Each operation completes without
suspending, so check-and-insert is atomic under asyncio.
"""

from __future__ import annotations

import logging
from typing import Any

from topicforge.core.errors import StorageConflict
from topicforge.core.models import Topic
from topicforge.storage.base_topic_store import BaseTopicStore, apply_patch, title_key

logger = logging.getLogger(__name__)


class MemoryTopicStore(BaseTopicStore):
    """Dict-backed store with title and slug unique indexes."""

    def __init__(self) -> None:
        self._by_title: dict[str, Topic] = {}
        self._slug_index: dict[str, str] = {}

    async def find_by_slug(self, slug: str) -> Topic | None:
        key = self._slug_index.get(slug)
        if key is None:
            return None
        return self._by_title[key].model_copy(deep=True)

    async def find_by_title(self, title: str) -> Topic | None:
        topic = self._by_title.get(title_key(title))
        return topic.model_copy(deep=True) if topic else None

    async def slug_taken(self, slug: str, exclude_title: str | None = None) -> bool:
        owner = self._slug_index.get(slug)
        if owner is None:
            return False
        return exclude_title is None or owner != title_key(exclude_title)

    async def insert(self, topic: Topic) -> Topic:
        key = title_key(topic.title)
        if key in self._by_title:
            raise StorageConflict("title", topic.title)
        if topic.slug and topic.slug in self._slug_index:
            raise StorageConflict("slug", topic.slug)
        stored = topic.model_copy(deep=True)
        self._by_title[key] = stored
        if stored.slug:
            self._slug_index[stored.slug] = key
        logger.debug("Inserted topic %r (slug=%s)", topic.title, topic.slug)
        return stored.model_copy(deep=True)

    async def update_one(self, title: str, patch: dict[str, Any]) -> Topic | None:
        key = title_key(title)
        current = self._by_title.get(key)
        if current is None:
            return None
        updated = apply_patch(current, patch)
        if updated.slug != current.slug:
            if updated.slug and self._slug_index.get(updated.slug, key) != key:
                raise StorageConflict("slug", updated.slug)
            if current.slug:
                self._slug_index.pop(current.slug, None)
            if updated.slug:
                self._slug_index[updated.slug] = key
        self._by_title[key] = updated
        return updated.model_copy(deep=True)

    async def search_titles(self, query: str, limit: int = 10) -> list[Topic]:
        needle = query.strip().casefold()
        if not needle:
            return []
        matches = [t for k, t in self._by_title.items() if needle in k]
        return [t.model_copy(deep=True) for t in matches[:limit]]

    async def list_topics(self) -> list[Topic]:
        topics = sorted(self._by_title.values(), key=lambda t: t.created_at)
        return [t.model_copy(deep=True) for t in topics]
