# src/storage/store_factory.py - v1
"""Factory for topic store instantiation."""

from __future__ import annotations

from topicforge.config.settings import Settings
from topicforge.storage.base_topic_store import BaseTopicStore


def create_topic_store(settings: Settings | None = None) -> BaseTopicStore:
    """Instantiate the configured store backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.
    """
    backend = "memory" if settings is None else settings.store_backend

    if backend == "memory":
        from topicforge.storage.memory_store import MemoryTopicStore
        return MemoryTopicStore()

    if backend == "sqlite":
        from topicforge.storage.sqlite_store import SqliteTopicStore
        return SqliteTopicStore(db_path=settings.store_path)

    raise ValueError(f"Unsupported store backend: {backend!r}")
