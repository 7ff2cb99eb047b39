# src/storage/base_topic_store.py - v1
"""Abstract document store for Topic records.

Implementations must enforce uniqueness of title (case-insensitive) and of
slug at the storage layer and report violations as StorageConflict; the
slug allocator and resolver rely on that for race resolution.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from topicforge.core.models import ENRICHMENT_CATEGORIES, Topic


def title_key(title: str) -> str:
    """Normalized form used for title uniqueness and lookup."""
    return title.strip().casefold()


class BaseTopicStore(ABC):
    """Unified interface for topic storage backends."""

    @abstractmethod
    async def find_by_slug(self, slug: str) -> Topic | None:
        """Exact slug lookup."""

    @abstractmethod
    async def find_by_title(self, title: str) -> Topic | None:
        """Case-insensitive exact title lookup."""

    @abstractmethod
    async def slug_taken(self, slug: str, exclude_title: str | None = None) -> bool:
        """Whether another record already holds this slug."""

    @abstractmethod
    async def insert(self, topic: Topic) -> Topic:
        """Insert a new record.

        Raises:
            StorageConflict: If title or slug is already taken.
        """

    @abstractmethod
    async def update_one(self, title: str, patch: dict[str, Any]) -> Topic | None:
        """Apply a patch to the record with this title and return it.

        Patch keys are top-level Topic fields or "enrichment.<category>".
        Returns None when no record matches.

        Raises:
            StorageConflict: If the patch assigns a slug already taken.
        """

    @abstractmethod
    async def search_titles(self, query: str, limit: int = 10) -> list[Topic]:
        """Case-insensitive substring match over titles."""

    @abstractmethod
    async def list_topics(self) -> list[Topic]:
        """All records, oldest first (maintenance scans)."""

    async def close(self) -> None:
        """Release backend resources."""


def apply_patch(topic: Topic, patch: dict[str, Any]) -> Topic:
    """Return a copy of topic with a validated patch applied."""
    data = topic.model_dump()
    enrichment = data["enrichment"]
    for key, value in patch.items():
        if key.startswith("enrichment."):
            category = key.split(".", 1)[1]
            if category not in ENRICHMENT_CATEGORIES:
                raise ValueError(f"Unknown enrichment category: {category!r}")
            enrichment[category] = value
        elif key in ("title", "created_at"):
            raise ValueError(f"Field {key!r} is immutable")
        elif key in Topic.model_fields:
            data[key] = value
        else:
            raise ValueError(f"Unknown topic field: {key!r}")
    if "updated_at" not in patch:
        data.pop("updated_at")
    return Topic.model_validate(data)
