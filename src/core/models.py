# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

EnrichmentCategory = Literal["books", "videos", "wiki"]

ENRICHMENT_CATEGORIES: tuple[EnrichmentCategory, ...] = ("books", "videos", "wiki")


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


# === TOPIC CONTENT ===


class Section(BaseModel):
    """A named category of short fact statements within a topic."""

    category: str
    facts: list[str] = Field(default_factory=list)


class TopicContent(BaseModel):
    """Validated output of a topic generation call."""

    summary: str
    sections: list[Section]
    related_topics: list[str] = Field(default_factory=list)


class DetailContent(BaseModel):
    """Deep-dive answer for one fact string or enrichment item."""

    caption: str
    points: list[str]


# === ENRICHMENT ===


class EnrichmentItem(BaseModel):
    """One external search result (book, video or encyclopedia page)."""

    title: str
    url: str
    description: str = ""
    thumbnail: str = ""
    authors: list[str] = Field(default_factory=list)
    published: str = ""
    channel: str = ""


class EnrichmentResults(BaseModel):
    """Persisted results for one enrichment category."""

    items: list[EnrichmentItem] = Field(default_factory=list)
    last_updated: datetime | None = None


class Enrichment(BaseModel):
    """Three independently populated external-media result sets."""

    books: EnrichmentResults = Field(default_factory=EnrichmentResults)
    videos: EnrichmentResults = Field(default_factory=EnrichmentResults)
    wiki: EnrichmentResults = Field(default_factory=EnrichmentResults)

    def get(self, category: EnrichmentCategory) -> EnrichmentResults:
        if category not in ENRICHMENT_CATEGORIES:
            raise ValueError(f"Unknown enrichment category: {category!r}")
        return getattr(self, category)


# === TOPIC RECORD ===


class Topic(BaseModel):
    """Persisted learning-content record keyed by title and slug."""

    title: str
    slug: str | None = None
    summary: str
    sections: list[Section] = Field(default_factory=list)
    related_topics: list[str] = Field(default_factory=list)
    enrichment: Enrichment = Field(default_factory=Enrichment)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def has_slug(self) -> bool:
        return bool(self.slug and self.slug.strip() and self.slug != "undefined")


class TopicSuggestion(BaseModel):
    """Search-box suggestion: a title and where it lives."""

    title: str
    slug: str | None = None
