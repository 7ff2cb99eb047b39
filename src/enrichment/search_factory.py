# src/enrichment/search_factory.py - v1
"""Factory for the three external search integrations."""

from __future__ import annotations

import httpx

from topicforge.config.settings import Settings
from topicforge.core.models import EnrichmentCategory
from topicforge.enrichment.base_search import BaseSearchProvider
from topicforge.enrichment.books import GoogleBooksSearch
from topicforge.enrichment.videos import BraveVideoSearch
from topicforge.enrichment.wikipedia import WikipediaSearch


def create_search_providers(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> dict[EnrichmentCategory, BaseSearchProvider]:
    """One provider per enrichment category.

    Args:
        settings: Application settings (API keys, limits, timeouts).
        client: Shared HTTP client; None opens one per request.
    """
    common = {
        "max_results": settings.search_max_results,
        "timeout_s": settings.search_timeout_s,
        "client": client,
    }
    return {
        "books": GoogleBooksSearch(api_key=settings.google_books_api_key, **common),
        "videos": BraveVideoSearch(api_key=settings.brave_api_key, **common),
        "wiki": WikipediaSearch(
            max_content_chars=settings.wikipedia_max_content_chars, **common
        ),
    }
