# src/enrichment/books.py - v1
"""Google Books search (written-media enrichment)."""

from __future__ import annotations

from typing import Any

import httpx

from topicforge.core.errors import SearchUnavailable
from topicforge.core.models import EnrichmentCategory, EnrichmentItem
from topicforge.enrichment.base_search import BaseSearchProvider

GOOGLE_BOOKS_API = "https://www.googleapis.com/books/v1/volumes"


class GoogleBooksSearch(BaseSearchProvider):
    """Books with descriptions, best matches first."""

    def __init__(
        self,
        api_key: str,
        max_results: int = 9,
        timeout_s: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(max_results=max_results, timeout_s=timeout_s, client=client)
        self._api_key = api_key

    @property
    def category(self) -> EnrichmentCategory:
        return "books"

    async def search(self, topic: str) -> list[EnrichmentItem]:
        if not self._api_key:
            raise SearchUnavailable("GOOGLE_BOOKS_API_KEY is not configured")

        data = await self._get_json(
            GOOGLE_BOOKS_API,
            params={"q": topic, "maxResults": self._max_results, "key": self._api_key},
        )
        books: list[EnrichmentItem] = []
        for item in data.get("items") or []:
            info = item.get("volumeInfo") or {}
            # Books without a description make poor deep-dive material
            if not info.get("description"):
                continue
            books.append(_to_item(info))
        return books[: self._max_results]


def _to_item(info: dict[str, Any]) -> EnrichmentItem:
    thumbnail = (info.get("imageLinks") or {}).get("thumbnail") or ""
    published = str(info.get("publishedDate") or "")
    return EnrichmentItem(
        title=info.get("title") or "",
        url=info.get("infoLink") or "",
        description=info["description"],
        thumbnail=thumbnail.replace("zoom=1", "zoom=2"),
        authors=list(info.get("authors") or ["Unknown Author"]),
        published=published[:4],
    )
