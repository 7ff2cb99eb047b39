# src/enrichment/videos.py - v1
"""Brave video search (video enrichment)."""

from __future__ import annotations

from typing import Any

import httpx

from topicforge.core.errors import SearchUnavailable
from topicforge.core.models import EnrichmentCategory, EnrichmentItem
from topicforge.enrichment.base_search import BaseSearchProvider

BRAVE_VIDEO_API = "https://api.search.brave.com/res/v1/videos/search"


class BraveVideoSearch(BaseSearchProvider):
    """Videos from the Brave Search API, safesearch moderate."""

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
        return "videos"

    async def search(self, topic: str) -> list[EnrichmentItem]:
        if not self._api_key:
            raise SearchUnavailable("BRAVE_API_KEY is not configured")

        data = await self._get_json(
            BRAVE_VIDEO_API,
            params={
                "q": topic,
                "count": self._max_results,
                "search_lang": "en",
                "safesearch": "moderate",
            },
            headers={
                "Accept": "application/json",
                "Accept-Encoding": "gzip",
                "X-Subscription-Token": self._api_key,
            },
        )
        results = data.get("results") or []
        return [_to_item(r) for r in results if r.get("url")][: self._max_results]


def _to_item(result: dict[str, Any]) -> EnrichmentItem:
    video = result.get("video") or {}
    thumbnail = result.get("thumbnail") or {}
    return EnrichmentItem(
        title=result.get("title") or "",
        url=result["url"],
        description=result.get("description") or "",
        thumbnail=thumbnail.get("src") or "",
        published=result.get("age") or "",
        channel=video.get("creator") or video.get("publisher") or "",
    )
