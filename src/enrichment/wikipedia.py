# src/enrichment/wikipedia.py - v1
"""Wikipedia search (encyclopedia enrichment) and full page text.

Search is two requests: a full-text search for page ids, then one details
request for intro extracts and thumbnails of all hits.
"""

from __future__ import annotations

import httpx

from topicforge.core.models import EnrichmentCategory, EnrichmentItem
from topicforge.enrichment.base_search import BaseSearchProvider

WIKIPEDIA_API = "https://en.wikipedia.org/w/api.php"


class WikipediaSearch(BaseSearchProvider):
    """English Wikipedia pages matching a topic."""

    def __init__(
        self,
        max_results: int = 9,
        timeout_s: float = 15.0,
        max_content_chars: int = 50_000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(max_results=max_results, timeout_s=timeout_s, client=client)
        self._max_content_chars = max_content_chars

    @property
    def category(self) -> EnrichmentCategory:
        return "wiki"

    async def search(self, topic: str) -> list[EnrichmentItem]:
        search_data = await self._get_json(
            WIKIPEDIA_API,
            params={
                "action": "query",
                "list": "search",
                "srsearch": topic,
                "srlimit": self._max_results,
                "format": "json",
            },
        )
        hits = (search_data.get("query") or {}).get("search") or []
        if not hits:
            return []

        page_ids = [str(h["pageid"]) for h in hits if "pageid" in h]
        page_data = await self._get_json(
            WIKIPEDIA_API,
            params={
                "action": "query",
                "pageids": "|".join(page_ids),
                "prop": "extracts|pageimages",
                "exintro": 1,
                "explaintext": 1,
                "pithumbsize": 200,
                "format": "json",
            },
        )
        pages = (page_data.get("query") or {}).get("pages") or {}
        # Keep search ranking; the details endpoint returns pages keyed by id
        items: list[EnrichmentItem] = []
        for page_id in page_ids:
            page = pages.get(page_id)
            if not page:
                continue
            extract = page.get("extract") or ""
            items.append(
                EnrichmentItem(
                    title=page.get("title") or "",
                    url=f"https://en.wikipedia.org/?curid={page_id}",
                    description=extract.split("\n")[0],
                    thumbnail=(page.get("thumbnail") or {}).get("source") or "",
                )
            )
        return items

    async def fetch_page_text(self, title: str) -> str:
        """Full plain-text page content, truncated to max_content_chars."""
        data = await self._get_json(
            WIKIPEDIA_API,
            params={
                "action": "query",
                "titles": title,
                "prop": "extracts",
                "explaintext": 1,
                "format": "json",
            },
        )
        pages = (data.get("query") or {}).get("pages") or {}
        if not pages:
            return ""
        content = next(iter(pages.values())).get("extract") or ""
        if len(content) > self._max_content_chars:
            return content[: self._max_content_chars] + "..."
        return content
