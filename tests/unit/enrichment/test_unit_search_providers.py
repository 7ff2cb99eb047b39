# tests/unit/enrichment/test_unit_search_providers.py - v1
"""Tests for enrichment search providers over httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from topicforge.config.settings import Settings
from topicforge.core.errors import SearchUnavailable
from topicforge.enrichment.books import GoogleBooksSearch
from topicforge.enrichment.search_factory import create_search_providers
from topicforge.enrichment.videos import BraveVideoSearch
from topicforge.enrichment.wikipedia import WikipediaSearch


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestGoogleBooksSearch:
    @pytest.mark.asyncio
    async def test_maps_volumes(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["q"] == "Entropy"
            assert request.url.params["key"] == "books-key"
            return httpx.Response(200, json={"items": [
                {"volumeInfo": {
                    "title": "Entropy Demystified",
                    "authors": ["Arieh Ben-Naim"],
                    "description": "The second law reduced to plain common sense.",
                    "infoLink": "https://books.example/1",
                    "imageLinks": {"thumbnail": "https://img.example/1?zoom=1"},
                    "publishedDate": "2008-06-01",
                }},
                {"volumeInfo": {"title": "No description", "infoLink": "https://books.example/2"}},
                {"volumeInfo": {"title": "Anonymous", "description": "Unsigned."}},
            ]})

        async with _client(handler) as client:
            items = await GoogleBooksSearch("books-key", client=client).search("Entropy")

        assert [i.title for i in items] == ["Entropy Demystified", "Anonymous"]
        assert items[0].thumbnail.endswith("zoom=2")
        assert items[0].published == "2008"
        assert items[1].authors == ["Unknown Author"]

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(SearchUnavailable):
            await GoogleBooksSearch("").search("Entropy")

    @pytest.mark.asyncio
    async def test_no_items(self):
        async with _client(lambda r: httpx.Response(200, json={"totalItems": 0})) as client:
            assert await GoogleBooksSearch("k", client=client).search("zzz") == []


class TestBraveVideoSearch:
    @pytest.mark.asyncio
    async def test_maps_results(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["X-Subscription-Token"] == "brave-key"
            assert request.url.params["safesearch"] == "moderate"
            return httpx.Response(200, json={"results": [
                {
                    "title": "Entanglement explained",
                    "url": "https://video.example/watch?v=abc",
                    "description": "Lecture.",
                    "age": "2 years ago",
                    "thumbnail": {"src": "https://img.example/v.jpg"},
                    "video": {"creator": "Physics Lab"},
                },
                {"title": "No url"},
            ]})

        async with _client(handler) as client:
            items = await BraveVideoSearch("brave-key", client=client).search("Entanglement")

        assert len(items) == 1
        assert items[0].channel == "Physics Lab"
        assert items[0].thumbnail == "https://img.example/v.jpg"
        assert items[0].published == "2 years ago"

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        async with _client(lambda r: httpx.Response(429, text="slow down")) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await BraveVideoSearch("k", client=client).search("Entanglement")

    @pytest.mark.asyncio
    async def test_missing_key(self):
        with pytest.raises(SearchUnavailable):
            await BraveVideoSearch("").search("Entanglement")


class TestWikipediaSearch:
    @pytest.mark.asyncio
    async def test_search_keeps_ranking(self):
        def handler(request: httpx.Request) -> httpx.Response:
            params = request.url.params
            if params.get("list") == "search":
                return httpx.Response(200, json={"query": {"search": [
                    {"pageid": 20}, {"pageid": 10},
                ]}})
            assert params["pageids"] == "20|10"
            return httpx.Response(200, json={"query": {"pages": {
                "10": {"title": "Bell test", "extract": "A Bell test is...\nMore."},
                "20": {
                    "title": "Quantum entanglement",
                    "extract": "Entanglement is...",
                    "thumbnail": {"source": "https://img.example/q.png"},
                },
            }}})

        async with _client(handler) as client:
            items = await WikipediaSearch(client=client).search("Quantum Entanglement")

        assert [i.title for i in items] == ["Quantum entanglement", "Bell test"]
        assert items[0].url == "https://en.wikipedia.org/?curid=20"
        assert items[1].description == "A Bell test is..."

    @pytest.mark.asyncio
    async def test_no_hits_single_request(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"query": {"search": []}})

        async with _client(handler) as client:
            assert await WikipediaSearch(client=client).search("zzz") == []
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_page_text_truncated(self):
        body = {"query": {"pages": {"1": {"extract": "x" * 100}}}}
        async with _client(lambda r: httpx.Response(200, json=body)) as client:
            text = await WikipediaSearch(client=client, max_content_chars=10).fetch_page_text("X")
        assert text == "x" * 10 + "..."


class TestSearchFactory:
    def test_one_provider_per_category(self):
        settings = Settings(_env_file=None, brave_api_key="b", google_books_api_key="g")
        providers = create_search_providers(settings)
        assert set(providers) == {"books", "videos", "wiki"}
        assert all(p.category == name for name, p in providers.items())
