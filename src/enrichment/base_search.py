# src/enrichment/base_search.py - v1
"""Abstract external search integration.

Each provider maps a topic string to a list of EnrichmentItem for one
enrichment category. Providers raise on failure; containment is the
coordinator's job.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from topicforge.core.models import EnrichmentCategory, EnrichmentItem

logger = logging.getLogger(__name__)


class BaseSearchProvider(ABC):
    """Unified interface for external media search."""

    def __init__(
        self,
        max_results: int = 9,
        timeout_s: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._max_results = max_results
        self._timeout_s = timeout_s
        self._client = client

    @property
    @abstractmethod
    def category(self) -> EnrichmentCategory:
        """Enrichment category this provider fills."""

    @abstractmethod
    async def search(self, topic: str) -> list[EnrichmentItem]:
        """Search for items about a topic."""

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET a JSON document, raising httpx.HTTPStatusError on non-2xx."""
        if self._client is not None:
            return await self._fetch(self._client, url, params, headers)
        async with httpx.AsyncClient(timeout=self._timeout_s) as client:
            return await self._fetch(client, url, params, headers)

    @staticmethod
    async def _fetch(
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> Any:
        resp = await client.get(url, params=params, headers=headers)
        if resp.is_error:
            logger.warning(
                "Search request to %s failed: %s %s",
                url, resp.status_code, resp.text[:200],
            )
        resp.raise_for_status()
        return resp.json()
