# src/api/facade.py - v2
"""Public API facade: the entry point the presentation layer talks to.

Usage:
    from topicforge.api.facade import build_service
    service = build_service()
    topic = await service.resolve_topic("Quantum Entanglement")
    videos = await service.expand_section(topic, "videos")

build_service constructs the process-wide instances (one rate limiter,
one response cache, one store) exactly once; tests construct TopicService
directly with isolated collaborators.
"""

from __future__ import annotations

import logging

import httpx

from topicforge.cache.response_cache import ResponseCache
from topicforge.config.settings import Settings
from topicforge.core.errors import TopicNotFound
from topicforge.core.models import (
    DetailContent,
    EnrichmentCategory,
    EnrichmentItem,
    Topic,
    TopicSuggestion,
)
from topicforge.enrichment.coordinator import EnrichmentCoordinator
from topicforge.generation.client import GenerationClient
from topicforge.identity.slug import SlugAllocator
from topicforge.llm.base_client import BaseLLMClient
from topicforge.llm.rate_limiter import SlidingWindowRateLimiter
from topicforge.storage.base_topic_store import BaseTopicStore
from topicforge.topics.detail import DetailService
from topicforge.topics.resolver import TopicResolver

logger = logging.getLogger(__name__)


class TopicService:
    """Resolution, detail lookups, enrichment and suggestions over one store."""

    def __init__(
        self,
        store: BaseTopicStore,
        resolver: TopicResolver,
        details: DetailService,
        enrichment: EnrichmentCoordinator,
        generation: GenerationClient,
        allocator: SlugAllocator,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.details = details
        self.enrichment = enrichment
        self.generation = generation
        self.allocator = allocator
        self._http_client = http_client

    async def resolve_topic(self, identifier: str) -> Topic:
        """Existing topic for a slug or title, generated on first use.

        Raises:
            RateLimited, GenerationError, SlugCollisionExhausted: Creation failed.
        """
        return await self.resolver.resolve(identifier)

    async def find_topic(self, identifier: str) -> Topic | None:
        """Existing topic only; never generates."""
        return await self.resolver.find(identifier)

    async def get_topic(self, identifier: str) -> Topic:
        """Like find_topic, but a missing topic is an error.

        Raises:
            TopicNotFound: Nothing stored under the slug or title.
        """
        topic = await self.resolver.find(identifier)
        if topic is None:
            raise TopicNotFound(identifier)
        return topic

    async def lookup_detail(self, topic: Topic, fact: str) -> DetailContent:
        return await self.details.lookup_detail(topic, fact)

    async def lookup_item_detail(
        self, topic: Topic, category: EnrichmentCategory, item: EnrichmentItem,
    ) -> DetailContent:
        return await self.details.lookup_item_detail(topic, category, item)

    async def expand_section(
        self, topic: Topic, category: EnrichmentCategory,
    ) -> list[EnrichmentItem]:
        return await self.enrichment.expand(topic, category)

    async def search_suggestions(self, query: str, limit: int = 10) -> list[TopicSuggestion]:
        """Titles containing the query, case-insensitively."""
        if not query or not query.strip():
            return []
        topics = await self.store.search_titles(query, limit=limit)
        return [TopicSuggestion(title=t.title, slug=t.slug) for t in topics]

    async def aclose(self) -> None:
        """Release the store and shared HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
        await self.store.close()


def build_service(
    settings: Settings | None = None,
    llm: BaseLLMClient | None = None,
    store: BaseTopicStore | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> TopicService:
    """Wire the pipeline from settings.

    Args:
        settings: Global settings. Loaded from .env if None.
        llm: Generation transport. Built from settings if None.
        store: Topic store. Built from settings if None.
        http_client: Shared client for search integrations. Opened here if None.
    """
    from topicforge.enrichment.search_factory import create_search_providers
    from topicforge.llm.client_factory import create_default_client
    from topicforge.storage.store_factory import create_topic_store

    settings = settings or Settings()
    if llm is None:
        if not settings.llm_api_key:
            logger.warning("No API key configured for LLM provider %s", settings.llm_provider)
        llm = create_default_client(settings)
    store = store or create_topic_store(settings)

    rate_limiter = SlidingWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_ms=settings.rate_limit_window_ms,
    )
    generation = GenerationClient(
        llm,
        rate_limiter,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        related_min=settings.related_topics_min,
        related_max=settings.related_topics_max,
    )
    cache: ResponseCache[DetailContent] = ResponseCache(
        max_size=settings.cache_max_size,
        max_age_s=settings.cache_max_age_s,
    )
    allocator = SlugAllocator(store, max_attempts=settings.slug_max_attempts)

    http_client = http_client or httpx.AsyncClient(timeout=settings.search_timeout_s)
    providers = create_search_providers(settings, client=http_client)

    logger.info(
        "Topic service ready: provider=%s, model=%s, store=%s",
        settings.llm_provider, settings.llm_model, settings.store_backend,
    )
    return TopicService(
        store=store,
        resolver=TopicResolver(
            store, generation, allocator, settle_delay_s=settings.store_settle_delay_s,
        ),
        details=DetailService(
            generation,
            cache,
            wikipedia=providers["wiki"],
            max_key_part_length=settings.cache_key_max_part_length,
        ),
        enrichment=EnrichmentCoordinator(store, providers),
        generation=generation,
        allocator=allocator,
        http_client=http_client,
    )
