# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides a scripted LLM client, a controllable clock, sample topics and
in-memory stores. No network access: search providers are exercised through
httpx.MockTransport.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from topicforge.api.facade import TopicService
from topicforge.cache.response_cache import ResponseCache
from topicforge.core.models import (
    DetailContent,
    EnrichmentItem,
    Section,
    Topic,
)
from topicforge.enrichment.coordinator import EnrichmentCoordinator
from topicforge.generation.client import GenerationClient
from topicforge.identity.slug import SlugAllocator
from topicforge.llm.base_client import BaseLLMClient
from topicforge.llm.models import CompletionRequest, LLMResponse
from topicforge.llm.rate_limiter import SlidingWindowRateLimiter
from topicforge.storage.memory_store import MemoryTopicStore
from topicforge.topics.detail import DetailService
from topicforge.topics.resolver import TopicResolver


# === HELPERS ===


class FakeClock:
    """Monotonic clock in seconds, advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedLLMClient(BaseLLMClient):
    """Returns queued responses in order; an Exception entry is raised.

    When the queue is empty the default response is returned.
    """

    def __init__(
        self,
        responses: list[Any] | None = None,
        default: str = "",
        model: str = "scripted-1",
    ) -> None:
        self.model = model
        self.responses: list[Any] = list(responses or [])
        self.default = default
        self.calls: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    async def _send(self, request: CompletionRequest) -> LLMResponse:
        self.calls.append({
            "prompt": request.messages[-1].content,
            "system": request.system,
            "json_mode": request.json_mode,
        })
        item = self.responses.pop(0) if self.responses else self.default
        if isinstance(item, Exception):
            raise item
        content = item if isinstance(item, str) else json.dumps(item)
        return LLMResponse(content=content, model=self.model, provider="scripted")


def topic_payload(
    summary: str = "Entanglement links quantum states across distance.",
    related: list[str] | None = None,
) -> dict[str, Any]:
    """Well-formed topic generation response."""
    return {
        "summary": summary,
        "sections": [
            {"category": "Foundations", "facts": ["Bell states", "Superposition"]},
            {"category": "Applications", "facts": ["Quantum key distribution"]},
        ],
        "relatedTopics": (
            ["Quantum Mechanics", "Bell's Theorem", "Quantum Computing"]
            if related is None else related
        ),
    }


DETAIL_PAYLOAD = {"caption": "Bell states", "points": ["Maximally entangled", "Four of them"]}


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_topic() -> Topic:
    """Minimal stored topic with a slug and related topics."""
    return Topic(
        title="Quantum Entanglement",
        slug="quantum-entanglement",
        summary="Entanglement links quantum states across distance.",
        sections=[Section(category="Foundations", facts=["Bell states"])],
        related_topics=["Quantum Mechanics", "Bell's Theorem", "Quantum Computing"],
    )


@pytest.fixture
def sample_video() -> EnrichmentItem:
    return EnrichmentItem(
        title="Entanglement explained",
        url="https://video.example/watch?v=abc",
        description="A short lecture on entangled photons.",
        channel="Physics Lab",
    )


@pytest.fixture
def sample_detail() -> DetailContent:
    return DetailContent(**DETAIL_PAYLOAD)


# === FIXTURES: Pipeline parts ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scripted_llm() -> ScriptedLLMClient:
    return ScriptedLLMClient()


@pytest.fixture
def rate_limiter(clock: FakeClock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(max_requests=60, window_ms=60_000, clock=clock)


@pytest.fixture
def generation(
    scripted_llm: ScriptedLLMClient, rate_limiter: SlidingWindowRateLimiter,
) -> GenerationClient:
    return GenerationClient(scripted_llm, rate_limiter)


@pytest.fixture
def memory_store() -> MemoryTopicStore:
    return MemoryTopicStore()


@pytest.fixture
def allocator(memory_store: MemoryTopicStore) -> SlugAllocator:
    return SlugAllocator(memory_store, max_attempts=100)


@pytest.fixture
def detail_cache(clock: FakeClock) -> ResponseCache[DetailContent]:
    return ResponseCache(max_size=1000, max_age_s=86_400, clock=clock)


@pytest.fixture
def service(
    memory_store: MemoryTopicStore,
    generation: GenerationClient,
    allocator: SlugAllocator,
    detail_cache: ResponseCache[DetailContent],
) -> TopicService:
    """Facade over the in-memory store with no search providers."""
    return TopicService(
        store=memory_store,
        resolver=TopicResolver(memory_store, generation, allocator),
        details=DetailService(generation, detail_cache),
        enrichment=EnrichmentCoordinator(memory_store, {}),
        generation=generation,
        allocator=allocator,
    )
