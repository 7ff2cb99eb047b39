# src/maintenance/tasks.py - v1
"""Operational tasks over the topic store.

Each task is a coroutine over a TopicService so it shares the same rate
limiter, store and generation client as interactive use:
  - populate_topics: resolve a list of titles, creating missing ones
  - backfill_missing_slugs: assign slugs to legacy records
  - backfill_related_topics: fill empty related topic lists
  - clear_enrichment: reset all enrichment categories
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from topicforge.api.facade import TopicService
from topicforge.core.errors import TopicForgeError
from topicforge.core.models import ENRICHMENT_CATEGORIES, EnrichmentResults
from topicforge.logging.context import topic_context
from topicforge.maintenance.models import BackfillResult, PopulateResult, TitleOutcome

logger = logging.getLogger(__name__)


def read_titles_file(path: Path) -> list[str]:
    """One title per line; blank lines and surrounding whitespace dropped."""
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


async def populate_topics(
    service: TopicService,
    titles: list[str],
    limit: int | None = None,
    delay_s: float = 0.0,
) -> PopulateResult:
    """Resolve each title, generating the ones not stored yet.

    Failures are recorded per title and never stop the run.

    Args:
        service: Wired topic service.
        titles: Titles to resolve, in order.
        limit: Process at most this many titles.
        delay_s: Pause after each generated topic.
    """
    start = time.monotonic()
    selected = titles[:limit] if limit is not None else list(titles)
    result = PopulateResult(total_titles=len(selected))

    for index, title in enumerate(selected, start=1):
        logger.info("[%d/%d] %s", index, len(selected), title)
        existing = await service.find_topic(title)
        if existing is not None:
            result.skipped += 1
            result.outcomes.append(
                TitleOutcome(title=title, status="skipped", slug=existing.slug)
            )
            continue

        try:
            topic = await service.resolve_topic(title)
        except (TopicForgeError, ValueError) as e:
            logger.warning("Could not create %r: %s", title, e)
            result.failed += 1
            result.outcomes.append(TitleOutcome(title=title, status="failed", error=str(e)))
            continue

        result.created += 1
        result.outcomes.append(TitleOutcome(title=title, status="created", slug=topic.slug))
        if delay_s > 0:
            await asyncio.sleep(delay_s)

    result.duration_seconds = time.monotonic() - start
    logger.info(
        "Populate complete: %d created, %d skipped, %d failed",
        result.created, result.skipped, result.failed,
    )
    return result


async def backfill_missing_slugs(service: TopicService) -> BackfillResult:
    """Assign slugs to records whose slug is missing, blank or "undefined"."""
    start = time.monotonic()
    result = BackfillResult()
    for topic in await service.store.list_topics():
        result.scanned += 1
        if topic.has_slug:
            continue
        with topic_context(topic.title, "backfill-slug"):
            try:
                await service.allocator.assign_slug(topic)
            except TopicForgeError as e:
                logger.warning("Slug backfill failed: %s", e)
                result.failed += 1
                continue
        result.updated += 1

    result.duration_seconds = time.monotonic() - start
    logger.info("Slug backfill: %d of %d topics updated", result.updated, result.scanned)
    return result


async def backfill_related_topics(
    service: TopicService, delay_s: float = 0.0,
) -> BackfillResult:
    """Generate related topics for every record that has none."""
    start = time.monotonic()
    result = BackfillResult()
    for topic in await service.store.list_topics():
        result.scanned += 1
        if topic.related_topics:
            continue
        related = await service.generation.generate_related_topics(topic.title)
        try:
            await service.store.update_one(topic.title, {"related_topics": related})
        except TopicForgeError as e:
            logger.warning("Related topics backfill for %r failed: %s", topic.title, e)
            result.failed += 1
            continue
        result.updated += 1
        logger.info("Related topics for %r: %s", topic.title, ", ".join(related))
        if delay_s > 0:
            await asyncio.sleep(delay_s)

    result.duration_seconds = time.monotonic() - start
    logger.info(
        "Related topics backfill: %d of %d topics updated", result.updated, result.scanned,
    )
    return result


async def clear_enrichment(service: TopicService) -> BackfillResult:
    """Reset every enrichment category so the next expansion refetches."""
    start = time.monotonic()
    result = BackfillResult()
    empty = {f"enrichment.{c}": EnrichmentResults() for c in ENRICHMENT_CATEGORIES}
    for topic in await service.store.list_topics():
        result.scanned += 1
        await service.store.update_one(topic.title, dict(empty))
        result.updated += 1

    result.duration_seconds = time.monotonic() - start
    logger.info("Cleared enrichment on %d topics", result.updated)
    return result
