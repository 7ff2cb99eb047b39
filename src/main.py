# src/main.py - v2
"""CLI entry point: topic lookups, enrichment and maintenance commands.

Usage:
    topicforge resolve <identifier>
    topicforge find <identifier>
    topicforge detail <identifier> <fact>
    topicforge expand <identifier> {books,videos,wiki}
    topicforge suggest <query> [--limit N]
    topicforge populate <titles_file> [--limit N] [--delay S]
    topicforge backfill-slugs
    topicforge backfill-related [--delay S]
    topicforge clear-enrichment
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from topicforge.config.settings import ConfigurationError, Settings, load_settings
from topicforge.core.errors import (
    GenerationError,
    RateLimited,
    SlugCollisionExhausted,
    TopicNotFound,
)
from topicforge.core.models import ENRICHMENT_CATEGORIES, Topic
from topicforge.version import __version__

if TYPE_CHECKING:
    from topicforge.api.facade import TopicService

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = load_settings()
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(_run(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="topicforge",
        description=f"topicforge v{__version__}: generated learning content per topic",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    p_resolve = subparsers.add_parser(
        "resolve", help="Show a topic, generating it on first use",
    )
    p_resolve.add_argument("identifier", help="Slug or title")
    p_resolve.add_argument("--json", action="store_true", help="Print the stored record")
    p_resolve.set_defaults(func=_cmd_resolve)

    p_find = subparsers.add_parser("find", help="Show a stored topic without generating")
    p_find.add_argument("identifier", help="Slug or title")
    p_find.add_argument("--json", action="store_true", help="Print the stored record")
    p_find.set_defaults(func=_cmd_find)

    p_detail = subparsers.add_parser("detail", help="Deep dive into one fact of a topic")
    p_detail.add_argument("identifier", help="Slug or title")
    p_detail.add_argument("fact", help="Fact text as shown in the topic")
    p_detail.set_defaults(func=_cmd_detail)

    p_expand = subparsers.add_parser("expand", help="Expand an enrichment section")
    p_expand.add_argument("identifier", help="Slug or title")
    p_expand.add_argument("category", choices=ENRICHMENT_CATEGORIES)
    p_expand.set_defaults(func=_cmd_expand)

    p_suggest = subparsers.add_parser("suggest", help="Suggest stored titles")
    p_suggest.add_argument("query", help="Substring to match")
    p_suggest.add_argument(
        "--limit", type=int, default=10, help="Maximum suggestions (default: 10)",
    )
    p_suggest.set_defaults(func=_cmd_suggest)

    p_populate = subparsers.add_parser(
        "populate", help="Create topics from a file with one title per line",
    )
    p_populate.add_argument("titles_file", type=Path, help="Path to titles file")
    p_populate.add_argument("--limit", type=int, default=None, help="Process at most N titles")
    p_populate.add_argument(
        "--delay", type=float, default=None,
        help="Seconds to wait after each generated topic (default: MAINTENANCE_DELAY_S)",
    )
    p_populate.set_defaults(func=_cmd_populate)

    p_slugs = subparsers.add_parser("backfill-slugs", help="Assign missing slugs")
    p_slugs.set_defaults(func=_cmd_backfill_slugs)

    p_related = subparsers.add_parser(
        "backfill-related", help="Generate missing related topics",
    )
    p_related.add_argument(
        "--delay", type=float, default=None,
        help="Seconds to wait between topics (default: MAINTENANCE_DELAY_S)",
    )
    p_related.set_defaults(func=_cmd_backfill_related)

    p_clear = subparsers.add_parser(
        "clear-enrichment", help="Reset stored enrichment on every topic",
    )
    p_clear.set_defaults(func=_cmd_clear_enrichment)

    return parser


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    """Build the service, run one command, always release resources."""
    service = _open_service(settings)
    try:
        return await args.func(args, service, settings)
    finally:
        await service.aclose()


def _open_service(settings: Settings) -> TopicService:
    from topicforge.api.facade import build_service

    return build_service(settings)


async def _cmd_resolve(args: argparse.Namespace, service: TopicService, settings: Settings) -> int:
    topic = await _resolve_or_report(service, args.identifier)
    if topic is None:
        return 1
    _print_topic(topic, as_json=args.json)
    return 0


async def _cmd_find(args: argparse.Namespace, service: TopicService, settings: Settings) -> int:
    try:
        topic = await service.get_topic(args.identifier)
    except TopicNotFound as e:
        print(e, file=sys.stderr)
        return 1
    _print_topic(topic, as_json=args.json)
    return 0


async def _cmd_detail(args: argparse.Namespace, service: TopicService, settings: Settings) -> int:
    topic = await _resolve_or_report(service, args.identifier)
    if topic is None:
        return 1
    try:
        detail = await service.lookup_detail(topic, args.fact)
    except RateLimited as exc:
        print(f"Too many requests, try again in {exc.retry_after_s:.0f}s", file=sys.stderr)
        return 1
    except GenerationError as exc:
        logger.debug("Detail generation failed: %s", exc)
        print("Content unavailable, try again", file=sys.stderr)
        return 1

    print(detail.caption)
    for point in detail.points:
        print(f"  - {point}")
    return 0


async def _cmd_expand(args: argparse.Namespace, service: TopicService, settings: Settings) -> int:
    topic = await _resolve_or_report(service, args.identifier)
    if topic is None:
        return 1
    items = await service.expand_section(topic, args.category)
    if not items:
        print(f"No {args.category} found for {topic.title}")
        return 0
    for item in items:
        print(f"{item.title}\n  {item.url}")
        if item.description:
            print(f"  {item.description[:200]}")
    return 0


async def _cmd_suggest(args: argparse.Namespace, service: TopicService, settings: Settings) -> int:
    for suggestion in await service.search_suggestions(args.query, limit=args.limit):
        print(f"{suggestion.title}\t{suggestion.slug or ''}")
    return 0


async def _cmd_populate(args: argparse.Namespace, service: TopicService, settings: Settings) -> int:
    from topicforge.maintenance.tasks import populate_topics, read_titles_file

    titles_file: Path = args.titles_file
    if not titles_file.is_file():
        logger.error("File not found: %s", titles_file)
        return 1

    delay = settings.maintenance_delay_s if args.delay is None else args.delay
    result = await populate_topics(
        service, read_titles_file(titles_file), limit=args.limit, delay_s=delay,
    )

    print("\nPopulate complete:")
    print(f"  Titles:    {result.total_titles}")
    print(f"  Created:   {result.created}")
    print(f"  Skipped:   {result.skipped}")
    print(f"  Failed:    {result.failed}")
    print(f"  Duration:  {result.duration_seconds:.1f}s")
    return 0 if result.failed == 0 else 1


async def _cmd_backfill_slugs(
    args: argparse.Namespace, service: TopicService, settings: Settings,
) -> int:
    from topicforge.maintenance.tasks import backfill_missing_slugs

    result = await backfill_missing_slugs(service)
    print(f"Slugs assigned: {result.updated} of {result.scanned} topics")
    return 0 if result.failed == 0 else 1


async def _cmd_backfill_related(
    args: argparse.Namespace, service: TopicService, settings: Settings,
) -> int:
    from topicforge.maintenance.tasks import backfill_related_topics

    delay = settings.maintenance_delay_s if args.delay is None else args.delay
    result = await backfill_related_topics(service, delay_s=delay)
    print(f"Related topics filled: {result.updated} of {result.scanned} topics")
    return 0 if result.failed == 0 else 1


async def _cmd_clear_enrichment(
    args: argparse.Namespace, service: TopicService, settings: Settings,
) -> int:
    from topicforge.maintenance.tasks import clear_enrichment

    result = await clear_enrichment(service)
    print(f"Enrichment cleared on {result.updated} topics")
    return 0


async def _resolve_or_report(service: TopicService, identifier: str) -> Topic | None:
    """Resolve, printing a user-facing message instead of raising."""
    try:
        return await service.resolve_topic(identifier)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
    except RateLimited as exc:
        print(f"Too many requests, try again in {exc.retry_after_s:.0f}s", file=sys.stderr)
    except (GenerationError, SlugCollisionExhausted) as exc:
        logger.debug("Topic creation failed: %s", exc)
        print(f"Topic '{identifier}' could not be generated", file=sys.stderr)
    return None


def _print_topic(topic: Topic, as_json: bool = False) -> None:
    """Print a human-readable view of a topic."""
    if as_json:
        print(topic.model_dump_json(indent=2))
        return

    print(f"\n{topic.title}  ({topic.slug})")
    print(f"\n{topic.summary}")
    for section in topic.sections:
        print(f"\n{section.category}")
        for fact in section.facts:
            print(f"  - {fact}")
    if topic.related_topics:
        print(f"\nRelated: {', '.join(topic.related_topics)}")


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from topicforge.logging.logger import configure_from_settings

    configure_from_settings(settings, verbose=verbose)


if __name__ == "__main__":
    sys.exit(main())
