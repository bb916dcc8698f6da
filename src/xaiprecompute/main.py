# src/xaiprecompute/main.py - v1
"""CLI entry point: run, lookup, cache and queries commands.

Usage:
    xai-precompute run [--recommended | --category NAME | --domain NAME | --file PATH]
    xai-precompute lookup <query>
    xai-precompute cache stats|clear
    xai-precompute queries [--category NAME]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

from xaiprecompute.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        _setup_logging(args.verbose)
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="xai-precompute",
        description=f"xai-precompute v{__version__}: precompute cached XAI answers",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- run ---
    p_run = subparsers.add_parser("run", help="Precompute a set of queries as one job")
    source = p_run.add_mutually_exclusive_group()
    source.add_argument(
        "--recommended", action="store_true",
        help="Recommended starter set (default)",
    )
    source.add_argument("--category", default=None, help="Query category name")
    source.add_argument(
        "--domain", default=None,
        help="Domain to sample from: military, general, xai, aviation, ...",
    )
    source.add_argument(
        "--file", type=Path, default=None,
        help="Text file with one query per line",
    )
    p_run.add_argument(
        "--complexity", default="intermediate",
        choices=["basic", "intermediate", "advanced"],
        help="Complexity tier mixed into --domain (default: intermediate)",
    )
    p_run.add_argument(
        "--count", type=int, default=10,
        help="Number of queries sampled with --domain (default: 10)",
    )
    p_run.add_argument(
        "--seed", type=int, default=None,
        help="Shuffle seed for --domain",
    )
    p_run.add_argument("--batch-size", type=int, default=None, help="Queries per batch")
    p_run.add_argument(
        "--delay-ms", type=int, default=None,
        help="Pause between batches in milliseconds",
    )
    p_run.add_argument("--max-retries", type=int, default=None, help="Retry rounds")
    p_run.add_argument(
        "--no-retry", action="store_true",
        help="Do not retry failed queries",
    )
    p_run.add_argument(
        "--export", nargs="?", type=Path, const=True, default=None,
        help="Write the job export (to EXPORT_DIR unless a directory is given)",
    )
    p_run.set_defaults(func=_cmd_run)

    # --- lookup ---
    p_lookup = subparsers.add_parser("lookup", help="Show the cached answer for a query")
    p_lookup.add_argument("query", help="Query text")
    p_lookup.set_defaults(func=_cmd_lookup)

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Inspect or clear the cache")
    p_cache.add_argument("action", choices=["stats", "clear"])
    p_cache.set_defaults(func=_cmd_cache)

    # --- queries ---
    p_queries = subparsers.add_parser("queries", help="List query categories or queries")
    p_queries.add_argument(
        "--category", default=None,
        help="List the queries of one category",
    )
    p_queries.set_defaults(func=_cmd_queries)

    return parser


async def _cmd_run(args: argparse.Namespace) -> int:
    """Create and execute one precompute job."""
    from xaiprecompute.api.facade import create_orchestrator
    from xaiprecompute.config.settings import Settings
    from xaiprecompute.jobs.exporter import write_export
    from xaiprecompute.jobs.models import BatchConfig
    from xaiprecompute.tracking.statistics import format_statistics

    queries = _resolve_queries(args)
    if not queries:
        logger.error("No queries selected")
        return 1

    settings = Settings()
    config = BatchConfig.from_settings(settings)
    overrides: dict[str, object] = {}
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if args.delay_ms is not None:
        overrides["delay_between_batches_ms"] = args.delay_ms
    if args.max_retries is not None:
        overrides["max_retries"] = args.max_retries
    if args.no_retry:
        overrides["retry_failed_queries"] = False
    if overrides:
        config = BatchConfig.model_validate({**config.model_dump(), **overrides})

    orchestrator = create_orchestrator(settings)
    job = orchestrator.create_job(queries)
    logger.info("Running job %s over %d queries", job.id, len(queries))
    job = await orchestrator.execute_job(job.id, config)

    print(f"\nJob {job.id} {job.status}:")
    print(f"  Queries:   {len(job.queries)}")
    print(f"  Results:   {len(job.results)}")
    print(f"  Errors:    {len(job.errors)}")
    for error in job.errors:
        print(f"    - {error}")

    if args.export is not None:
        directory = settings.export_dir if args.export is True else args.export
        path = write_export(job, directory)
        print(f"  Export:    {path}")

    print()
    print(format_statistics(orchestrator.get_statistics()))
    return 0 if job.status == "completed" else 1


async def _cmd_lookup(args: argparse.Namespace) -> int:
    """Print the cached answer for one query."""
    from xaiprecompute.cache.cache_factory import create_query_cache
    from xaiprecompute.config.settings import Settings

    cache = create_query_cache(Settings())
    entry = cache.lookup(args.query)
    if entry is None:
        print("Not cached")
        return 1

    explanation = entry.explanation
    print(f"\nQuery:       {entry.query}")
    print(f"Cached at:   {entry.created_at.isoformat(timespec='seconds')}")
    print(f"Confidence:  {entry.confidence}%")
    print(f"Primary tab: {explanation.primary_tab}")
    print(f"\n{entry.answer_text}")
    if explanation.features:
        print("\nFeatures:")
        for feature in explanation.features:
            print(f"  {feature.name:24s} {feature.importance:+.3f}")
    return 0


async def _cmd_cache(args: argparse.Namespace) -> int:
    """Show cache statistics or clear the cache."""
    from xaiprecompute.cache.cache_factory import create_query_cache
    from xaiprecompute.config.settings import Settings

    cache = create_query_cache(Settings())
    if args.action == "clear":
        count = len(cache)
        cache.clear()
        print(f"Cleared {count} cached responses")
        return 0

    stats = cache.stats()
    print("\nCache statistics:")
    print(f"  Entries:  {stats.total_entries}")
    print(f"  Size:     {stats.total_size_bytes / 1024:.1f} KB")
    if stats.oldest_entry is not None and stats.newest_entry is not None:
        print(f"  Oldest:   {stats.oldest_entry.isoformat(timespec='seconds')}")
        print(f"  Newest:   {stats.newest_entry.isoformat(timespec='seconds')}")
    return 0


async def _cmd_queries(args: argparse.Namespace) -> int:
    """List categories, or the queries of one category."""
    from xaiprecompute.queries.catalog import CATEGORIES, queries_by_category

    if args.category is None:
        for name, queries in CATEGORIES.items():
            print(f"{name:22s} {len(queries)} queries")
        return 0

    queries = queries_by_category(args.category)
    if not queries:
        logger.error("Unknown category: %s", args.category)
        return 1
    for query in queries:
        print(query)
    return 0


def _resolve_queries(args: argparse.Namespace) -> list[str]:
    """Query list for the run command from the selected source."""
    from xaiprecompute.queries.catalog import (
        generate_query_set,
        queries_by_category,
        recommended_queries,
    )

    if args.file is not None:
        lines = args.file.read_text(encoding="utf-8").splitlines()
        return [line.strip() for line in lines if line.strip()]
    if args.category is not None:
        return queries_by_category(args.category)
    if args.domain is not None:
        return generate_query_set(
            args.domain, args.complexity, args.count, rng=random.Random(args.seed),
        )
    return recommended_queries()


def _setup_logging(verbose: bool) -> None:
    """Configure logging from settings; --verbose forces DEBUG."""
    from xaiprecompute.config.settings import Settings
    from xaiprecompute.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
