# src/xaiprecompute/tracking/statistics.py - v1
"""Job and cache statistics, recomputed from live state on every call."""

from __future__ import annotations

from collections.abc import Iterable

from xaiprecompute.cache.query_cache import QueryCache
from xaiprecompute.jobs.models import Job
from xaiprecompute.tracking.models import PrecomputeStatistics


def compute_statistics(jobs: Iterable[Job], cache: QueryCache) -> PrecomputeStatistics:
    """Aggregate counts over ``jobs`` and attach the cache's own stats.

    The average processing time covers only jobs with an end time.
    """
    jobs = list(jobs)
    durations = [j.processing_time_ms for j in jobs if j.processing_time_ms is not None]
    return PrecomputeStatistics(
        total_jobs=len(jobs),
        completed_jobs=sum(1 for j in jobs if j.status == "completed"),
        failed_jobs=sum(1 for j in jobs if j.status == "failed"),
        total_queries=sum(len(j.queries) for j in jobs),
        successful_queries=sum(len(j.results) for j in jobs),
        average_processing_time_ms=sum(durations) / len(durations) if durations else 0.0,
        cache=cache.stats(),
    )


def format_statistics(stats: PrecomputeStatistics) -> str:
    """Human-readable summary of a statistics snapshot."""
    cache = stats.cache
    lines: list[str] = [
        "=== Precompute Statistics ===",
        f"Jobs       : {stats.total_jobs} "
        f"(completed: {stats.completed_jobs}, failed: {stats.failed_jobs})",
        f"Queries    : {stats.successful_queries}/{stats.total_queries} succeeded "
        f"({stats.success_rate * 100:.1f}%)",
        f"Avg. time  : {stats.average_processing_time_ms / 1000:.1f}s",
        f"Cache      : {cache.total_entries} entries, {cache.total_size_bytes / 1024:.1f} KB",
    ]
    if cache.oldest_entry is not None and cache.newest_entry is not None:
        lines.append(
            f"Cache age  : {cache.oldest_entry.isoformat(timespec='seconds')} "
            f"-> {cache.newest_entry.isoformat(timespec='seconds')}"
        )
    return "\n".join(lines)
