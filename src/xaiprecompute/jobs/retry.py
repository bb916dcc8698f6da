# src/xaiprecompute/jobs/retry.py - v1
"""Retry policy for failed queries with exponential backoff between rounds."""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for the post-batch retry pass."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    item_delay_s: float = 0.0
    jitter: bool = False


def compute_backoff_delay(
    config: RetryConfig, attempt: int, rng: random.Random | None = None
) -> float:
    """Delay before the round following ``attempt`` (1-based).

    ``base_delay_s * backoff_factor ** attempt``, optionally scaled by a
    jitter factor in [0.5, 1.5).
    """
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + (rng or random).random()  # noqa: S311
    return delay


def format_query_error(query: str, reason: object) -> str:
    """Error line recorded on a job for a failed query."""
    return f'"{query}": {reason}'
