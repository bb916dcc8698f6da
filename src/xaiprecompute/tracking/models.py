# src/xaiprecompute/tracking/models.py - v1
"""Statistics models derived from the job table and the cache."""

from __future__ import annotations

from pydantic import Field

from xaiprecompute.cache.models import CacheStats
from xaiprecompute.core.models import CamelModel


class PrecomputeStatistics(CamelModel):
    """Snapshot of job outcomes plus cache size and age."""

    total_jobs: int = 0
    completed_jobs: int = 0
    failed_jobs: int = 0
    total_queries: int = 0
    successful_queries: int = 0
    average_processing_time_ms: float = 0.0
    cache: CacheStats = Field(default_factory=CacheStats)

    @property
    def success_rate(self) -> float:
        """Successful queries as a fraction of all submitted queries."""
        if self.total_queries == 0:
            return 0.0
        return self.successful_queries / self.total_queries
