# src/xaiprecompute/jobs/models.py - v1
"""Job lifecycle models: Job, BatchConfig, export payloads."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import Field, field_validator

from xaiprecompute.cache.models import CacheEntry
from xaiprecompute.config.settings import Settings
from xaiprecompute.core.models import CamelModel
from xaiprecompute.jobs.retry import RetryConfig

JobStatus = Literal["pending", "running", "completed", "failed"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_job_id() -> str:
    """job_<epoch-ms>_<9 hex chars>."""
    return f"job_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


class Job(CamelModel):
    """A batch precompute request and its accumulated outcome.

    Mutated only by the orchestrator. Once the status is terminal, results,
    errors and end_time no longer change.
    """

    id: str = Field(default_factory=new_job_id)
    queries: tuple[str, ...]
    status: JobStatus = "pending"
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: datetime | None = None
    results: list[CacheEntry] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def processing_time_ms(self) -> float | None:
        """Wall time between start and end, None while unfinished."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds() * 1000


class BatchConfig(CamelModel):
    """Execution parameters for one job run."""

    batch_size: int = 5
    delay_between_batches_ms: int = 2000
    retry_failed_queries: bool = True
    max_retries: int = 3
    retry_base_delay_ms: int = 1000
    retry_item_delay_ms: int = 500

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("batch_size must be >= 1")
        return v

    @field_validator(
        "delay_between_batches_ms",
        "max_retries",
        "retry_base_delay_ms",
        "retry_item_delay_ms",
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @classmethod
    def from_settings(cls, settings: Settings) -> BatchConfig:
        return cls(
            batch_size=settings.batch_size,
            delay_between_batches_ms=settings.delay_between_batches_ms,
            retry_failed_queries=settings.retry_failed_queries,
            max_retries=settings.max_retries,
            retry_base_delay_ms=settings.retry_base_delay_ms,
            retry_item_delay_ms=settings.retry_item_delay_ms,
        )

    @property
    def batch_delay_s(self) -> float:
        return self.delay_between_batches_ms / 1000

    def retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_retries=self.max_retries,
            base_delay_s=self.retry_base_delay_ms / 1000,
            item_delay_s=self.retry_item_delay_ms / 1000,
        )


# === EXPORT ===


class JobSummary(CamelModel):
    """Header block of an exported job."""

    id: str
    status: JobStatus
    progress: float
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: datetime | None = None
    total_queries: int
    successful_results: int
    errors_count: int


class JobExport(CamelModel):
    """Downloadable snapshot of a job and its outcome."""

    job: JobSummary
    results: list[CacheEntry]
    errors: list[str]
    export_timestamp: datetime
