# src/xaiprecompute/jobs/orchestrator.py - v1
"""Batch job orchestration: single-flight admission, chunked execution, retries.

Runs on one asyncio event loop. The job table and the active-job slot are the
only shared state; the slot is checked and taken with no await in between.

Execution of one job:
    1. Split queries into chunks of batch_size
    2. Run each chunk concurrently, waiting for every query to settle
    3. Record results and errors in chunk-index order, update progress
    4. Sleep between chunks
    5. Retry still-failing queries sequentially, with backoff between rounds

cancel_job() is cooperative: in-flight completion calls run to the end and
their outcomes are dropped because the job is no longer running. Cancelling
the asyncio task that awaits execute_job() aborts them instead.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime, timezone

from xaiprecompute.cache.models import CacheEntry
from xaiprecompute.core.errors import (
    ConfigurationError,
    JobConflictError,
    JobNotFoundError,
)
from xaiprecompute.jobs.models import BatchConfig, Job
from xaiprecompute.jobs.retry import compute_backoff_delay, format_query_error
from xaiprecompute.logging.context import set_batch_context, set_job_context
from xaiprecompute.precompute.engine import PrecomputeEngine
from xaiprecompute.tracking.models import PrecomputeStatistics
from xaiprecompute.tracking.statistics import compute_statistics

logger = logging.getLogger(__name__)

CANCELLED_MARKER = "Job cancelled by user"

Sleep = Callable[[float], Awaitable[object]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _chunks(queries: tuple[str, ...], size: int) -> list[list[int]]:
    """Query indices grouped into ordered chunks of ``size``."""
    return [list(range(i, min(i + size, len(queries)))) for i in range(0, len(queries), size)]


class JobOrchestrator:
    """Owns the job table and runs at most one job at a time.

    Args:
        engine: Precompute engine shared by every job.
        sleep: Awaitable delay in seconds (asyncio.sleep, or a fake in tests).
    """

    def __init__(self, engine: PrecomputeEngine, sleep: Sleep = asyncio.sleep) -> None:
        self._engine = engine
        self._sleep = sleep
        self._jobs: dict[str, Job] = {}
        self._active_job_id: str | None = None

    @property
    def engine(self) -> PrecomputeEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Job table
    # ------------------------------------------------------------------

    def create_job(self, queries: Iterable[str]) -> Job:
        """Register a pending job over a frozen copy of ``queries``."""
        job = Job(queries=tuple(queries))
        self._jobs[job.id] = job
        logger.info("Created job %s with %d queries", job.id, len(job.queries))
        return job

    def get_job(self, job_id: str) -> Job | None:
        return self._jobs.get(job_id)

    def get_all_jobs(self) -> list[Job]:
        return list(self._jobs.values())

    def delete_job(self, job_id: str) -> bool:
        """Remove the job regardless of status. A running job keeps executing."""
        return self._jobs.pop(job_id, None) is not None

    def clear_completed_jobs(self) -> int:
        """Remove every completed job; return how many were removed."""
        done = [job_id for job_id, job in self._jobs.items() if job.status == "completed"]
        for job_id in done:
            del self._jobs[job_id]
        return len(done)

    @property
    def is_processing(self) -> bool:
        return self._active_job_id is not None

    @property
    def active_job_id(self) -> str | None:
        return self._active_job_id

    def get_statistics(self) -> PrecomputeStatistics:
        return compute_statistics(self.get_all_jobs(), self._engine.cache)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute_job(self, job_id: str, config: BatchConfig | None = None) -> Job:
        """Run a pending job to a terminal state and return it.

        Raises:
            JobNotFoundError: Unknown job id.
            JobConflictError: Another job is running, or this job is not pending.
        """
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        if self._active_job_id is not None:
            raise JobConflictError(
                f"Another job is currently processing: {self._active_job_id}"
            )
        if job.status != "pending":
            raise JobConflictError(f"Job {job_id} is {job.status}, not pending")

        config = config or BatchConfig()
        self._active_job_id = job.id
        job.status = "running"
        job.start_time = _utcnow()
        set_job_context(job.id)
        logger.info(
            "Executing job %s: %d queries, batch_size=%d",
            job.id, len(job.queries), config.batch_size,
        )

        try:
            failures = await self._run_batches(job, config)
            if failures and config.retry_failed_queries and self._is_live(job):
                await self._retry_failures(job, config, failures)
            if self._is_live(job):
                if not job.queries:
                    job.progress = 100.0
                self._finish(job, "completed")
                logger.info(
                    "Job %s completed: %d results, %d errors",
                    job.id, len(job.results), len(job.errors),
                )
        except asyncio.CancelledError:
            if self._is_live(job):
                job.errors.append(CANCELLED_MARKER)
                self._finish(job, "failed")
                logger.warning("Job %s aborted by task cancellation", job.id)
            raise
        except Exception as e:
            if self._is_live(job):
                job.errors.append(f"Job execution failed: {e}")
                self._finish(job, "failed")
            logger.error("Job %s failed: %s", job.id, e)
        finally:
            if self._active_job_id == job.id:
                self._active_job_id = None
            set_job_context(None)

        return job

    def cancel_job(self, job_id: str) -> bool:
        """Fail a running job and free the slot. False if it is not running."""
        job = self._jobs.get(job_id)
        if job is None or job.status != "running":
            return False
        job.errors.append(CANCELLED_MARKER)
        self._finish(job, "failed")
        if self._active_job_id == job.id:
            self._active_job_id = None
        logger.info("Cancelled job %s", job.id)
        return True

    async def _run_batches(self, job: Job, config: BatchConfig) -> dict[int, str]:
        """Process every chunk; return failed query index -> recorded error."""
        failures: dict[int, str] = {}
        chunks = _chunks(job.queries, config.batch_size)
        total = len(job.queries)
        processed = 0

        for batch_index, indices in enumerate(chunks):
            set_batch_context(batch_index)
            outcomes = await asyncio.gather(
                *(self._engine.precompute(job.queries[i]) for i in indices),
                return_exceptions=True,
            )
            if not self._is_live(job):
                return failures

            for outcome in outcomes:
                if isinstance(outcome, ConfigurationError):
                    raise outcome
            for i, outcome in zip(indices, outcomes):
                if isinstance(outcome, CacheEntry):
                    job.results.append(outcome)
                else:
                    failures[i] = format_query_error(job.queries[i], outcome)
                    job.errors.append(failures[i])

            processed += len(indices)
            job.progress = 100.0 * processed / total
            logger.info(
                "Batch %d/%d settled: progress %.1f%%, %d failed so far",
                batch_index + 1, len(chunks), job.progress, len(failures),
            )

            if batch_index < len(chunks) - 1:
                await self._sleep(config.batch_delay_s)
                if not self._is_live(job):
                    return failures

        set_batch_context(None)
        return failures

    async def _retry_failures(
        self, job: Job, config: BatchConfig, failures: dict[int, str]
    ) -> None:
        """Retry failed queries one at a time for up to max_retries rounds.

        A success moves the query from errors to results. A repeat failure
        replaces its error line in place so each query appears at most once.
        """
        retry = config.retry_config()
        logger.info("Retrying %d failed queries", len(failures))

        for attempt in range(1, retry.max_retries + 1):
            for i in list(failures):
                query = job.queries[i]
                try:
                    entry = await self._engine.precompute(query)
                except ConfigurationError:
                    raise
                except Exception as e:
                    if not self._is_live(job):
                        return
                    updated = format_query_error(query, e)
                    job.errors[job.errors.index(failures[i])] = updated
                    failures[i] = updated
                    logger.debug("Retry %d failed for %r: %s", attempt, query, e)
                else:
                    if not self._is_live(job):
                        return
                    job.results.append(entry)
                    job.errors.remove(failures.pop(i))
                    logger.debug("Retry %d succeeded for %r", attempt, query)

                await self._sleep(retry.item_delay_s)
                if not self._is_live(job):
                    return

            if not failures:
                return
            if attempt < retry.max_retries:
                await self._sleep(compute_backoff_delay(retry, attempt))
                if not self._is_live(job):
                    return

        logger.warning("%d queries still failing after %d retries", len(failures), retry.max_retries)

    @staticmethod
    def _is_live(job: Job) -> bool:
        return job.status == "running"

    @staticmethod
    def _finish(job: Job, status: str) -> None:
        job.status = status  # type: ignore[assignment]
        job.end_time = _utcnow()
