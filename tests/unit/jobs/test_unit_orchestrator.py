# tests/unit/jobs/test_unit_orchestrator.py - v1
"""Tests for jobs/orchestrator.py - admission, batching, retries, cancellation."""

from __future__ import annotations

import asyncio

import pytest

from xaiprecompute.core.errors import (
    ConfigurationError,
    JobConflictError,
    JobNotFoundError,
    UpstreamError,
)
from xaiprecompute.jobs.models import BatchConfig
from xaiprecompute.jobs.orchestrator import CANCELLED_MARKER, JobOrchestrator

QUERIES = [f"Query number {i}" for i in range(1, 8)]

NO_RETRY = BatchConfig(batch_size=3, retry_failed_queries=False)


async def _until(predicate, limit: int = 50) -> None:
    for _ in range(limit):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


class TestJobTable:
    def test_create_job_is_pending_copy(self, orchestrator):
        queries = ["a", "b"]
        job = orchestrator.create_job(queries)
        queries.append("c")
        assert job.status == "pending"
        assert job.queries == ("a", "b")
        assert job.progress == 0
        assert orchestrator.get_job(job.id) is job

    def test_job_id_format(self, orchestrator):
        job = orchestrator.create_job(["a"])
        prefix, millis, suffix = job.id.split("_")
        assert prefix == "job"
        assert millis.isdigit()
        assert len(suffix) == 9

    def test_get_all_jobs(self, orchestrator):
        a = orchestrator.create_job(["a"])
        b = orchestrator.create_job(["b"])
        assert orchestrator.get_all_jobs() == [a, b]
        assert orchestrator.get_job("missing") is None

    def test_delete_job(self, orchestrator):
        job = orchestrator.create_job(["a"])
        assert orchestrator.delete_job(job.id) is True
        assert orchestrator.delete_job(job.id) is False
        assert orchestrator.get_job(job.id) is None

    @pytest.mark.asyncio
    async def test_clear_completed_jobs(self, orchestrator):
        done = orchestrator.create_job(["a"])
        await orchestrator.execute_job(done.id, NO_RETRY)
        pending = orchestrator.create_job(["b"])
        assert orchestrator.clear_completed_jobs() == 1
        assert orchestrator.get_all_jobs() == [pending]


class TestExecution:
    @pytest.mark.asyncio
    async def test_unknown_job(self, orchestrator):
        with pytest.raises(JobNotFoundError):
            await orchestrator.execute_job("job_0_missing")

    @pytest.mark.asyncio
    async def test_batches_and_progress(self, engine, llm_client):
        progress: list[float] = []
        job = None

        async def sleep(delay: float) -> None:
            progress.append(job.progress)

        orchestrator = JobOrchestrator(engine, sleep=sleep)
        job = orchestrator.create_job(QUERIES)
        await orchestrator.execute_job(job.id, NO_RETRY)

        assert progress == pytest.approx([300 / 7, 600 / 7])
        assert job.progress == 100
        assert job.status == "completed"
        assert [r.query for r in job.results] == QUERIES
        assert job.end_time is not None and job.end_time >= job.start_time
        assert llm_client.calls[:3] == QUERIES[:3]

    @pytest.mark.parametrize("n,size,batches", [(7, 3, 3), (6, 3, 2), (1, 5, 1), (10, 1, 10)])
    @pytest.mark.asyncio
    async def test_batch_count(self, orchestrator, recording_sleep, n, size, batches):
        job = orchestrator.create_job([f"q{i}" for i in range(n)])
        config = BatchConfig(batch_size=size, delay_between_batches_ms=1500)
        await orchestrator.execute_job(job.id, config)
        assert recording_sleep.delays == [1.5] * (batches - 1)

    @pytest.mark.asyncio
    async def test_batch_runs_concurrently(self, orchestrator, llm_client):
        gate = llm_client.hold(["a", "b", "c"])
        job = orchestrator.create_job(["a", "b", "c", "d"])
        task = asyncio.create_task(orchestrator.execute_job(job.id, NO_RETRY))
        await _until(lambda: len(llm_client.calls) == 3)
        assert llm_client.calls == ["a", "b", "c"]
        gate.set()
        await task
        assert llm_client.calls[-1] == "d"

    @pytest.mark.asyncio
    async def test_failure_isolated_within_batch(self, orchestrator, llm_client):
        llm_client.script["b"] = [UpstreamError("status 500")]
        job = orchestrator.create_job(["a", "b", "c"])
        await orchestrator.execute_job(job.id, NO_RETRY)
        assert job.status == "completed"
        assert [r.query for r in job.results] == ["a", "c"]
        assert job.errors == ['"b": status 500']

    @pytest.mark.asyncio
    async def test_empty_job_completes(self, orchestrator):
        job = orchestrator.create_job([])
        await orchestrator.execute_job(job.id)
        assert job.status == "completed"
        assert job.progress == 100

    @pytest.mark.asyncio
    async def test_configuration_error_fails_job(self, orchestrator, llm_client):
        llm_client.script["a"] = [ConfigurationError("OPENAI_API_KEY is not configured")]
        job = orchestrator.create_job(["a", "b"])
        await orchestrator.execute_job(job.id)
        assert job.status == "failed"
        assert job.errors[-1] == "Job execution failed: OPENAI_API_KEY is not configured"
        assert not orchestrator.is_processing

    @pytest.mark.asyncio
    async def test_terminal_job_not_rerun(self, orchestrator):
        job = orchestrator.create_job(["a"])
        await orchestrator.execute_job(job.id)
        with pytest.raises(JobConflictError):
            await orchestrator.execute_job(job.id)

    @pytest.mark.asyncio
    async def test_statistics(self, orchestrator, llm_client):
        llm_client.script["b"] = [UpstreamError("x")]
        job = orchestrator.create_job(["a", "b"])
        await orchestrator.execute_job(job.id, NO_RETRY)
        orchestrator.create_job(["c"])
        stats = orchestrator.get_statistics()
        assert stats.total_jobs == 2
        assert stats.completed_jobs == 1
        assert stats.total_queries == 3
        assert stats.successful_queries == 1
        assert stats.cache.total_entries == 1


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_conflict_then_admission(self, orchestrator, llm_client):
        gate = llm_client.hold(["slow"])
        first = orchestrator.create_job(["slow"])
        second = orchestrator.create_job(["fast"])

        task = asyncio.create_task(orchestrator.execute_job(first.id))
        await _until(lambda: first.status == "running")
        assert orchestrator.is_processing
        assert orchestrator.active_job_id == first.id

        with pytest.raises(JobConflictError):
            await orchestrator.execute_job(second.id)
        assert second.status == "pending"

        gate.set()
        await task
        assert first.status == "completed"
        assert not orchestrator.is_processing

        await orchestrator.execute_job(second.id)
        assert second.status == "completed"


class TestRetries:
    @pytest.mark.asyncio
    async def test_scenario_transient_failure_recovered(self, orchestrator, llm_client):
        llm_client.script[QUERIES[4]] = [UpstreamError("timeout")]
        job = orchestrator.create_job(QUERIES)
        await orchestrator.execute_job(job.id, BatchConfig(batch_size=3))
        assert job.status == "completed"
        assert len(job.results) == 7
        assert job.errors == []
        assert job.results[-1].query == QUERIES[4]

    @pytest.mark.asyncio
    async def test_success_on_last_attempt(self, orchestrator, llm_client):
        llm_client.script["q"] = [UpstreamError(f"e{i}") for i in range(2)]
        job = orchestrator.create_job(["q"])
        await orchestrator.execute_job(job.id, BatchConfig(max_retries=2))
        assert [r.query for r in job.results] == ["q"]
        assert job.errors == []

    @pytest.mark.asyncio
    async def test_persistent_failure_recorded_once(self, orchestrator, llm_client):
        llm_client.script["q"] = [UpstreamError(f"e{i}") for i in range(4)]
        llm_client.script["r"] = [UpstreamError("once")]
        job = orchestrator.create_job(["q", "r"])
        await orchestrator.execute_job(job.id, BatchConfig(max_retries=3))
        assert job.status == "completed"
        assert job.errors == ['"q": e3']
        assert [r.query for r in job.results] == ["r"]
        assert llm_client.calls.count("q") == 4

    @pytest.mark.asyncio
    async def test_backoff_schedule(self, orchestrator, llm_client, recording_sleep):
        llm_client.script["q"] = [UpstreamError("down")] * 4
        job = orchestrator.create_job(["q"])
        config = BatchConfig(max_retries=3, retry_base_delay_ms=1000, retry_item_delay_ms=500)
        await orchestrator.execute_job(job.id, config)
        assert recording_sleep.delays == [0.5, 2.0, 0.5, 4.0, 0.5]

    @pytest.mark.asyncio
    async def test_retry_disabled(self, orchestrator, llm_client):
        llm_client.script["q"] = [UpstreamError("down")]
        job = orchestrator.create_job(["q"])
        await orchestrator.execute_job(job.id, NO_RETRY)
        assert job.errors == ['"q": down']
        assert llm_client.calls == ["q"]


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancel_mid_run_releases_slot(self, orchestrator, llm_client):
        gate = llm_client.hold(["held"])
        job = orchestrator.create_job(["held", "quick"])
        task = asyncio.create_task(orchestrator.execute_job(job.id, NO_RETRY))
        await _until(lambda: job.status == "running")

        assert orchestrator.cancel_job(job.id) is True
        assert job.status == "failed"
        assert CANCELLED_MARKER in job.errors
        assert not orchestrator.is_processing

        other = orchestrator.create_job(["other"])
        await orchestrator.execute_job(other.id, NO_RETRY)
        assert other.status == "completed"

        gate.set()
        await task
        assert job.results == []
        assert job.errors == [CANCELLED_MARKER]
        assert job.status == "failed"

    @pytest.mark.asyncio
    async def test_cancel_not_running(self, orchestrator):
        job = orchestrator.create_job(["a"])
        assert orchestrator.cancel_job(job.id) is False
        assert orchestrator.cancel_job("missing") is False

    @pytest.mark.asyncio
    async def test_task_cancellation_aborts(self, orchestrator, llm_client):
        llm_client.hold(["held"])
        job = orchestrator.create_job(["held"])
        task = asyncio.create_task(orchestrator.execute_job(job.id))
        await _until(lambda: len(llm_client.calls) == 1)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert job.status == "failed"
        assert job.errors == [CANCELLED_MARKER]
        assert not orchestrator.is_processing

    @pytest.mark.asyncio
    async def test_cancel_during_retry_discards_outcome(self, engine, llm_client):
        llm_client.script["q"] = [UpstreamError("down")]
        gates: list[asyncio.Event] = []

        async def sleep(delay: float) -> None:
            if not gates:
                gates.append(llm_client.hold(["q"]))
            await asyncio.sleep(0)

        orchestrator = JobOrchestrator(engine, sleep=sleep)
        job = orchestrator.create_job(["q", "r"])
        task = asyncio.create_task(orchestrator.execute_job(job.id, BatchConfig(batch_size=1)))
        await _until(lambda: llm_client.calls.count("q") == 2)

        assert orchestrator.cancel_job(job.id) is True
        frozen_results = list(job.results)
        frozen_errors = list(job.errors)
        assert frozen_errors == ['"q": down', CANCELLED_MARKER]

        gates[0].set()
        await task
        assert job.results == frozen_results
        assert [r.query for r in job.results] == ["r"]
        assert job.errors == frozen_errors
        assert job.status == "failed"
