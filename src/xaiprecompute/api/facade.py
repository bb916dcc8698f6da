# src/xaiprecompute/api/facade.py - v1
"""Public API facade: wires settings into an engine and an orchestrator.

Usage:
    from xaiprecompute.api.facade import create_orchestrator
    orchestrator = create_orchestrator()
    job = orchestrator.create_job(queries)
    await orchestrator.execute_job(job.id)

Every collaborator can be injected, so tests and embedding applications can
swap the completion client, the record store or the random source.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from xaiprecompute.cache.cache_factory import create_record_store
from xaiprecompute.cache.query_cache import QueryCache
from xaiprecompute.config.settings import Settings
from xaiprecompute.explanation.method_factory import create_explanation_method
from xaiprecompute.explanation.synthesizer import ExplanationSynthesizer
from xaiprecompute.jobs.models import BatchConfig, Job
from xaiprecompute.jobs.orchestrator import JobOrchestrator, Sleep
from xaiprecompute.llm.client_factory import create_llm_client
from xaiprecompute.precompute.engine import PrecomputeEngine

if TYPE_CHECKING:
    from xaiprecompute.cache.base_record_store import BaseRecordStore
    from xaiprecompute.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)


def create_engine(
    settings: Settings | None = None,
    client: BaseLLMClient | None = None,
    record_store: BaseRecordStore | None = None,
    rng: random.Random | None = None,
) -> PrecomputeEngine:
    """Build a PrecomputeEngine from settings.

    Args:
        settings: Global settings. Loaded from .env if None.
        client: Completion client. Built from settings if None.
        record_store: Cache backend. Built from settings if None.
        rng: Random source for the explanation method.
    """
    settings = settings or Settings()
    client = client or create_llm_client(settings)
    store = record_store or create_record_store(settings)
    cache = QueryCache(store, ttl_hours=settings.cache_ttl_hours)
    synthesizer = ExplanationSynthesizer(create_explanation_method(settings, rng=rng))

    logger.debug(
        "Engine ready: model=%s, explanations=%s, cached=%d",
        settings.precompute_model, synthesizer.method.name, len(cache),
    )
    return PrecomputeEngine.from_settings(settings, client, cache, synthesizer)


def create_orchestrator(
    settings: Settings | None = None,
    client: BaseLLMClient | None = None,
    record_store: BaseRecordStore | None = None,
    rng: random.Random | None = None,
    sleep: Sleep | None = None,
) -> JobOrchestrator:
    """Build a JobOrchestrator over a freshly wired engine.

    Construct once per process and share it; it owns the single-flight slot.
    """
    engine = create_engine(settings, client=client, record_store=record_store, rng=rng)
    if sleep is None:
        return JobOrchestrator(engine)
    return JobOrchestrator(engine, sleep=sleep)


async def run_precompute(
    queries: list[str],
    orchestrator: JobOrchestrator,
    settings: Settings | None = None,
    config: BatchConfig | None = None,
) -> Job:
    """Create and execute one job, using settings for the batch defaults."""
    if config is None:
        config = BatchConfig.from_settings(settings or Settings())
    job = orchestrator.create_job(queries)
    return await orchestrator.execute_job(job.id, config)
