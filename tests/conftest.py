# tests/conftest.py - v1
"""Shared test fixtures for all unit and integration tests.

Provides a scripted completion client, in-memory cache backends, a recording
sleep and wired engine/orchestrator instances. No network or disk I/O unless
a test asks for tmp_path.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Iterable
from datetime import datetime, timezone

import pytest

from xaiprecompute.cache.memory_store import InMemoryRecordStore
from xaiprecompute.cache.query_cache import QueryCache
from xaiprecompute.config.settings import Settings
from xaiprecompute.explanation.heuristic import HeuristicExplanationMethod
from xaiprecompute.explanation.synthesizer import ExplanationSynthesizer
from xaiprecompute.jobs.orchestrator import JobOrchestrator
from xaiprecompute.llm.base_client import BaseLLMClient
from xaiprecompute.llm.models import LLMResponse, Message
from xaiprecompute.precompute.engine import PrecomputeEngine

SAMPLE_ANSWER = (
    "The aircraft is deviating from its filed flight path near the border. "
    "This is concerning because radar shows a rapid speed increase. "
    "Analysis of the approach vector suggests a deliberate course change. "
    "Interceptors will likely need to launch within the next ten minutes."
)


# === FAKES ===


class ScriptedLLMClient(BaseLLMClient):
    """Completion client replaying scripted outcomes per query.

    ``script[query]`` is a list consumed one item per call: a string is
    returned as the answer, an exception instance is raised. Queries without
    a script (or with an exhausted one) get ``default_answer``.
    """

    def __init__(
        self,
        script: dict[str, list[object]] | None = None,
        default_answer: str = SAMPLE_ANSWER,
    ) -> None:
        self.script = {q: list(items) for q, items in (script or {}).items()}
        self.default_answer = default_answer
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        query = messages[-1].content
        self.calls.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        outcome: object = self.default_answer
        if self.script.get(query):
            outcome = self.script[query].pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return LLMResponse(content=str(outcome), model="gpt-test", provider="scripted")

    def hold(self, queries: Iterable[str]) -> asyncio.Event:
        """Block the given queries until the returned event is set."""
        event = asyncio.Event()
        for q in queries:
            self.gates[q] = event
        return event

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def model(self) -> str:
        return "gpt-test"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class FrozenClock:
    """Settable tz-aware clock for TTL tests."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


# === FIXTURES ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env, using the memory backend."""
    return Settings(_env_file=None, cache_backend="memory", explanation_seed=7)  # type: ignore[call-arg]


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def query_cache(memory_store: InMemoryRecordStore) -> QueryCache:
    return QueryCache(memory_store, ttl_hours=24)


@pytest.fixture
def llm_client() -> ScriptedLLMClient:
    return ScriptedLLMClient()


@pytest.fixture
def synthesizer(rng: random.Random) -> ExplanationSynthesizer:
    return ExplanationSynthesizer(HeuristicExplanationMethod(rng=rng))


@pytest.fixture
def engine(
    llm_client: ScriptedLLMClient,
    query_cache: QueryCache,
    synthesizer: ExplanationSynthesizer,
) -> PrecomputeEngine:
    return PrecomputeEngine(
        client=llm_client, cache=query_cache, synthesizer=synthesizer, model="gpt-test",
    )


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def orchestrator(engine: PrecomputeEngine, recording_sleep: RecordingSleep) -> JobOrchestrator:
    return JobOrchestrator(engine, sleep=recording_sleep)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def sample_answer() -> str:
    return SAMPLE_ANSWER
