# src/xaiprecompute/precompute/engine.py - v1
"""Single-query precompute: cache lookup, completion call, explanation, store.

Nothing is cached unless both the completion call and the synthesis succeed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from xaiprecompute.cache.fingerprint import query_key
from xaiprecompute.cache.models import CacheEntry, CacheMetadata
from xaiprecompute.cache.query_cache import QueryCache
from xaiprecompute.config.settings import Settings
from xaiprecompute.core.errors import (
    ConfigurationError,
    SchemaError,
    UpstreamError,
)
from xaiprecompute.explanation.synthesizer import ExplanationSynthesizer
from xaiprecompute.llm.base_client import BaseLLMClient
from xaiprecompute.llm.models import Message
from xaiprecompute.llm.token_budget import estimate_tokens
from xaiprecompute.logging.context import query_context

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert military analyst providing detailed explanations for "
    "XAI systems. Provide comprehensive, technical responses suitable for "
    "decision-making contexts."
)

DEFAULT_CONFIDENCE = 75

# Raised by the client as-is; anything else is wrapped in UpstreamError.
_CLIENT_ERRORS = (ConfigurationError, UpstreamError, SchemaError)


class PrecomputeEngine:
    """Computes and caches the answer plus explanation for one query.

    Args:
        client: Completion API client.
        cache: Query cache owned by this engine.
        synthesizer: Explanation synthesizer run on every fresh answer.
        model: Model name recorded in entry metadata (defaults to the client's).
        temperature: Sampling temperature for the completion call.
        max_tokens: Completion token limit.
    """

    def __init__(
        self,
        client: BaseLLMClient,
        cache: QueryCache,
        synthesizer: ExplanationSynthesizer,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> None:
        self._client = client
        self._cache = cache
        self._synthesizer = synthesizer
        self._model = model or client.model
        self._temperature = temperature
        self._max_tokens = max_tokens

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: BaseLLMClient,
        cache: QueryCache,
        synthesizer: ExplanationSynthesizer,
    ) -> PrecomputeEngine:
        return cls(
            client=client,
            cache=cache,
            synthesizer=synthesizer,
            model=settings.precompute_model,
            temperature=settings.precompute_temperature,
            max_tokens=settings.precompute_max_tokens,
        )

    @property
    def cache(self) -> QueryCache:
        return self._cache

    def get_cached(self, query: str) -> CacheEntry | None:
        """Cached entry for this query without triggering a computation."""
        return self._cache.lookup(query)

    async def precompute(self, query: str) -> CacheEntry:
        """Return the cached entry, computing and storing it on a miss.

        Raises:
            ConfigurationError: Credential missing.
            UpstreamError: Completion call failed.
            SchemaError: Completion response malformed.
            SynthesisError: Explanation derivation failed.
        """
        key = query_key(query)
        with query_context(key[:12]):
            cached = self._cache.lookup(query)
            if cached is not None:
                logger.debug("Cache hit for query: %.60s", query)
                return cached

            t0 = time.monotonic()
            answer = await self._complete(query)
            answer_ms = int((time.monotonic() - t0) * 1000)

            t1 = time.monotonic()
            explanation = self._synthesizer.synthesize(query, answer)
            synthesis_ms = int((time.monotonic() - t1) * 1000)

            entry = CacheEntry(
                key=key,
                query=query,
                answer_text=answer,
                explanation=explanation,
                created_at=datetime.now(timezone.utc),
                confidence=explanation.confidence or DEFAULT_CONFIDENCE,
                metadata=CacheMetadata(
                    model=self._model,
                    estimated_tokens=estimate_tokens(query + answer),
                    answer_latency_ms=answer_ms,
                    synthesis_latency_ms=synthesis_ms,
                ),
            )
            self._cache.store(entry)
            logger.info(
                "Precomputed query (%d ms answer, %d ms explanation): %.60s",
                answer_ms, synthesis_ms, query,
            )
            return entry

    async def batch_precompute(
        self, queries: list[str], delay_s: float = 1.0
    ) -> list[CacheEntry]:
        """Precompute queries one at a time, skipping failures.

        Pauses ``delay_s`` between consecutive queries. Failed queries are
        logged and left out of the result.
        """
        results: list[CacheEntry] = []
        for i, query in enumerate(queries):
            try:
                results.append(await self.precompute(query))
            except ConfigurationError:
                raise
            except Exception as e:
                logger.warning("Failed to precompute %r: %s", query, e)
            if delay_s > 0 and i < len(queries) - 1:
                await asyncio.sleep(delay_s)
        logger.info("Batch precompute finished: %d/%d succeeded", len(results), len(queries))
        return results

    async def _complete(self, query: str) -> str:
        try:
            response = await self._client.complete(
                messages=[Message(role="user", content=query)],
                system=SYSTEM_PROMPT,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except _CLIENT_ERRORS:
            raise
        except Exception as e:
            raise UpstreamError(f"Completion call failed: {e}") from e
        return response.content
