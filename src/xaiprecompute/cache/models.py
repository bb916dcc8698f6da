# src/xaiprecompute/cache/models.py - v2
"""Cache domain models: CacheEntry, CacheMetadata, CacheStats."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pydantic import Field, model_validator

from xaiprecompute.cache.fingerprint import query_key
from xaiprecompute.core.models import CamelModel, Explanation


class CacheMetadata(CamelModel):
    """Provenance and timings recorded when an entry was computed."""

    model: str
    estimated_tokens: int
    answer_latency_ms: int
    synthesis_latency_ms: int


class CacheEntry(CamelModel):
    """One precomputed answer keyed by its normalised query hash.

    ``key`` is always derived from ``query``; a supplied value is replaced.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    key: str = ""
    query: str
    answer_text: str
    explanation: Explanation
    created_at: datetime
    confidence: int
    metadata: CacheMetadata

    @model_validator(mode="after")
    def _derive_key(self) -> CacheEntry:
        self.key = query_key(self.query)
        return self


class CacheStats(CamelModel):
    """Size and age summary of the live cache."""

    total_entries: int = 0
    total_size_bytes: int = 0
    oldest_entry: datetime | None = None
    newest_entry: datetime | None = None
