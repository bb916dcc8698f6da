# src/xaiprecompute/cache/cache_factory.py - v2
"""Factory for cache backend and QueryCache instantiation."""

from __future__ import annotations

from xaiprecompute.cache.base_record_store import BaseRecordStore
from xaiprecompute.cache.query_cache import QueryCache
from xaiprecompute.config.settings import Settings


def create_record_store(settings: Settings | None = None) -> BaseRecordStore:
    """Instantiate the configured persistence backend.

    Args:
        settings: Application settings. Defaults to the JSON backend.

    Returns:
        Configured BaseRecordStore implementation.
    """
    backend = "json" if settings is None else settings.cache_backend

    if backend == "json":
        from xaiprecompute.cache.json_store import JsonFileRecordStore
        cache_root = "~/.xaiprecompute/cache" if settings is None else settings.cache_root
        return JsonFileRecordStore(cache_root=cache_root)

    if backend == "memory":
        from xaiprecompute.cache.memory_store import InMemoryRecordStore
        return InMemoryRecordStore()

    raise ValueError(f"Unsupported cache backend: {backend!r}")


def create_query_cache(settings: Settings | None = None) -> QueryCache:
    """Build a QueryCache over the configured backend, loading live entries."""
    ttl_hours = 24.0 if settings is None else settings.cache_ttl_hours
    return QueryCache(create_record_store(settings), ttl_hours=ttl_hours)
