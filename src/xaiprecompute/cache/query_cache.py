# src/xaiprecompute/cache/query_cache.py - v2
"""Content-addressed query cache with TTL expiry and write-through persistence.

The in-memory map is the source of truth while the process runs. Every store
rewrites the full record set to the backing BaseRecordStore. Persistence is
best-effort: failures are logged and never reach the caller.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Callable, Iterator

from pydantic import ValidationError

from xaiprecompute.cache.base_record_store import BaseRecordStore
from xaiprecompute.cache.fingerprint import query_key
from xaiprecompute.cache.models import CacheEntry, CacheStats

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QueryCache:
    """Normalized query -> CacheEntry map loaded from a record store.

    Args:
        store: Durable backend (load-all / save-all).
        ttl_hours: Entries older than this are dropped on load and treated
            as absent on lookup.
        clock: Returns the current tz-aware time (injectable for tests).
    """

    def __init__(
        self,
        store: BaseRecordStore,
        ttl_hours: float = 24.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._ttl_seconds = ttl_hours * 3600.0
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._load()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def lookup(self, query: str) -> CacheEntry | None:
        """Return the live entry for this query, or None."""
        entry = self._entries.get(query_key(query))
        if entry is None or self._is_expired(entry):
            return None
        return entry

    def store(self, entry: CacheEntry) -> None:
        """Insert or replace the entry for its key, then persist everything."""
        self._entries[query_key(entry.query)] = entry
        self._persist()

    def clear(self) -> None:
        """Drop every entry from memory and from the backing store."""
        self._entries.clear()
        try:
            self._store.clear()
        except Exception as e:
            logger.warning("Failed to clear precompute cache store: %s", e)

    def entries(self) -> list[CacheEntry]:
        """Live entries; expired ones are left out until the next load."""
        return [e for e in self._entries.values() if not self._is_expired(e)]

    def stats(self) -> CacheStats:
        """Entry count, serialized size and age range of the live cache."""
        entries = self.entries()
        if not entries:
            return CacheStats()
        payload = json.dumps(
            [e.model_dump(mode="json", by_alias=True) for e in entries], default=str,
        )
        timestamps = [e.created_at for e in entries]
        return CacheStats(
            total_entries=len(entries),
            total_size_bytes=len(payload),
            oldest_entry=min(timestamps),
            newest_entry=max(timestamps),
        )

    def __len__(self) -> int:
        return len(self.entries())

    def __contains__(self, query: object) -> bool:
        return isinstance(query, str) and self.lookup(query) is not None

    def __iter__(self) -> Iterator[CacheEntry]:
        return iter(self.entries())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_expired(self, entry: CacheEntry) -> bool:
        created = entry.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        age = (self._clock() - created).total_seconds()
        return age >= self._ttl_seconds

    def _load(self) -> None:
        try:
            records = self._store.load_all()
        except Exception as e:
            logger.warning("Failed to load precompute cache: %s", e)
            return

        expired = 0
        for record in records:
            try:
                entry = CacheEntry.model_validate(record)
            except ValidationError as e:
                logger.debug("Skipping malformed cache record: %s", e)
                continue
            if self._is_expired(entry):
                expired += 1
                continue
            key = query_key(entry.query)
            current = self._entries.get(key)
            if current is None or current.created_at <= entry.created_at:
                self._entries[key] = entry

        logger.info(
            "Loaded %d cached responses (%d expired)", len(self._entries), expired,
        )

    def _records(self) -> list[dict]:
        return [e.model_dump(mode="json", by_alias=True) for e in self._entries.values()]

    def _persist(self) -> None:
        try:
            self._store.save_all(self._records())
        except Exception as e:
            logger.warning("Failed to save precompute cache: %s", e)
