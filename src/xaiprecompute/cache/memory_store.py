# src/xaiprecompute/cache/memory_store.py - v1
"""Process-local record store (CACHE_BACKEND=memory), used by tests and dry runs."""

from __future__ import annotations

import copy
from typing import Any

from xaiprecompute.cache.base_record_store import BaseRecordStore


class InMemoryRecordStore(BaseRecordStore):
    """Keeps a deep copy of the last saved record set."""

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self._records: list[dict[str, Any]] = copy.deepcopy(records or [])
        self.save_count = 0

    def load_all(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._records)

    def save_all(self, records: list[dict[str, Any]]) -> None:
        self._records = copy.deepcopy(records)
        self.save_count += 1

    def clear(self) -> None:
        self._records = []
