# src/xaiprecompute/cache/base_record_store.py - v1
"""Abstract durable record store behind the query cache.

The cache treats its backend as a single slot holding every record:
load all, mutate in memory, save all. There are no partial writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseRecordStore(ABC):
    """Unified interface for cache persistence backends."""

    @abstractmethod
    def load_all(self) -> list[dict[str, Any]]:
        """Return every persisted record (raw JSON-compatible dicts)."""

    @abstractmethod
    def save_all(self, records: list[dict[str, Any]]) -> None:
        """Replace the persisted record set."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all persisted records."""
