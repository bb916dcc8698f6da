# src/xaiprecompute/cache/json_store.py - v1
"""JSON file record store (default CACHE_BACKEND=json).

Keeps the whole record set as one JSON array in a single well-known file
under CACHE_ROOT.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from xaiprecompute.cache.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)

CACHE_FILENAME = "xai_precomputed_responses.json"


class JsonFileRecordStore(BaseRecordStore):
    """File-based record store using one JSON array."""

    def __init__(self, cache_root: Path | str, filename: str = CACHE_FILENAME) -> None:
        self._root = Path(cache_root).expanduser()
        self._path = self._root / filename

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> list[dict[str, Any]]:
        """Read the record array; a missing file is an empty store."""
        if not self._path.exists():
            return []
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"{self._path} does not hold a JSON array")
        return [r for r in data if isinstance(r, dict)]

    def save_all(self, records: list[dict[str, Any]]) -> None:
        """Write the full array, replacing the file atomically."""
        self._root.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(records, indent=2, default=str), encoding="utf-8")
        tmp.replace(self._path)
        logger.debug("Saved %d cache records to %s", len(records), self._path)

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()
