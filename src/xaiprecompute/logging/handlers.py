# src/xaiprecompute/logging/handlers.py - v2
"""Log file handler rotated by size (LOG_ROTATION / LOG_RETENTION)."""

from __future__ import annotations

import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

_UNITS = {"KB": 1 << 10, "MB": 1 << 20, "GB": 1 << 30}
_SIZE_PATTERN = re.compile(r"(\d+)\s*([KMG]B)", re.IGNORECASE)


def parse_size(value: str) -> int:
    """Byte count for a size like "10MB", "512kb" or "1 GB"."""
    match = _SIZE_PATTERN.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"Invalid size {value!r}, expected e.g. '10MB'")
    amount, unit = match.groups()
    return int(amount) * _UNITS[unit.upper()]


def create_rotating_handler(
    log_file: str | Path, rotation: str = "10MB", retention: int = 30
) -> RotatingFileHandler:
    """UTF-8 RotatingFileHandler for ``log_file``; missing directories are created."""
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        path, maxBytes=parse_size(rotation), backupCount=retention, encoding="utf-8",
    )
