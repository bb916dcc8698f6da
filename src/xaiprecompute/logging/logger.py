# src/xaiprecompute/logging/logger.py - v2
"""Root logger configuration for the xaiprecompute package.

Two output formats share the same context fields (job id, batch index,
query key) taken from logging/context.py at format time:

    text: 2026-03-01 12:00:00 [INFO    ] xaiprecompute.jobs [job_...] (batch 0) - msg
    json: {"timestamp": ..., "level": ..., "logger": ..., "message": ..., "context": {...}}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from xaiprecompute.logging.context import get_context

ROOT_LOGGER = "xaiprecompute"

# Transport loggers of the OpenAI SDK, capped at WARNING.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra={"data": ...}`` is carried through."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            payload["context"] = context
        data = getattr(record, "data", None)
        if data:
            payload["data"] = data
        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        line = (
            f"{_record_time(record):%Y-%m-%d %H:%M:%S} "
            f"[{record.levelname:8s}] {record.name}"
        )
        if ctx.job_id:
            line += f" [{ctx.job_id}]"
        if ctx.batch_index is not None:
            line += f" (batch {ctx.batch_index})"
        if ctx.query_key:
            line += f" <{ctx.query_key}>"
        line += f" - {record.getMessage()}"
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def get_logger(name: str) -> logging.Logger:
    """Child of the package root logger, e.g. get_logger("jobs")."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """Install handlers on the package root logger, replacing earlier ones.

    Args:
        level: DEBUG, INFO, WARNING or ERROR.
        log_format: "json" or "text".
        log_file: Optional log file, rotated by size; stderr is always used.
        rotation: Size limit per file, e.g. "10MB".
        retention: Rotated files kept.
    """
    package_logger = logging.getLogger(ROOT_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.handlers.clear()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from xaiprecompute.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation=rotation, retention=retention))

    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
