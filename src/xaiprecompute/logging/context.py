# src/xaiprecompute/logging/context.py - v1
"""Contextual logging support: attach job_id, batch_index, query_key to records.

The values live in contextvars, so concurrent queries inside one batch each
see their own query_key.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_batch_index: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "batch_index", default=None
)
_query_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "query_key", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    job_id: str | None = None
    batch_index: int | None = None
    query_key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        job_id=_job_id.get(),
        batch_index=_batch_index.get(),
        query_key=_query_key.get(),
    )


def set_job_context(job_id: str | None) -> None:
    """Set job-level context (called once per job execution)."""
    _job_id.set(job_id)
    _batch_index.set(None)


def set_batch_context(batch_index: int | None) -> None:
    _batch_index.set(batch_index)


@contextmanager
def query_context(key: str) -> Iterator[None]:
    """Scope query_key to the enclosed block."""
    token = _query_key.set(key)
    try:
        yield
    finally:
        _query_key.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _job_id.set(None)
    _batch_index.set(None)
    _query_key.set(None)
