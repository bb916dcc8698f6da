# src/xaiprecompute/core/errors.py - v1
"""Exception taxonomy shared by the cache, engine and job orchestrator.

Per-query failures (UpstreamError, SchemaError, SynthesisError) are captured
into ``Job.errors`` by the orchestrator. JobConflictError and JobNotFoundError
are contract violations and always reach the caller.
"""

from __future__ import annotations


class PrecomputeError(Exception):
    """Base class for every error raised by xaiprecompute."""


class ConfigurationError(PrecomputeError):
    """Missing credential or internally inconsistent configuration."""


class UpstreamError(PrecomputeError):
    """The external completion call failed or returned a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class SchemaError(PrecomputeError):
    """The upstream response did not have the expected shape."""


class SynthesisError(PrecomputeError):
    """Explanation derivation raised."""


class JobNotFoundError(PrecomputeError, KeyError):
    """Operation on an unknown job id."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class JobConflictError(PrecomputeError):
    """A job was submitted for execution while it may not run."""
