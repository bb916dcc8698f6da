# src/xaiprecompute/jobs/exporter.py - v1
"""Job export to a downloadable JSON document."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from xaiprecompute.jobs.models import Job, JobExport, JobSummary

logger = logging.getLogger(__name__)


def build_export(job: Job, now: datetime | None = None) -> JobExport:
    """Snapshot the job header, results and errors.

    Args:
        job: Job to export (any status).
        now: Export timestamp. Defaults to the current UTC time.
    """
    return JobExport(
        job=JobSummary(
            id=job.id,
            status=job.status,
            progress=job.progress,
            start_time=job.start_time,
            end_time=job.end_time,
            total_queries=len(job.queries),
            successful_results=len(job.results),
            errors_count=len(job.errors),
        ),
        results=list(job.results),
        errors=list(job.errors),
        export_timestamp=now or datetime.now(timezone.utc),
    )


def export_filename(job: Job, now: datetime | None = None) -> str:
    """precompute_job_<id>_<YYYY-MM-DD>.json"""
    day = (now or datetime.now(timezone.utc)).date().isoformat()
    return f"precompute_job_{job.id}_{day}.json"


def export_json(job: Job, now: datetime | None = None) -> str:
    """Formatted camelCase JSON of the export document."""
    return build_export(job, now).model_dump_json(by_alias=True, indent=2)


def write_export(job: Job, directory: Path, now: datetime | None = None) -> Path:
    """Write the export document under ``directory`` and return its path."""
    now = now or datetime.now(timezone.utc)
    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(job, now)
    path.write_text(export_json(job, now), encoding="utf-8")
    logger.info("Exported job %s to %s", job.id, path)
    return path
