from __future__ import annotations

import threading
import uuid
from datetime import datetime
from typing import Dict, Protocol

from .models.job import JobKind, JobOutputs, JobRecord, JobStatus


class JobRepository(Protocol):
    def create_job(self, *, kind: JobKind, site_id: str | None) -> JobRecord: ...

    def get_job(self, job_id: str) -> JobRecord | None: ...

    def update_job(
        self,
        job_id: str,
        *,
        status: JobStatus | None = None,
        progress: float | None = None,
        message: str | None = None,
        outputs: JobOutputs | None = None,
        errors: list[str] | None = None,
    ) -> JobRecord: ...


def generate_job_id(site_id: str | None, suffix: str | None = None) -> str:
    suffix = suffix or uuid.uuid4().hex[:6]
    if site_id:
        safe = site_id.replace("/", "-")
        return f"job_{safe}_{suffix}"
    ts = datetime.utcnow().strftime("%Y%m%d%H%M%S")
    return f"job_{ts}_{suffix}"


class JobStore:
    def __init__(self) -> None:
        self._jobs: Dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def create_job(self, *, kind: JobKind, site_id: str | None) -> JobRecord:
        with self._lock:
            job_id = generate_job_id(site_id)
            job = JobRecord(
                id=job_id,
                kind=kind,
                status=JobStatus.queued,
                site_id=site_id,
            )
            self._jobs[job_id] = job
            return job

    def get_job(self, job_id: str) -> JobRecord | None:
        with self._lock:
            return self._jobs.get(job_id)

    def update_job(
        self,
        job_id: str,
        *,
        status: JobStatus | None = None,
        progress: float | None = None,
        message: str | None = None,
        outputs: JobOutputs | None = None,
        errors: list[str] | None = None,
    ) -> JobRecord:
        with self._lock:
            job = self._jobs[job_id]
            changes: dict = {"updated_at": datetime.utcnow()}
            if status is not None:
                changes["status"] = status
            if progress is not None:
                changes["progress"] = progress
            if message is not None:
                changes["message"] = message
            if outputs is not None:
                changes["outputs"] = outputs
            if errors is not None:
                changes["errors"] = list(errors)
            job = job.model_copy(update=changes)
            self._jobs[job_id] = job
            return job


__all__ = ["JobRepository", "JobStore", "generate_job_id"]
