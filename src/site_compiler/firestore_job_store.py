from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from typing import Any, Mapping

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .job_store import generate_job_id
from .models.job import JobKind, JobOutputs, JobRecord, JobStatus

logger = logging.getLogger(__name__)

# Firestore caps a batch at 500 writes.
_BATCH_SIZE = 400


def file_document_id(path: str) -> str:
    """Document IDs cannot contain ``/``, so project files are keyed by a path hash."""
    return hashlib.sha1(path.encode("utf-8")).hexdigest()


class FirestoreJobStore:
    """Firestore-backed job store for production use.

    The job document holds status, progress and the small outputs. Compiled
    project files live in a ``files`` subcollection of the job so that large
    projects stay under Firestore's document size limit.
    """

    COLLECTION_NAME = "site_jobs"
    FILES_COLLECTION = "files"

    def __init__(self, project_id: str | None = None, client: firestore.Client | None = None) -> None:
        self._db = client or firestore.Client(project=project_id)
        self._collection = self._db.collection(self.COLLECTION_NAME)

    def create_job(self, *, kind: JobKind, site_id: str | None) -> JobRecord:
        # Auto IDs keep the suffix unique across instances
        job_id = generate_job_id(site_id, self._collection.document().id[:6])
        job = JobRecord(id=job_id, kind=kind, status=JobStatus.queued, site_id=site_id)
        self._collection.document(job_id).set(_to_document(job))
        logger.info("Created job", extra={"job_id": job_id, "kind": kind.value, "site_id": site_id})
        return job

    def get_job(self, job_id: str) -> JobRecord | None:
        snapshot = self._collection.document(job_id).get()
        if not snapshot.exists:
            return None
        return self._load(snapshot.id, snapshot.to_dict())

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
        document = self._collection.document(job_id)
        changes: dict[str, Any] = {"updated_at": datetime.utcnow()}
        if status is not None:
            changes["status"] = status.value
        if progress is not None:
            changes["progress"] = progress
        if message is not None:
            changes["message"] = message
        if errors is not None:
            changes["errors"] = list(errors)
        if outputs is not None:
            files = dict(outputs.files or {})
            self._write_files(job_id, files)
            changes["outputs"] = outputs.model_dump(mode="json", exclude={"files"})
            changes["file_paths"] = list(files)

        document.update(changes)
        logger.info(
            "Updated job",
            extra={
                "job_id": job_id,
                "status": status.value if status else None,
                "progress": progress,
            },
        )

        snapshot = document.get()
        return self._load(snapshot.id, snapshot.to_dict())

    def list_jobs(
        self,
        *,
        status: JobStatus | None = None,
        site_id: str | None = None,
        limit: int = 100,
    ) -> list[JobRecord]:
        """Newest jobs first, without their files."""
        query = self._collection
        if status is not None:
            query = query.where(filter=FieldFilter("status", "==", status.value))
        if site_id is not None:
            query = query.where(filter=FieldFilter("site_id", "==", site_id))
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [_from_document(snapshot.id, snapshot.to_dict()) for snapshot in query.stream()]

    def _files(self, job_id: str):
        return self._collection.document(job_id).collection(self.FILES_COLLECTION)

    def _write_files(self, job_id: str, files: Mapping[str, str]) -> None:
        files_ref = self._files(job_id)
        items = list(files.items())
        for start in range(0, len(items), _BATCH_SIZE):
            batch = self._db.batch()
            for path, content in items[start : start + _BATCH_SIZE]:
                batch.set(files_ref.document(file_document_id(path)), {"path": path, "content": content})
            batch.commit()

    def _load(self, job_id: str, data: dict) -> JobRecord:
        record = _from_document(job_id, data)
        paths = data.get("file_paths") or []
        if not paths:
            return record
        stored = {}
        for snapshot in self._files(job_id).stream():
            item = snapshot.to_dict()
            stored[item["path"]] = item["content"]
        # Keep the order the compiler emitted
        files = {path: stored[path] for path in paths if path in stored}
        outputs = record.outputs.model_copy(update={"files": files})
        return record.model_copy(update={"outputs": outputs})


def _to_document(job: JobRecord) -> dict[str, Any]:
    document = job.model_dump(mode="python", exclude={"id", "outputs"})
    document["kind"] = job.kind.value
    document["status"] = job.status.value
    document["errors"] = list(job.errors)
    document["outputs"] = job.outputs.model_dump(mode="json", exclude={"files"})
    document["file_paths"] = []
    return document


def _from_document(job_id: str, data: Mapping[str, Any]) -> JobRecord:
    fields = {key: value for key, value in data.items() if key != "file_paths"}
    fields["outputs"] = fields.get("outputs") or {}
    return JobRecord.model_validate({**fields, "id": job_id})


__all__ = ["FirestoreJobStore", "file_document_id"]
