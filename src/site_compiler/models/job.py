from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    queued = "QUEUED"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    failed = "FAILED"


class JobKind(str, Enum):
    generate = "GENERATE"
    edit = "EDIT"


class JobOutputs(BaseModel):
    config: Mapping[str, Any] | None = None
    files: Mapping[str, str] | None = None
    dependencies: Mapping[str, str] | None = None
    dev_dependencies: Mapping[str, str] | None = None
    image_cache: Mapping[str, str] | None = None
    image_status: str | None = None
    should_regenerate: bool | None = None
    changed_paths: Sequence[str] | None = None
    diagnostics: Sequence[str] = Field(default_factory=list)


class JobRecord(BaseModel):
    id: str
    kind: JobKind
    status: JobStatus
    progress: float = 0.0
    message: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    site_id: str | None = None
    errors: Sequence[str] = Field(default_factory=list)
    outputs: JobOutputs = Field(default_factory=JobOutputs)


__all__ = ["JobRecord", "JobStatus", "JobKind", "JobOutputs"]
