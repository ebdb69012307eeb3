from __future__ import annotations

import logging

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from site_compiler.compiler import render_project
from site_compiler.firestore_job_store import FirestoreJobStore
from site_compiler.job_store import JobStore
from site_compiler.jobs import EditSiteRequest, GenerateSiteRequest, build_site_generator, run_site_job
from site_compiler.logging_config import setup_logging
from site_compiler.models.config import WebsiteConfig
from site_compiler.models.job import JobKind, JobOutputs, JobRecord, JobStatus
from site_compiler.models.project import CompiledProject
from site_compiler.pubsub_client import PubSubClient
from site_compiler.settings import Settings


class CompileSiteRequest(BaseModel):
    config: WebsiteConfig
    image_cache: dict[str, str] = Field(default_factory=dict)
    resolve_images: bool = False


class SiteJobResponse(BaseModel):
    job_id: str
    status: JobStatus


class JobResponse(BaseModel):
    id: str
    kind: JobKind
    status: JobStatus
    progress: float
    message: str | None
    outputs: JobOutputs
    errors: list[str]

    @staticmethod
    def from_record(record: JobRecord) -> "JobResponse":
        return JobResponse(
            id=record.id,
            kind=record.kind,
            status=record.status,
            progress=record.progress,
            message=record.message,
            outputs=record.outputs,
            errors=list(record.errors),
        )


settings = Settings.from_env()

setup_logging(environment=settings.environment, project_id=settings.project_id)
logger = logging.getLogger(__name__)

app = FastAPI(title="Site Compiler API", version="0.1.0")

# Firestore in production, in-memory for dev
if settings.is_dev:
    job_store = JobStore()
else:
    job_store = FirestoreJobStore(project_id=settings.project_id)

pubsub_client = (
    PubSubClient(
        project_id=settings.project_id,
        requests_topic=settings.topic_generation_requests,
        completed_topic=settings.topic_generation_completed,
    )
    if settings.project_id and not settings.is_dev
    else None
)

site_generator = build_site_generator(settings)


def _enqueue(kind: JobKind, request: BaseModel, site_id: str | None, background_tasks: BackgroundTasks) -> SiteJobResponse:
    job = job_store.create_job(kind=kind, site_id=site_id)
    payload = request.model_dump(mode="json", by_alias=True)

    # Pub/Sub outside dev; background task in dev
    if pubsub_client is not None:
        pubsub_client.publish_generation_request(job_id=job.id, kind=kind.value, request=payload)
    else:
        background_tasks.add_task(_run_job, job.id, kind, payload)

    return SiteJobResponse(job_id=job.id, status=job.status)


@app.post("/v1/sites:generate", response_model=SiteJobResponse)
async def generate_site(request: GenerateSiteRequest, background_tasks: BackgroundTasks) -> SiteJobResponse:
    if pubsub_client is None and not site_generator.can_generate:
        raise HTTPException(status_code=503, detail="Site generation is not configured")
    return _enqueue(JobKind.generate, request, request.site_id, background_tasks)


@app.post("/v1/sites:edit", response_model=SiteJobResponse)
async def edit_site(request: EditSiteRequest, background_tasks: BackgroundTasks) -> SiteJobResponse:
    return _enqueue(JobKind.edit, request, request.site_id, background_tasks)


@app.post("/v1/sites:compile", response_model=CompiledProject)
async def compile_site(request: CompileSiteRequest) -> CompiledProject:
    if request.resolve_images:
        return await site_generator.compile(request.config, image_cache=request.image_cache)
    return render_project(site_generator.validate_sections(request.config))


@app.get("/v1/jobs/{job_id}", response_model=JobResponse)
async def get_job(job_id: str) -> JobResponse:
    record = job_store.get_job(job_id)
    if not record:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobResponse.from_record(record)


async def _run_job(job_id: str, kind: JobKind, payload: dict) -> None:
    try:
        await run_site_job(job_store, site_generator, job_id, kind, payload)
    except Exception:  # pragma: no cover - failure already recorded on the job
        logger.warning("Background site job failed", extra={"job_id": job_id})


@app.get("/health")
async def healthcheck() -> JSONResponse:
    return JSONResponse({"status": "ok"})
