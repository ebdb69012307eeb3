from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel, Field

from .edit_classifier import KeywordEditClassifier
from .field_updaters import KeywordConfigMutator
from .generator import GeneratedSite, SiteGenerator
from .job_store import JobRepository
from .logging_config import set_job_id
from .models.config import UploadedAsset, WebsiteConfig
from .models.job import JobKind, JobOutputs, JobStatus
from .settings import Settings

logger = logging.getLogger(__name__)


class GenerateSiteRequest(BaseModel):
    prompt: str = Field(min_length=1)
    site_id: str | None = None
    images: list[UploadedAsset] = Field(default_factory=list)


class EditSiteRequest(BaseModel):
    edit_text: str = Field(min_length=1)
    config: WebsiteConfig
    site_id: str | None = None
    image_cache: dict[str, str] = Field(default_factory=dict)
    uploaded_assets: list[UploadedAsset] = Field(default_factory=list)


def outputs_from_site(site: GeneratedSite) -> JobOutputs:
    project = site.project
    return JobOutputs(
        config=project.config.to_ir(),
        files=project.file_map(),
        dependencies=dict(project.dependencies),
        dev_dependencies=dict(project.dev_dependencies),
        image_cache=dict(project.images.cache),
        image_status=project.images.status.value,
        should_regenerate=site.should_regenerate,
        changed_paths=list(site.changed_paths),
        diagnostics=list(project.diagnostics),
    )


async def run_site_job(
    store: JobRepository,
    generator: SiteGenerator,
    job_id: str,
    kind: JobKind,
    request: Mapping[str, Any],
) -> GeneratedSite:
    """Run one generate or edit job and record its progress and outputs.

    Args:
        store: Where the job record lives
        generator: Runs the generation or edit
        job_id: The job being run
        kind: Which request ``request`` holds
        request: The request body as JSON-compatible data

    Returns:
        The generated site

    Raises:
        Exception: Whatever the generation raised, after the job is marked failed
    """
    set_job_id(job_id)
    store.update_job(job_id, status=JobStatus.in_progress, progress=0.1)
    steps = 0

    def on_progress(message: str) -> None:
        nonlocal steps
        steps += 1
        store.update_job(job_id, progress=min(0.1 + 0.15 * steps, 0.9), message=message)

    try:
        if kind is JobKind.generate:
            generate = GenerateSiteRequest.model_validate(request)
            site = await generator.generate_project(generate.prompt, generate.images, on_progress)
        else:
            edit = EditSiteRequest.model_validate(request)
            site = await generator.edit_project(
                edit.edit_text,
                edit.config,
                image_cache=edit.image_cache,
                uploaded_assets=edit.uploaded_assets,
                on_progress=on_progress,
            )
    except Exception as exc:
        logger.error(
            "Site job failed",
            exc_info=True,
            extra={"job_id": job_id, "kind": kind.value, "error": str(exc)},
        )
        store.update_job(job_id, status=JobStatus.failed, progress=1.0, errors=[str(exc)])
        raise

    store.update_job(
        job_id,
        status=JobStatus.completed,
        progress=1.0,
        message="Done",
        outputs=outputs_from_site(site),
    )
    logger.info(
        "Site job completed",
        extra={"job_id": job_id, "kind": kind.value, "image_status": site.project.images.status.value},
    )
    return site


def build_site_generator(settings: Settings) -> SiteGenerator:
    """Wire the collaborators the settings call for.

    With a project ID, Gemini classifies, mutates and generates, and Imagen
    renders images when a bucket is configured. Without one, edits go through
    the keyword classifier and mutator and generation is unavailable.
    """
    if not settings.uses_vertex:
        logger.info("No project configured; using keyword edit routing")
        return SiteGenerator(
            config_generator=None,
            classifier=KeywordEditClassifier(),
            mutator=KeywordConfigMutator(),
            enforce_scope=settings.enforce_edit_scope,
            image_concurrency=settings.image_concurrency,
        )

    from .image_generation import ImagenImageBackend
    from .vertex_ai_adapter import VertexAIAdapter

    adapter = VertexAIAdapter(
        project_id=settings.project_id,
        location=settings.vertex_location,
        model_name=settings.vertex_model,
    )
    image_backend = None
    if settings.image_bucket:
        image_backend = ImagenImageBackend(
            project_id=settings.project_id,
            bucket_name=settings.image_bucket,
            location=settings.vertex_location,
            model_name=settings.image_model,
        )
    return SiteGenerator(
        config_generator=adapter,
        classifier=adapter,
        mutator=adapter,
        image_backend=image_backend,
        enforce_scope=settings.enforce_edit_scope,
        image_concurrency=settings.image_concurrency,
    )


__all__ = [
    "GenerateSiteRequest",
    "EditSiteRequest",
    "outputs_from_site",
    "run_site_job",
    "build_site_generator",
]
