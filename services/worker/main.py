from __future__ import annotations

import base64
import json
import logging
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from site_compiler.firestore_job_store import FirestoreJobStore
from site_compiler.jobs import build_site_generator, run_site_job
from site_compiler.logging_config import set_trace_id, setup_logging
from site_compiler.models.job import JobKind
from site_compiler.pubsub_client import PubSubClient
from site_compiler.settings import Settings

settings = Settings.from_env()

setup_logging(environment=settings.environment, project_id=settings.project_id)
logger = logging.getLogger(__name__)

job_store = FirestoreJobStore(project_id=settings.project_id)
pubsub_client = PubSubClient(
    project_id=settings.project_id,
    requests_topic=settings.topic_generation_requests,
    completed_topic=settings.topic_generation_completed,
)
site_generator = build_site_generator(settings)

app = FastAPI(title="Site Compiler Worker", version="0.1.0")


class PubSubMessage(BaseModel):
    """Pub/Sub push message format."""

    message: dict[str, Any]
    subscription: str


@app.post("/v1/worker/process")
async def process_site_request(request: Request) -> JSONResponse:
    """Run a generate or edit job delivered by the Pub/Sub push subscription."""
    trace_id = str(uuid.uuid4())
    set_trace_id(trace_id)

    body = await request.json()
    pubsub_message = PubSubMessage.model_validate(body)

    message_data = pubsub_message.message.get("data", "")
    if not message_data:
        raise HTTPException(status_code=400, detail="No message data")
    try:
        payload = json.loads(base64.b64decode(message_data).decode("utf-8"))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Message data is not base64-encoded JSON") from exc
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Message data must be a JSON object")

    job_id = payload.get("job_id")
    kind = payload.get("kind")
    site_request = payload.get("request")
    if not job_id or kind not in {k.value for k in JobKind} or not isinstance(site_request, dict):
        raise HTTPException(status_code=400, detail="Missing required fields: job_id, kind, request")

    logger.info(
        "Processing site request",
        extra={"job_id": job_id, "kind": kind, "trace_id": trace_id},
    )

    try:
        site = await run_site_job(job_store, site_generator, job_id, JobKind(kind), site_request)
    except Exception as exc:
        logger.error(
            "Failed to process site request",
            exc_info=True,
            extra={"job_id": job_id, "trace_id": trace_id, "error": str(exc)},
        )
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    pubsub_client.publish_generation_completed(
        job_id=job_id,
        site_id=site_request.get("site_id"),
        image_status=site.project.images.status.value,
        should_regenerate=site.should_regenerate,
        file_count=len(site.project.files),
    )

    logger.info("Site request completed", extra={"job_id": job_id, "trace_id": trace_id})
    return JSONResponse({"status": "success", "job_id": job_id})


@app.get("/health")
async def healthcheck() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok"})
