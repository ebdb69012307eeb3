from __future__ import annotations

import os

from pydantic import BaseModel, Field


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime configuration shared by the services."""

    environment: str = "dev"
    project_id: str | None = None
    vertex_location: str = "us-central1"
    vertex_model: str = "gemini-1.5-pro"
    image_model: str = "imagen-3.0-generate-001"
    image_bucket: str | None = None
    image_concurrency: int = Field(default=4, ge=1)
    enforce_edit_scope: bool = False
    topic_generation_requests: str = "site-generation-requests"
    topic_generation_completed: str = "site-generation-completed"

    @property
    def is_dev(self) -> bool:
        return self.environment == "dev"

    @property
    def uses_vertex(self) -> bool:
        return bool(self.project_id)

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            environment=os.getenv("ENVIRONMENT", defaults.environment),
            project_id=os.getenv("PROJECT_ID") or None,
            vertex_location=os.getenv("VERTEX_LOCATION", defaults.vertex_location),
            vertex_model=os.getenv("VERTEX_MODEL", defaults.vertex_model),
            image_model=os.getenv("IMAGE_MODEL", defaults.image_model),
            image_bucket=os.getenv("IMAGE_BUCKET") or None,
            image_concurrency=int(os.getenv("IMAGE_CONCURRENCY", str(defaults.image_concurrency))),
            enforce_edit_scope=_env_flag("EDIT_ENFORCE_SCOPE"),
            topic_generation_requests=os.getenv(
                "PUBSUB_TOPIC_GENERATION_REQUESTS", defaults.topic_generation_requests
            ),
            topic_generation_completed=os.getenv(
                "PUBSUB_TOPIC_GENERATION_COMPLETED", defaults.topic_generation_completed
            ),
        )


__all__ = ["Settings"]
