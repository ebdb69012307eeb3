from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from typing import Any, Callable

from google.api_core import exceptions as google_exceptions

from .errors import ImageGenerationError, ImageServiceUnavailableError

logger = logging.getLogger(__name__)

# Errors that mean no request will succeed right now, as opposed to one bad prompt.
_OUTAGE_ERRORS = (
    google_exceptions.ServiceUnavailable,
    google_exceptions.PermissionDenied,
    google_exceptions.Unauthenticated,
    google_exceptions.NotFound,
)


def enhance_prompt(description: str) -> str:
    return f"A photo of {description}, high quality, detailed, vibrant, professional photography"


def blob_name_for(description: str, prefix: str = "images") -> str:
    digest = hashlib.sha256(description.encode("utf-8")).hexdigest()[:24]
    return f"{prefix}/{digest}.png"


class ImagenImageBackend:
    """Image backend that renders descriptions with Vertex AI Imagen and stores PNGs in Cloud Storage."""

    def __init__(
        self,
        *,
        project_id: str,
        bucket_name: str,
        location: str = "us-central1",
        model_name: str = "imagen-3.0-generate-001",
        aspect_ratio: str = "4:3",
        max_attempts: int = 3,
        backoff_seconds: float = 10.0,
        model: Any | None = None,
        bucket: Any | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the Imagen backend.

        Args:
            project_id: GCP project ID
            bucket_name: Cloud Storage bucket that receives the generated PNGs
            location: Vertex AI location
            model_name: Imagen model name
            aspect_ratio: Aspect ratio requested for every image
            max_attempts: Attempts per description when the quota is exhausted
            backoff_seconds: Base delay; attempt ``n`` waits ``n * backoff_seconds``
            model: Preconstructed model, mainly for tests
            bucket: Preconstructed bucket, mainly for tests
            sleep: Blocking sleep used between attempts
        """
        self.project_id = project_id
        self.bucket_name = bucket_name
        self.model_name = model_name
        self.aspect_ratio = aspect_ratio
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

        if model is None:
            import vertexai
            from vertexai.preview.vision_models import ImageGenerationModel

            vertexai.init(project=project_id, location=location)
            model = ImageGenerationModel.from_pretrained(model_name)
        self._model = model

        if bucket is None:
            from google.cloud import storage

            bucket = storage.Client(project=project_id).bucket(bucket_name)
        self._bucket = bucket

    def _render(self, description: str) -> bytes:
        prompt = enhance_prompt(description)
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self._model.generate_images(
                    prompt=prompt,
                    number_of_images=1,
                    aspect_ratio=self.aspect_ratio,
                )
            except google_exceptions.ResourceExhausted as exc:
                if attempt == self.max_attempts:
                    raise ImageGenerationError(description, f"quota exhausted after {attempt} attempts") from exc
                wait = self.backoff_seconds * attempt
                logger.info(
                    "Imagen quota exhausted; backing off",
                    extra={"attempt": attempt, "wait_seconds": wait},
                )
                self._sleep(wait)
                continue
            except _OUTAGE_ERRORS as exc:
                raise ImageServiceUnavailableError(f"Imagen unavailable: {exc}") from exc
            except google_exceptions.GoogleAPICallError as exc:
                raise ImageGenerationError(description, f"Imagen request failed: {exc}") from exc

            images = list(getattr(response, "images", None) or [])
            if not images:
                # Safety filters return an empty list instead of an error.
                raise ImageGenerationError(description, "Imagen returned no image")
            return images[0]._image_bytes

        raise ImageGenerationError(description, "no attempts made")

    def _upload(self, description: str, data: bytes) -> str:
        blob = self._bucket.blob(blob_name_for(description))
        try:
            blob.upload_from_string(data, content_type="image/png")
        except _OUTAGE_ERRORS as exc:
            raise ImageServiceUnavailableError(f"Cloud Storage unavailable: {exc}") from exc
        except google_exceptions.GoogleAPICallError as exc:
            raise ImageGenerationError(description, f"upload failed: {exc}") from exc
        return blob.public_url

    def generate_image_sync(self, description: str) -> str:
        """Render one description and return the public URL of the stored PNG.

        Raises:
            ImageServiceUnavailableError: Imagen or Cloud Storage cannot be reached
            ImageGenerationError: This description could not be rendered
        """
        started = time.monotonic()
        data = self._render(description)
        url = self._upload(description, data)
        logger.info(
            "Generated image with Imagen",
            extra={
                "model": self.model_name,
                "description_length": len(description),
                "bytes": len(data),
                "elapsed_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return url

    async def generate_image(self, description: str) -> str:
        return await asyncio.to_thread(self.generate_image_sync, description)


__all__ = ["ImagenImageBackend", "enhance_prompt", "blob_name_for"]
