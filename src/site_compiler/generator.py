from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Mapping, Protocol, Sequence

from .compiler import compile_template
from .custom_sections import Linter, validate_custom_sections
from .edit_classifier import ConfigMutator, EditClassifier
from .edit_router import ProgressCallback, smart_edit
from .errors import ConfigGenerationError
from .images import ImageBackend
from .models.config import UploadedAsset, WebsiteConfig
from .models.edit import EditClassification
from .models.project import CompiledProject

logger = logging.getLogger(__name__)


class ConfigGenerator(Protocol):
    def generate_config(
        self,
        prompt: str,
        images: Sequence[UploadedAsset] | None = None,
    ) -> WebsiteConfig:
        """Produce a normalized config for a free-text description."""


@dataclass
class GeneratedSite:
    project: CompiledProject
    should_regenerate: bool = False
    classification: EditClassification | None = None
    changed_paths: Sequence[str] = field(default_factory=list)

    @property
    def config(self) -> WebsiteConfig:
        return self.project.config


def _notify(on_progress: ProgressCallback | None, message: str) -> None:
    if on_progress is not None:
        on_progress(message)


class SiteGenerator:
    """Ties the config generator, the edit router and the compiler together."""

    def __init__(
        self,
        *,
        config_generator: ConfigGenerator | None,
        classifier: EditClassifier,
        mutator: ConfigMutator,
        image_backend: ImageBackend | None = None,
        linter: Linter | None = None,
        enforce_scope: bool = False,
        image_concurrency: int = 4,
    ) -> None:
        self._config_generator = config_generator
        self._classifier = classifier
        self._mutator = mutator
        self._image_backend = image_backend
        self._linter = linter
        self._enforce_scope = enforce_scope
        self._image_concurrency = image_concurrency

    @property
    def can_generate(self) -> bool:
        return self._config_generator is not None

    async def generate_project(
        self,
        prompt: str,
        images: Sequence[UploadedAsset] | None = None,
        on_progress: ProgressCallback | None = None,
        *,
        image_cache: Mapping[str, str] | None = None,
    ) -> GeneratedSite:
        if self._config_generator is None:
            raise ConfigGenerationError("no config generator is configured")
        _notify(on_progress, "Generating website configuration...")
        config = await asyncio.to_thread(self._config_generator.generate_config, prompt, images)
        project = await self.compile(config, image_cache=image_cache, on_progress=on_progress)
        return GeneratedSite(project=project)

    async def edit_project(
        self,
        edit_text: str,
        current_config: WebsiteConfig,
        image_cache: Mapping[str, str] | None = None,
        uploaded_assets: Sequence[UploadedAsset] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> GeneratedSite:
        """Apply one edit and recompile.

        Edits routed to regeneration generate a new config from the edit text.
        The image cache is carried either way, so unchanged descriptions keep
        their URLs.
        """
        result = await asyncio.to_thread(
            smart_edit,
            current_config,
            edit_text,
            on_progress,
            uploaded_assets,
            classifier=self._classifier,
            mutator=self._mutator,
            enforce_scope=self._enforce_scope,
        )

        if result.should_regenerate:
            site = await self.generate_project(
                edit_text, uploaded_assets, on_progress, image_cache=image_cache
            )
            site.should_regenerate = True
            site.classification = result.classification
            return site

        project = await self.compile(result.config, image_cache=image_cache, on_progress=on_progress)
        return GeneratedSite(
            project=project,
            should_regenerate=False,
            classification=result.classification,
            changed_paths=list(result.changed_paths),
        )

    def validate_sections(self, config: WebsiteConfig) -> WebsiteConfig:
        """Config with invalid custom sections removed from the homepage and every page."""
        pages = [
            page.model_copy(update={"sections": validate_custom_sections(page.sections, self._linter)})
            for page in config.pages
        ]
        return config.model_copy(
            update={
                "sections": validate_custom_sections(config.sections, self._linter),
                "pages": pages,
            }
        )

    async def compile(
        self,
        config: WebsiteConfig,
        *,
        image_cache: Mapping[str, str] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> CompiledProject:
        _notify(on_progress, "Building project files...")
        config = self.validate_sections(config)
        if self._image_backend is not None:
            _notify(on_progress, "Generating custom images...")
        project = await compile_template(
            config,
            image_backend=self._image_backend,
            image_cache=image_cache,
            max_concurrency=self._image_concurrency,
        )
        logger.info(
            "Compiled site",
            extra={
                "files": len(project.files),
                "image_status": project.images.status.value,
                "diagnostics": list(project.diagnostics),
            },
        )
        return project


__all__ = ["ConfigGenerator", "GeneratedSite", "SiteGenerator"]
