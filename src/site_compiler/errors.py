from __future__ import annotations


class SiteCompilerError(Exception):
    """Base class for errors raised by site_compiler."""


class ImageServiceUnavailableError(SiteCompilerError):
    """The image generation service cannot serve any request right now."""


class ImageGenerationError(SiteCompilerError):
    """A single image description could not be turned into an asset."""

    def __init__(self, description: str, message: str) -> None:
        super().__init__(message)
        self.description = description


class ConfigGenerationError(SiteCompilerError):
    """The IR generator returned something that is not a usable WebsiteConfig."""


class EditMutationError(SiteCompilerError):
    """The config mutator returned an invalid WebsiteConfig."""


__all__ = [
    "SiteCompilerError",
    "ImageServiceUnavailableError",
    "ImageGenerationError",
    "ConfigGenerationError",
    "EditMutationError",
]
