from __future__ import annotations

from enum import Enum
from typing import Mapping, Sequence

from pydantic import BaseModel, Field

from .config import WebsiteConfig


class ImageStatus(str, Enum):
    """Outcome of the image step for one compiled project."""

    none = "NONE"  # nothing to resolve
    pending = "PENDING"  # rendered, not resolved yet
    resolved = "RESOLVED"
    partial = "PARTIAL"
    unavailable = "UNAVAILABLE"


class ProjectFile(BaseModel):
    path: str
    content: str


class ImageReport(BaseModel):
    status: ImageStatus = ImageStatus.none
    descriptions: Mapping[str, str] = Field(default_factory=dict)
    cache: Mapping[str, str] = Field(default_factory=dict)
    unresolved: Sequence[str] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.status in (ImageStatus.partial, ImageStatus.unavailable)


class CompiledProject(BaseModel):
    files: Sequence[ProjectFile]
    dependencies: Mapping[str, str]
    dev_dependencies: Mapping[str, str] = Field(default_factory=dict)
    config: WebsiteConfig
    diagnostics: Sequence[str] = Field(default_factory=list)
    images: ImageReport = Field(default_factory=ImageReport)

    def paths(self) -> list[str]:
        return [file.path for file in self.files]

    def file(self, path: str) -> ProjectFile | None:
        for item in self.files:
            if item.path == path:
                return item
        return None

    def file_map(self) -> dict[str, str]:
        return {item.path: item.content for item in self.files}


__all__ = ["ImageStatus", "ProjectFile", "ImageReport", "CompiledProject"]
