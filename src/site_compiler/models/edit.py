from __future__ import annotations

from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import WebsiteConfig

EditType = Literal[
    "logo-only",
    "styling",
    "content",
    "structure-minor",
    "structure-major",
    "images",
    "contact-info",
    "navigation",
]
EditScope = Literal["narrow", "moderate", "wide"]


class EditClassification(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: EditType
    scope: EditScope = "moderate"
    should_regenerate: bool = False
    target_fields: Sequence[str] = Field(default_factory=list)
    reasoning: str = ""

    @property
    def requires_regeneration(self) -> bool:
        return self.should_regenerate or self.type == "structure-major"

    @classmethod
    def ambiguous(cls, reasoning: str) -> "EditClassification":
        """Classification used when the request cannot be classified with confidence."""
        return cls(
            type="structure-major",
            scope="wide",
            should_regenerate=True,
            target_fields=[],
            reasoning=reasoning,
        )


class EditResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    config: WebsiteConfig
    should_regenerate: bool
    classification: EditClassification
    changed_paths: Sequence[str] = Field(default_factory=list)
    out_of_scope_paths: Sequence[str] = Field(default_factory=list)
    fast_path: bool = False


__all__ = ["EditType", "EditScope", "EditClassification", "EditResult"]
