from .config import (
    Business,
    Footer,
    FooterColumn,
    Hero,
    Nav,
    NavLink,
    Page,
    SecondaryCta,
    SocialLink,
    Theme,
    UploadedAsset,
    WebsiteConfig,
)
from .edit import EditClassification, EditResult
from .project import CompiledProject, ImageReport, ImageStatus, ProjectFile
from .sections import SECTION_MODELS, SECTION_TYPES, ConfigSection, CustomSection, UnsupportedSection

__all__ = [
    "Business",
    "Footer",
    "FooterColumn",
    "Hero",
    "Nav",
    "NavLink",
    "Page",
    "SecondaryCta",
    "SocialLink",
    "Theme",
    "UploadedAsset",
    "WebsiteConfig",
    "EditClassification",
    "EditResult",
    "CompiledProject",
    "ImageReport",
    "ImageStatus",
    "ProjectFile",
    "SECTION_MODELS",
    "SECTION_TYPES",
    "ConfigSection",
    "CustomSection",
    "UnsupportedSection",
]
