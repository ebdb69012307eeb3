from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Mapping, get_args

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigGenerationError
from .models.config import FooterVariant, FontStyle, HeroVariant, TailwindColor, WebsiteConfig
from .models.sections import ConfigSection

logger = logging.getLogger(__name__)

TEMPLATE_ALIASES: Mapping[str, str] = {
    "restaurant": "restaurant",
    "restaurants": "restaurant",
    "food": "restaurant",
    "cafe": "restaurant",
    "ecommerce": "ecommerce",
    "e-commerce": "ecommerce",
    "shop": "ecommerce",
    "store": "ecommerce",
    "saas": "saas",
    "software": "saas",
    "app": "saas",
    "portfolio": "portfolio",
    "personal": "portfolio",
    "blog": "blog",
    "fitness": "fitness",
    "gym": "fitness",
}

_COLORS = frozenset(get_args(TailwindColor))
_FONTS = frozenset(get_args(FontStyle))
_HERO_VARIANTS = frozenset(get_args(HeroVariant))
_FOOTER_VARIANTS = frozenset(get_args(FooterVariant))
_COMPONENT_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9]+$")

DEFAULT_NAV_ITEMS = ({"label": "Home", "href": "/"}, {"label": "About", "href": "/about"})
DEFAULT_HERO_IMAGE = "A professional modern business photograph, high quality, clean composition"

_section_adapter: TypeAdapter[Any] = TypeAdapter(ConfigSection)


def normalize_path(path: str) -> str:
    """Leading slash, no trailing slash, no empty or ``.`` segments."""
    segments = [segment for segment in path.strip().split("/") if segment not in ("", ".")]
    return "/" + "/".join(segments)


def is_safe_page_path(path: str) -> bool:
    """False when a ``..`` segment would put the page outside ``app/``."""
    return ".." not in path.split("/")


def _mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _pick(value: Any, allowed: frozenset[str], default: str) -> str:
    return value if value in allowed else default


def _section_shape_ok(raw: Any) -> bool:
    if not isinstance(raw, Mapping) or not raw.get("type") or not raw.get("variant"):
        return False
    if raw["type"] == "custom":
        name = raw.get("componentName")
        code = raw.get("code")
        if not isinstance(name, str) or not _COMPONENT_NAME_RE.match(name):
            return False
        if not isinstance(code, str) or not code.strip():
            return False
    return True


def normalize_sections(raw_sections: Any, where: str = "homepage") -> list[Any]:
    """Parse the sections that survive basic shape checks; drop the rest with a log line."""
    if not isinstance(raw_sections, list):
        return []
    sections: list[Any] = []
    for index, raw in enumerate(raw_sections):
        if not _section_shape_ok(raw):
            logger.warning(
                "Dropping malformed section",
                extra={"where": where, "index": index, "section_type": _mapping(raw).get("type")},
            )
            continue
        try:
            sections.append(_section_adapter.validate_python(raw))
        except ValidationError as exc:
            logger.warning(
                "Dropping section that failed validation",
                extra={"where": where, "index": index, "section_type": raw.get("type"), "errors": exc.error_count()},
            )
    return sections


def normalize_config(raw: Any) -> WebsiteConfig:
    """Repair generator output into a valid WebsiteConfig.

    Args:
        raw: Parsed JSON from the IR generator

    Returns:
        A config with every field defaulted or coerced into range

    Raises:
        ConfigGenerationError: ``raw`` is not an object or still fails validation
    """
    if not isinstance(raw, Mapping):
        raise ConfigGenerationError("config is not an object")

    template_id = TEMPLATE_ALIASES.get(str(raw.get("templateId") or "").strip().lower(), "saas")

    theme = _mapping(raw.get("theme"))
    business = _mapping(raw.get("business"))
    nav = _mapping(raw.get("nav"))
    hero = _mapping(raw.get("hero"))
    footer = _mapping(raw.get("footer"))

    if isinstance(nav.get("items"), list):
        nav_items = [
            item for item in nav["items"] if isinstance(item, Mapping) and item.get("label") and item.get("href")
        ]
    else:
        nav_items = [dict(item) for item in DEFAULT_NAV_ITEMS]
    cta_button = nav.get("ctaButton")
    if not (isinstance(cta_button, Mapping) and cta_button.get("label") and cta_button.get("href")):
        cta_button = None

    secondary_cta = hero.get("secondaryCta")
    if not (isinstance(secondary_cta, Mapping) and secondary_cta.get("text") and secondary_cta.get("href")):
        secondary_cta = None

    pages = []
    for page in raw.get("pages") or []:
        if not (isinstance(page, Mapping) and page.get("path") and page.get("title")):
            continue
        if not isinstance(page.get("sections"), list):
            continue
        path = normalize_path(str(page["path"]))
        if not is_safe_page_path(path):
            logger.warning("Dropping page with an unsafe path", extra={"path": path})
            continue
        pages.append(
            {
                "path": path,
                "title": page["title"],
                "sections": normalize_sections(page["sections"], f"page {path}"),
            }
        )

    candidate = {
        "version": 1,
        "templateId": template_id,
        "business": {
            "name": business.get("name") or "My Business",
            "tagline": business.get("tagline") or "Welcome to our website",
            "description": business.get("description") or "We provide great products and services.",
            "phone": business.get("phone"),
            "email": business.get("email"),
            "address": business.get("address"),
            "hours": business.get("hours"),
            "logoUrl": business.get("logoUrl"),
        },
        "theme": {
            "primary": _pick(theme.get("primary"), _COLORS, "blue"),
            "secondary": _pick(theme.get("secondary"), _COLORS, "indigo"),
            "accent": _pick(theme.get("accent"), _COLORS, "amber"),
            "background": "dark" if theme.get("background") == "dark" else "light",
            "fontStyle": _pick(theme.get("fontStyle"), _FONTS, "modern"),
        },
        "nav": {"items": nav_items, "ctaButton": cta_button},
        "hero": {
            "variant": _pick(hero.get("variant"), _HERO_VARIANTS, "centered"),
            "headline": hero.get("headline") or "Welcome",
            "subheadline": hero.get("subheadline") or "Discover what we have to offer",
            "ctaText": hero.get("ctaText") or "Get Started",
            "ctaHref": hero.get("ctaHref") or "#",
            "secondaryCta": secondary_cta,
            "imageDescription": hero.get("imageDescription") or DEFAULT_HERO_IMAGE,
        },
        "sections": normalize_sections(raw.get("sections")),
        "footer": {
            "variant": _pick(footer.get("variant"), _FOOTER_VARIANTS, "simple"),
            "columns": footer.get("columns") if isinstance(footer.get("columns"), list) else None,
            "copyright": footer.get("copyright") or f"© {date.today().year} All rights reserved.",
            "socialLinks": footer.get("socialLinks") if isinstance(footer.get("socialLinks"), list) else None,
        },
        "pages": pages,
    }

    try:
        config = WebsiteConfig.model_validate(candidate)
    except ValidationError as exc:
        raise ConfigGenerationError(f"generated config is invalid: {exc.error_count()} errors") from exc

    logger.info(
        "Normalized generated config",
        extra={
            "template_id": config.template_id,
            "sections": len(config.sections),
            "pages": len(config.pages),
            "custom_sections": sum(1 for section in config.sections if section.type == "custom"),
        },
    )
    return config


__all__ = ["TEMPLATE_ALIASES", "normalize_path", "is_safe_page_path", "normalize_sections", "normalize_config"]
