from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from .markup import collect_icons
from .models.sections import (
    SECTION_MODELS,
    AboutSection,
    ContactSection,
    CustomSection,
    FeatureGridSection,
    PricingSection,
    ProcessSection,
    ProductGridSection,
    SectionBase,
    TestimonialsSection,
)
from .templating import RenderContext

logger = logging.getLogger(__name__)

Prepare = Callable[[Any], Mapping[str, Any]]

_PRICE_CHARS_RE = re.compile(r"[^0-9.]")


def _columns(count: int, limit: int) -> int:
    return min(count, limit) or 1


def _parse_price(value: str | None) -> float | None:
    if not value:
        return None
    digits = _PRICE_CHARS_RE.sub("", value)
    try:
        return float(digits)
    except ValueError:
        return None


def discount_percent(price: str, original_price: str | None) -> int | None:
    """Whole-percent saving of ``price`` against ``original_price``, if there is one."""
    current = _parse_price(price)
    original = _parse_price(original_price)
    if current is None or original is None:
        return None
    if not original > current > 0:
        return None
    return round((original - current) / original * 100)


# ── Per-kind context ─────────────────────────────────────────────


def _prepare_feature_grid(section: FeatureGridSection) -> dict[str, Any]:
    return {
        "icons": collect_icons(item.icon for item in section.items),
        "columns": _columns(len(section.items), 4),
    }


def _prepare_product_grid(section: ProductGridSection) -> dict[str, Any]:
    return {
        "columns": _columns(len(section.items), 4),
        "discounts": [discount_percent(item.price, item.original_price) for item in section.items],
    }


def _prepare_testimonials(section: TestimonialsSection) -> dict[str, Any]:
    return {"rated": any(item.rating for item in section.items)}


def _prepare_pricing(section: PricingSection) -> dict[str, Any]:
    features: dict[str, None] = {}
    for tier in section.tiers:
        for feature in tier.features:
            features.setdefault(feature, None)
    return {"columns": _columns(len(section.tiers), 3), "all_features": list(features)}


def _prepare_count(attribute: str, limit: int) -> Prepare:
    def prepare(section: SectionBase) -> dict[str, Any]:
        return {"columns": _columns(len(getattr(section, attribute)), limit)}

    return prepare


def _prepare_logo_cloud(section) -> dict[str, Any]:
    return {"columns": min(max(len(section.items), 3), 6)}


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    placeholder: str
    input_type: str = "text"
    multiline: bool = False


DEFAULT_FORM_FIELDS: Sequence[str] = ("name", "email", "subject", "message")

_KNOWN_FIELDS: Mapping[str, FormField] = {
    "name": FormField("name", "Name", "Your name"),
    "email": FormField("email", "Email", "you@example.com", input_type="email"),
    "phone": FormField("phone", "Phone", "Your phone number", input_type="tel"),
    "subject": FormField("subject", "Subject", "How can we help?"),
    "message": FormField("message", "Message", "Tell us more...", multiline=True),
}


def form_field(name: str) -> FormField:
    key = name.strip().lower()
    if key in _KNOWN_FIELDS:
        return _KNOWN_FIELDS[key]
    label = key.replace("_", " ").replace("-", " ").title() or "Field"
    return FormField(key or "field", label, label)


def _prepare_contact(section: ContactSection, business) -> dict[str, Any]:
    names = section.form_fields or DEFAULT_FORM_FIELDS
    info = [
        {"icon": icon, "label": label, "value": value}
        for icon, label, value in (
            ("Phone", "Phone", business.phone),
            ("Mail", "Email", business.email),
            ("MapPin", "Address", business.address),
            ("Clock", "Hours", business.hours),
        )
        if value
    ]
    return {
        "fields": [form_field(name) for name in names],
        "contact_info": info,
        "icons": collect_icons((), *(entry["icon"] for entry in info), "MapPin", "Send"),
    }


def _prepare_about(section: AboutSection) -> dict[str, Any]:
    values = section.values or []
    return {
        "paragraphs": [line.strip() for line in section.content.split("\n") if line.strip()],
        "icons": collect_icons(value.icon for value in values),
        "columns": _columns(len(values), 4),
    }


def _prepare_process(section: ProcessSection) -> dict[str, Any]:
    return {
        "icons": collect_icons(step.icon for step in section.steps if step.icon),
        "columns": _columns(len(section.steps), 4),
    }


def _no_extras(section: SectionBase) -> dict[str, Any]:
    return {}


# ── Renderers ────────────────────────────────────────────────────


@dataclass(frozen=True)
class SectionRenderer:
    """Renders one section kind; the variant picks the template."""

    type: str
    prepare: Prepare = _no_extras
    needs_business: bool = False

    @property
    def model(self) -> type[SectionBase]:
        return SECTION_MODELS[self.type]

    def variant_for(self, variant: str | None) -> str:
        if variant in self.model.variants():
            return variant
        return self.model.default_variant()

    def template_for(self, variant: str | None) -> str:
        return f"sections/{self.type}/{self.variant_for(variant)}.tsx.j2"

    def render(self, section: SectionBase, context: RenderContext, name: str) -> str:
        if self.needs_business:
            extras = self.prepare(section, context.config.business)
        else:
            extras = self.prepare(section)
        return context.render(self.template_for(section.variant), section=section, name=name, **extras)


@dataclass(frozen=True)
class CustomSectionRenderer:
    """Emits validated custom TSX as-is."""

    type: str = "custom"

    def render(self, section: CustomSection, context: RenderContext, name: str) -> str:
        code = section.code.strip("\n")
        return code + "\n"


@dataclass
class SectionRegistry:
    renderers: dict[str, SectionRenderer | CustomSectionRenderer] = field(default_factory=dict)

    def register(self, renderer: SectionRenderer | CustomSectionRenderer) -> None:
        self.renderers[renderer.type] = renderer

    def get(self, section_type: str) -> SectionRenderer | CustomSectionRenderer | None:
        return self.renderers.get(section_type)

    def supports(self, section_type: Any) -> bool:
        return isinstance(section_type, str) and section_type in self.renderers

    def render(self, section: Any, context: RenderContext, name: str) -> str | None:
        """Render a section, or return None when its type has no renderer.

        Args:
            section: Any parsed section value, supported or not
            context: Compile-scoped render context
            name: Component name assigned by the naming pass

        Returns:
            TSX source text, or None for unsupported types
        """
        section_type = getattr(section, "type", None)
        renderer = self.get(section_type) if isinstance(section_type, str) else None
        if renderer is None:
            logger.warning("Skipping unsupported section", extra={"section_type": section_type})
            return None
        return renderer.render(section, context, name)


def _default_registry() -> SectionRegistry:
    registry = SectionRegistry()
    for renderer in (
        SectionRenderer("feature-grid", _prepare_feature_grid),
        SectionRenderer("menu"),
        SectionRenderer("product-grid", _prepare_product_grid),
        SectionRenderer("testimonials", _prepare_testimonials),
        SectionRenderer("pricing", _prepare_pricing),
        SectionRenderer("gallery"),
        SectionRenderer("stats", _prepare_count("items", 4)),
        SectionRenderer("cta-banner"),
        SectionRenderer("team", _prepare_count("members", 4)),
        SectionRenderer("blog-preview"),
        SectionRenderer("contact", _prepare_contact, needs_business=True),
        SectionRenderer("faq"),
        SectionRenderer("about", _prepare_about),
        SectionRenderer("logo-cloud", _prepare_logo_cloud),
        SectionRenderer("newsletter"),
        SectionRenderer("process", _prepare_process),
        CustomSectionRenderer(),
    ):
        registry.register(renderer)
    return registry


DEFAULT_REGISTRY = _default_registry()


def is_supported_section(section_type: Any) -> bool:
    return DEFAULT_REGISTRY.supports(section_type)


def render_section(section: Any, context: RenderContext, name: str) -> str | None:
    return DEFAULT_REGISTRY.render(section, context, name)


__all__ = [
    "FormField",
    "DEFAULT_FORM_FIELDS",
    "form_field",
    "discount_percent",
    "SectionRenderer",
    "CustomSectionRenderer",
    "SectionRegistry",
    "DEFAULT_REGISTRY",
    "is_supported_section",
    "render_section",
]
