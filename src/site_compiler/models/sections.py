from __future__ import annotations

from typing import Annotated, Any, Literal, Sequence, Union, get_args

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator
from pydantic.alias_generators import to_camel


class IRModel(BaseModel):
    """Base for every IR value: camelCase on the wire, snake_case in Python, immutable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_ir(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SectionBase(IRModel):
    type: str
    variant: str

    @field_validator("variant", mode="before")
    @classmethod
    def _coerce_variant(cls, value: Any) -> Any:
        field = cls.model_fields["variant"]
        allowed = get_args(field.annotation)
        if not allowed or value in allowed:
            return value
        return field.default

    @classmethod
    def variants(cls) -> tuple[str, ...]:
        return get_args(cls.model_fields["variant"].annotation)

    @classmethod
    def default_variant(cls) -> str:
        return cls.model_fields["variant"].default


# ── Records ──────────────────────────────────────────────────────


class FeatureItem(IRModel):
    icon: str = "star"
    title: str
    description: str = ""


class MenuItem(IRModel):
    name: str
    description: str = ""
    price: str = ""
    image_description: str | None = None


class MenuCategory(IRModel):
    name: str
    items: Sequence[MenuItem] = Field(default_factory=list)


class ProductItem(IRModel):
    name: str
    price: str = ""
    original_price: str | None = None
    badge: str | None = None
    description: str = ""
    image_description: str = ""


class TestimonialItem(IRModel):
    name: str
    role: str = ""
    quote: str
    rating: float | None = Field(default=None, ge=0, le=5)


class PricingTier(IRModel):
    name: str
    price: str
    period: str | None = None
    description: str = ""
    features: Sequence[str] = Field(default_factory=list)
    highlighted: bool = False
    cta_text: str = "Get Started"


class GalleryItem(IRModel):
    image_description: str
    caption: str | None = None


class StatItem(IRModel):
    value: str
    label: str


class TeamMember(IRModel):
    name: str
    role: str = ""
    bio: str | None = None
    image_description: str = ""


class BlogPost(IRModel):
    title: str
    excerpt: str = ""
    date: str = ""
    author: str = ""
    image_description: str = ""
    category: str | None = None


class FaqItem(IRModel):
    question: str
    answer: str


class ValueItem(IRModel):
    title: str
    description: str = ""
    icon: str | None = None


class TimelineEntry(IRModel):
    year: str
    title: str
    description: str = ""


class LogoCloudItem(IRModel):
    name: str


class ProcessStep(IRModel):
    title: str
    description: str = ""
    icon: str | None = None


# ── Sections ─────────────────────────────────────────────────────


class FeatureGridSection(SectionBase):
    type: Literal["feature-grid"] = "feature-grid"
    variant: Literal["cards", "icons-left", "icons-top", "alternating"] = "cards"
    title: str = ""
    subtitle: str | None = None
    items: Sequence[FeatureItem] = Field(default_factory=list)


class MenuSection(SectionBase):
    type: Literal["menu"] = "menu"
    variant: Literal["tabbed", "grid", "list", "elegant"] = "tabbed"
    title: str = ""
    subtitle: str | None = None
    categories: Sequence[MenuCategory] = Field(default_factory=list)


class ProductGridSection(SectionBase):
    type: Literal["product-grid"] = "product-grid"
    variant: Literal["grid", "list", "carousel", "featured"] = "grid"
    title: str = ""
    subtitle: str | None = None
    items: Sequence[ProductItem] = Field(default_factory=list)


class TestimonialsSection(SectionBase):
    type: Literal["testimonials"] = "testimonials"
    variant: Literal["cards", "single-spotlight", "slider", "minimal"] = "cards"
    title: str = ""
    subtitle: str | None = None
    items: Sequence[TestimonialItem] = Field(default_factory=list)


class PricingSection(SectionBase):
    type: Literal["pricing"] = "pricing"
    variant: Literal["columns", "toggle", "comparison-table"] = "columns"
    title: str = ""
    subtitle: str | None = None
    tiers: Sequence[PricingTier] = Field(default_factory=list)


class GallerySection(SectionBase):
    type: Literal["gallery"] = "gallery"
    variant: Literal["grid", "masonry", "carousel"] = "grid"
    title: str = ""
    subtitle: str | None = None
    items: Sequence[GalleryItem] = Field(default_factory=list)


class StatsSection(SectionBase):
    type: Literal["stats"] = "stats"
    variant: Literal["inline", "cards", "large-numbers"] = "inline"
    title: str | None = None
    items: Sequence[StatItem] = Field(default_factory=list)


class CtaBannerSection(SectionBase):
    type: Literal["cta-banner"] = "cta-banner"
    variant: Literal["gradient", "solid", "with-image"] = "gradient"
    headline: str
    description: str = ""
    cta_text: str = "Get Started"
    cta_href: str = "#contact"
    image_description: str | None = None


class TeamSection(SectionBase):
    type: Literal["team"] = "team"
    variant: Literal["grid", "carousel", "detailed"] = "grid"
    title: str = ""
    subtitle: str | None = None
    members: Sequence[TeamMember] = Field(default_factory=list)


class BlogPreviewSection(SectionBase):
    type: Literal["blog-preview"] = "blog-preview"
    variant: Literal["cards", "list", "featured-hero"] = "cards"
    title: str = ""
    subtitle: str | None = None
    posts: Sequence[BlogPost] = Field(default_factory=list)


class ContactSection(SectionBase):
    type: Literal["contact"] = "contact"
    variant: Literal["form-only", "split-with-info", "minimal"] = "split-with-info"
    title: str = ""
    subtitle: str | None = None
    form_fields: Sequence[str] | None = Field(default=None, alias="fields")


class FaqSection(SectionBase):
    type: Literal["faq"] = "faq"
    variant: Literal["accordion", "two-column", "simple"] = "accordion"
    title: str = ""
    subtitle: str | None = None
    items: Sequence[FaqItem] = Field(default_factory=list)


class AboutSection(SectionBase):
    type: Literal["about"] = "about"
    variant: Literal["text-image", "timeline", "values-grid"] = "text-image"
    title: str = ""
    subtitle: str | None = None
    content: str = ""
    image_description: str | None = None
    values: Sequence[ValueItem] | None = None
    timeline: Sequence[TimelineEntry] | None = None


class LogoCloudSection(SectionBase):
    type: Literal["logo-cloud"] = "logo-cloud"
    variant: Literal["scroll", "grid", "simple"] = "grid"
    title: str | None = None
    subtitle: str | None = None
    items: Sequence[LogoCloudItem] = Field(default_factory=list)


class NewsletterSection(SectionBase):
    type: Literal["newsletter"] = "newsletter"
    variant: Literal["centered", "split", "banner"] = "centered"
    title: str = ""
    subtitle: str | None = None
    benefits: Sequence[str] | None = None


class ProcessSection(SectionBase):
    type: Literal["process"] = "process"
    variant: Literal["numbered", "timeline", "cards"] = "numbered"
    title: str | None = None
    subtitle: str | None = None
    steps: Sequence[ProcessStep] = Field(default_factory=list)


class CustomSection(SectionBase):
    type: Literal["custom"] = "custom"
    variant: Literal["custom"] = "custom"
    component_name: str
    code: str


class UnsupportedSection(IRModel):
    """A section whose `type` is outside the closed set; kept so the compiler can drop it."""

    model_config = ConfigDict(extra="allow")

    # Missing or non-string kinds land here too
    type: Any = None
    variant: Any = None


SECTION_MODELS: dict[str, type[SectionBase]] = {
    model.model_fields["type"].default: model
    for model in (
        FeatureGridSection,
        MenuSection,
        ProductGridSection,
        TestimonialsSection,
        PricingSection,
        GallerySection,
        StatsSection,
        CtaBannerSection,
        TeamSection,
        BlogPreviewSection,
        ContactSection,
        FaqSection,
        AboutSection,
        LogoCloudSection,
        NewsletterSection,
        ProcessSection,
        CustomSection,
    )
}

SECTION_TYPES: tuple[str, ...] = tuple(SECTION_MODELS)


def _section_tag(value: Any) -> str:
    section_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if isinstance(section_type, str) and section_type in SECTION_MODELS:
        return section_type
    return "unsupported"


ConfigSection = Annotated[
    Union[
        Annotated[FeatureGridSection, Tag("feature-grid")],
        Annotated[MenuSection, Tag("menu")],
        Annotated[ProductGridSection, Tag("product-grid")],
        Annotated[TestimonialsSection, Tag("testimonials")],
        Annotated[PricingSection, Tag("pricing")],
        Annotated[GallerySection, Tag("gallery")],
        Annotated[StatsSection, Tag("stats")],
        Annotated[CtaBannerSection, Tag("cta-banner")],
        Annotated[TeamSection, Tag("team")],
        Annotated[BlogPreviewSection, Tag("blog-preview")],
        Annotated[ContactSection, Tag("contact")],
        Annotated[FaqSection, Tag("faq")],
        Annotated[AboutSection, Tag("about")],
        Annotated[LogoCloudSection, Tag("logo-cloud")],
        Annotated[NewsletterSection, Tag("newsletter")],
        Annotated[ProcessSection, Tag("process")],
        Annotated[CustomSection, Tag("custom")],
        Annotated[UnsupportedSection, Tag("unsupported")],
    ],
    Discriminator(_section_tag),
]


__all__ = [
    "IRModel",
    "SectionBase",
    "FeatureItem",
    "MenuItem",
    "MenuCategory",
    "ProductItem",
    "TestimonialItem",
    "PricingTier",
    "GalleryItem",
    "StatItem",
    "TeamMember",
    "BlogPost",
    "FaqItem",
    "ValueItem",
    "TimelineEntry",
    "LogoCloudItem",
    "ProcessStep",
    "FeatureGridSection",
    "MenuSection",
    "ProductGridSection",
    "TestimonialsSection",
    "PricingSection",
    "GallerySection",
    "StatsSection",
    "CtaBannerSection",
    "TeamSection",
    "BlogPreviewSection",
    "ContactSection",
    "FaqSection",
    "AboutSection",
    "LogoCloudSection",
    "NewsletterSection",
    "ProcessSection",
    "CustomSection",
    "UnsupportedSection",
    "ConfigSection",
    "SECTION_MODELS",
    "SECTION_TYPES",
]
