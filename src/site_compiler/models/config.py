from __future__ import annotations

from typing import Literal, Sequence

from pydantic import Field

from .sections import ConfigSection, IRModel

TailwindColor = Literal[
    "slate", "gray", "zinc", "neutral", "stone",
    "red", "orange", "amber", "yellow", "lime",
    "green", "emerald", "teal", "cyan", "sky",
    "blue", "indigo", "violet", "purple", "fuchsia",
    "pink", "rose",
]
BackgroundMode = Literal["light", "dark"]
FontStyle = Literal["modern", "serif", "playful", "minimal"]
TemplateId = Literal["restaurant", "ecommerce", "saas", "portfolio", "blog", "fitness"]
HeroVariant = Literal[
    "centered", "split-left", "split-right", "fullscreen", "minimal", "gradient-animated", "video-bg"
]
FooterVariant = Literal["simple", "multi-column", "minimal"]


class Business(IRModel):
    name: str
    tagline: str = ""
    description: str = ""
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    hours: str | None = None
    logo_url: str | None = None


class Theme(IRModel):
    primary: TailwindColor = "blue"
    secondary: TailwindColor = "indigo"
    accent: TailwindColor = "amber"
    background: BackgroundMode = "light"
    font_style: FontStyle = "modern"

    @property
    def is_dark(self) -> bool:
        return self.background == "dark"


class NavLink(IRModel):
    label: str
    href: str


class Nav(IRModel):
    items: Sequence[NavLink] = Field(default_factory=list)
    cta_button: NavLink | None = None


class SecondaryCta(IRModel):
    text: str
    href: str


class Hero(IRModel):
    variant: HeroVariant = "centered"
    headline: str
    subheadline: str = ""
    cta_text: str = "Get Started"
    cta_href: str = "#contact"
    secondary_cta: SecondaryCta | None = None
    image_description: str = ""


class FooterColumn(IRModel):
    title: str
    links: Sequence[NavLink] = Field(default_factory=list)


class SocialLink(IRModel):
    platform: str
    url: str


class Footer(IRModel):
    variant: FooterVariant = "simple"
    columns: Sequence[FooterColumn] | None = None
    copyright: str = ""
    social_links: Sequence[SocialLink] | None = None


class Page(IRModel):
    path: str
    title: str
    sections: Sequence[ConfigSection] = Field(default_factory=list)


class WebsiteConfig(IRModel):
    """The structured description of a website that the compiler turns into source files."""

    version: Literal[1] = 1
    template_id: TemplateId = "saas"
    business: Business
    theme: Theme = Field(default_factory=Theme)
    nav: Nav = Field(default_factory=Nav)
    hero: Hero
    sections: Sequence[ConfigSection] = Field(default_factory=list)
    footer: Footer = Field(default_factory=Footer)
    pages: Sequence[Page] = Field(default_factory=list)


class UploadedAsset(IRModel):
    """An image the user attached to a request, already hosted somewhere reachable."""

    name: str
    url: str
    content_type: str | None = None


__all__ = [
    "TailwindColor",
    "BackgroundMode",
    "FontStyle",
    "TemplateId",
    "HeroVariant",
    "FooterVariant",
    "Business",
    "Theme",
    "NavLink",
    "Nav",
    "SecondaryCta",
    "Hero",
    "FooterColumn",
    "SocialLink",
    "Footer",
    "Page",
    "WebsiteConfig",
    "UploadedAsset",
]
