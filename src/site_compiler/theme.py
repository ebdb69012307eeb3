from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .models.config import Theme

_FONT_URLS = {
    "modern": "https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700;800&display=swap",
    "serif": (
        "https://fonts.googleapis.com/css2?family=Playfair+Display:wght@400;500;600;700;800"
        "&family=Inter:wght@300;400;500;600&display=swap"
    ),
    "playful": "https://fonts.googleapis.com/css2?family=Nunito:wght@300;400;600;700;800&display=swap",
    "minimal": "https://fonts.googleapis.com/css2?family=DM+Sans:wght@300;400;500;600;700&display=swap",
}

_FONT_FAMILIES = {
    "modern": "'Inter', sans-serif",
    "serif": "'Playfair Display', serif",
    "playful": "'Nunito', sans-serif",
    "minimal": "'DM Sans', sans-serif",
}


@dataclass(frozen=True)
class ThemeClasses:
    """Tailwind class strings keyed by the role they play, not by the colour they carry."""

    btn_primary: str
    btn_secondary: str
    text_primary: str
    text_secondary: str
    text_accent: str
    text_heading: str
    text_body: str
    text_muted: str
    bg_page: str
    bg_card: str
    bg_section: str
    bg_section_alt: str
    bg_hero: str
    bg_navbar: str
    bg_footer: str
    border_primary: str
    border_light: str
    accent_bg: str
    accent_text: str
    gradient_primary: str
    ring_primary: str
    font_class: str


def resolve_theme(theme: Theme) -> ThemeClasses:
    """Resolve a theme descriptor into its class bundle.

    Args:
        theme: Theme descriptor from the website config

    Returns:
        The same ThemeClasses instance for equal descriptors
    """
    return _resolve(theme.primary, theme.secondary, theme.accent, theme.background, theme.font_style)


@lru_cache(maxsize=256)
def _resolve(primary: str, secondary: str, accent: str, background: str, font_style: str) -> ThemeClasses:
    dark = background == "dark"
    p, s, a = primary, secondary, accent

    return ThemeClasses(
        btn_primary=f"bg-{p}-600 text-white hover:bg-{p}-700 transition-colors",
        btn_secondary=(
            f"border border-{p}-400 text-{p}-400 hover:bg-{p}-400 hover:text-white transition-colors"
            if dark
            else f"border border-{p}-600 text-{p}-600 hover:bg-{p}-600 hover:text-white transition-colors"
        ),
        text_primary=f"text-{p}-400" if dark else f"text-{p}-600",
        text_secondary=f"text-{s}-400" if dark else f"text-{s}-600",
        text_accent=f"text-{a}-400" if dark else f"text-{a}-500",
        text_heading="text-white" if dark else "text-gray-900",
        text_body="text-gray-300" if dark else "text-gray-600",
        text_muted="text-gray-400" if dark else "text-gray-500",
        bg_page="bg-gray-950" if dark else "bg-white",
        bg_card="bg-gray-900" if dark else "bg-white",
        bg_section="bg-gray-950" if dark else "bg-white",
        bg_section_alt="bg-gray-900" if dark else "bg-gray-50",
        bg_hero=(
            "bg-gradient-to-br from-gray-950 via-gray-900 to-gray-950"
            if dark
            else f"bg-gradient-to-br from-white via-{p}-50 to-white"
        ),
        bg_navbar="bg-gray-950/90 backdrop-blur-md" if dark else "bg-white/90 backdrop-blur-md",
        bg_footer="bg-gray-900" if dark else "bg-gray-950",
        border_primary=f"border-{p}-700" if dark else f"border-{p}-200",
        border_light="border-gray-800" if dark else "border-gray-200",
        accent_bg=f"bg-{a}-900" if dark else f"bg-{a}-100",
        accent_text=f"text-{a}-400" if dark else f"text-{a}-600",
        gradient_primary=f"bg-gradient-to-r from-{p}-600 to-{s}-600",
        ring_primary=f"ring-{p}-500",
        font_class="font-serif" if font_style == "serif" else "font-sans",
    )


def font_url(font_style: str) -> str:
    return _FONT_URLS.get(font_style, _FONT_URLS["modern"])


def heading_font_family(font_style: str) -> str:
    return _FONT_FAMILIES.get(font_style, _FONT_FAMILIES["modern"])


def body_font_family(font_style: str) -> str:
    if font_style == "serif":
        return _FONT_FAMILIES["modern"]
    return heading_font_family(font_style)


__all__ = ["ThemeClasses", "resolve_theme", "font_url", "heading_font_family", "body_font_family"]
