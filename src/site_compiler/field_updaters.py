from __future__ import annotations

import re
from typing import Mapping, Sequence, get_args

from .models.config import TailwindColor, UploadedAsset, WebsiteConfig

_URL_RE = re.compile(r"https?://[^\s\"'<>]+")
_COLOR_RE = re.compile(r"primary(?: colou?r)?(?: to|:|\s)\s*(\w+)|make it (\w+)|change (?:it )?to (\w+)")

TAILWIND_COLORS: tuple[str, ...] = get_args(TailwindColor)


def update_logo(config: WebsiteConfig, logo_url: str) -> WebsiteConfig:
    """New config whose only difference is ``business.logoUrl``."""
    business = config.business.model_copy(update={"logo_url": logo_url})
    return config.model_copy(update={"business": business})


def update_theme_colors(config: WebsiteConfig, **updates: str) -> WebsiteConfig:
    allowed = {"primary", "secondary", "accent", "background"}
    changes = {key: value for key, value in updates.items() if key in allowed and value}
    if not changes:
        return config
    return config.model_copy(update={"theme": config.theme.model_copy(update=changes)})


def update_contact_info(config: WebsiteConfig, **updates: str) -> WebsiteConfig:
    allowed = {"phone", "email", "address", "hours"}
    changes = {key: value for key, value in updates.items() if key in allowed and value is not None}
    if not changes:
        return config
    return config.model_copy(update={"business": config.business.model_copy(update=changes)})


def update_hero(config: WebsiteConfig, **updates: str) -> WebsiteConfig:
    allowed = {"headline", "subheadline", "cta_text", "cta_href", "image_description"}
    changes = {key: value for key, value in updates.items() if key in allowed and value is not None}
    if not changes:
        return config
    return config.model_copy(update={"hero": config.hero.model_copy(update=changes)})


def extract_logo_url(
    edit_text: str,
    uploaded_assets: Sequence[UploadedAsset] | None = None,
) -> str | None:
    """Find the logo URL an edit refers to.

    An uploaded asset whose name mentions "logo" wins, then a lone uploaded
    asset, then the first http(s) URL in the text.
    """
    assets = list(uploaded_assets or [])
    for asset in assets:
        if "logo" in asset.name.lower():
            return asset.url
    if len(assets) == 1:
        return assets[0].url

    match = _URL_RE.search(edit_text)
    if match:
        return match.group(0).rstrip(".,;)")
    return None


def extract_colors(edit_text: str) -> Mapping[str, str]:
    match = _COLOR_RE.search(edit_text.lower())
    if not match:
        return {}
    color = next(group for group in match.groups() if group)
    if color in TAILWIND_COLORS:
        return {"primary": color}
    return {}


_QUOTED_RE = re.compile(r"[\"'“‘]([^\"'”’]{2,})[\"'”’]")
_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
_PHONE_RE = re.compile(r"\+?\(?\d[\d\s().-]{6,}\d")


class KeywordConfigMutator:
    """Applies the edits the field updaters can express without a language model.

    Anything it cannot express leaves the config unchanged.
    """

    def mutate_config(self, config: WebsiteConfig, edit_text: str, classification) -> WebsiteConfig:
        targets = set(classification.target_fields)
        text = edit_text.lower()

        if classification.type == "styling":
            updates = dict(extract_colors(edit_text))
            if "theme.background" in targets:
                if re.search(r"\bdark\b", text):
                    updates["background"] = "dark"
                elif re.search(r"\blight\b", text):
                    updates["background"] = "light"
            return update_theme_colors(config, **updates)

        if classification.type == "contact-info":
            email = _EMAIL_RE.search(edit_text)
            phone = _PHONE_RE.search(edit_text)
            return update_contact_info(
                config,
                email=email.group(0) if email and "business.email" in targets else None,
                phone=phone.group(0).strip() if phone and "business.phone" in targets else None,
            )

        if classification.type == "content":
            quoted = _QUOTED_RE.search(edit_text)
            if not quoted:
                return config
            value = quoted.group(1)
            if "hero.headline" in targets:
                return update_hero(config, headline=value)
            if "hero.subheadline" in targets:
                return update_hero(config, subheadline=value)
            if "hero.ctaText" in targets:
                return update_hero(config, cta_text=value)
            if "business.tagline" in targets:
                return config.model_copy(
                    update={"business": config.business.model_copy(update={"tagline": value})}
                )

        return config


__all__ = [
    "KeywordConfigMutator",
    "TAILWIND_COLORS",
    "update_logo",
    "update_theme_colors",
    "update_contact_info",
    "update_hero",
    "extract_logo_url",
    "extract_colors",
]
