from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from .images import ImagePlaceholders
from .markup import esc, esc_attr, esc_str, esc_tpl, is_internal_href, resolve_icon, resolve_social_icon
from .models.config import WebsiteConfig
from .theme import ThemeClasses, resolve_theme

TEMPLATE_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=1)
def environment() -> Environment:
    """Jinja environment for TSX/CSS emission.

    JSX uses ``{{`` for inline objects, so the template syntax moves to
    ``[[ ]]`` / ``[% %]``. Autoescaping is off: every interpolation picks its
    escaping filter explicitly (``jsx``, ``attr``, ``tpl``, ``js``).
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        block_start_string="[%",
        block_end_string="%]",
        variable_start_string="[[",
        variable_end_string="]]",
        comment_start_string="[##",
        comment_end_string="##]",
    )
    env.filters.update(
        jsx=esc,
        attr=esc_attr,
        tpl=esc_tpl,
        js=esc_str,
        icon=resolve_icon,
        social_icon=resolve_social_icon,
    )
    env.tests["internal"] = is_internal_href
    return env


def render_template(template: str, **context: Any) -> str:
    return environment().get_template(template).render(**context)


@dataclass
class RenderContext:
    """Everything a renderer may read during one compile.

    ``images`` is the only mutable member; it is created fresh for every
    compile so concurrent compiles never share a placeholder counter.
    """

    config: WebsiteConfig
    theme: ThemeClasses
    images: ImagePlaceholders = field(default_factory=ImagePlaceholders)

    @classmethod
    def for_config(cls, config: WebsiteConfig) -> "RenderContext":
        return cls(config=config, theme=resolve_theme(config.theme))

    def render(self, template: str, **extra: Any) -> str:
        theme = self.config.theme
        context: dict[str, Any] = {
            "config": self.config,
            "business": self.config.business,
            "t": self.theme,
            "p": theme.primary,
            "s": theme.secondary,
            "a": theme.accent,
            "dark": theme.is_dark,
            "images": self.images,
        }
        context.update(extra)
        return render_template(template, **context)


__all__ = ["TEMPLATE_DIR", "environment", "render_template", "RenderContext"]
