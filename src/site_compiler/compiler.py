from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping, Sequence

from .images import ImageBackend, resolve_project_images
from .markup import collect_social_icons, is_internal_href
from .models.config import Page, WebsiteConfig
from .models.project import CompiledProject, ImageReport, ImageStatus, ProjectFile
from .naming import SectionSlot, assign_component_names
from .normalize import is_safe_page_path, normalize_path
from .registry import is_supported_section, render_section
from .templating import RenderContext
from .theme import body_font_family, font_url, heading_font_family

logger = logging.getLogger(__name__)

PACKAGE_NAME = "generated-nextjs-app"

BASE_DEPENDENCIES: Mapping[str, str] = {
    "next": "^14.0.0",
    "react": "^18.2.0",
    "react-dom": "^18.2.0",
    "lucide-react": "^0.294.0",
    "framer-motion": "^10.16.4",
    "recharts": "^2.10.0",
    "react-countup": "^6.5.3",
    "react-type-animation": "^3.2.0",
    "react-intersection-observer": "^9.13.0",
    "embla-carousel-react": "^8.3.0",
    "date-fns": "^3.6.0",
    "@radix-ui/react-accordion": "^1.2.0",
    "@radix-ui/react-tabs": "^1.1.0",
    "@radix-ui/react-dialog": "^1.1.0",
    "@radix-ui/react-tooltip": "^1.1.0",
    "@radix-ui/react-progress": "^1.1.0",
    "class-variance-authority": "^0.7.0",
    "clsx": "^2.1.0",
    "tailwind-merge": "^2.5.0",
}

DEV_DEPENDENCIES: Mapping[str, str] = {
    "@types/node": "^20",
    "@types/react": "^18",
    "@types/react-dom": "^18",
    "typescript": "^5",
    "tailwindcss": "^3.3.0",
    "autoprefixer": "^10.4.16",
    "postcss": "^8.4.31",
}

_PAGE_WORD_RE = re.compile(r"[\s\-_]+")
_PAGE_STRIP_RE = re.compile(r"[^a-zA-Z0-9\s\-_]")


def render_package_json() -> str:
    manifest = {
        "name": PACKAGE_NAME,
        "version": "0.1.0",
        "private": True,
        "scripts": {
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        },
        "dependencies": dict(BASE_DEPENDENCIES),
        "devDependencies": dict(DEV_DEPENDENCIES),
    }
    return json.dumps(manifest, indent=2) + "\n"


def page_component_name(title: str) -> str:
    words = [word for word in _PAGE_WORD_RE.split(_PAGE_STRIP_RE.sub("", title)) if word]
    name = "".join(word[:1].upper() + word[1:].lower() for word in words)
    if not name or not name[0].isalpha():
        name = f"Sub{name}"
    return f"{name}Page"


def relative_components_prefix(path: str) -> str:
    depth = len([segment for segment in path.split("/") if segment])
    return "../" * depth


# ── Compile steps ────────────────────────────────────────────────


def filter_supported(config: WebsiteConfig) -> tuple[WebsiteConfig, list[str]]:
    """Drop sections whose type has no renderer, from the homepage and every sub-page."""
    diagnostics: list[str] = []

    def keep(sections: Sequence[Any], where: str) -> list[Any]:
        kept = []
        for section in sections:
            if is_supported_section(getattr(section, "type", None)):
                kept.append(section)
            else:
                diagnostics.append(f"dropped unsupported section '{section.type}' from {where}")
        return kept

    sections = keep(config.sections, "homepage")
    pages = [
        page.model_copy(update={"sections": keep(page.sections, f"page {page.path}")})
        for page in config.pages
    ]
    return config.model_copy(update={"sections": sections, "pages": pages}), diagnostics


def _scaffold(context: RenderContext) -> list[ProjectFile]:
    config = context.config
    style = config.theme.font_style
    business = config.business
    fonts = {
        "font_url": font_url(style),
        "heading_font": heading_font_family(style),
        "body_font": body_font_family(style),
    }
    title = f"{business.name} - {business.tagline}" if business.tagline else business.name
    return [
        ProjectFile(path="app/layout.tsx", content=context.render("base/layout.tsx.j2", title=title, **fonts)),
        ProjectFile(path="app/globals.css", content=context.render("base/globals.css.j2", **fonts)),
        ProjectFile(path="tailwind.config.ts", content=context.render("base/tailwind.config.ts.j2", **fonts)),
        ProjectFile(path="postcss.config.js", content=context.render("base/postcss.config.js.j2")),
        ProjectFile(path="package.json", content=render_package_json()),
        ProjectFile(path="app/loading.tsx", content=context.render("base/loading.tsx.j2")),
    ]


def _chrome(context: RenderContext) -> list[ProjectFile]:
    footer = context.config.footer
    platforms = [link.platform for link in footer.social_links or []]
    extra = ("ChevronUp", "ArrowRight") if footer.variant == "multi-column" else ("ChevronUp",)
    needs_link = any(
        is_internal_href(link.href) for column in footer.columns or [] for link in column.links
    )
    footer_source = context.render(
        f"chrome/footer/{footer.variant}.tsx.j2",
        social_icons=collect_social_icons(platforms, *extra),
        needs_link=needs_link,
    )
    return [
        ProjectFile(path="app/components/Navbar.tsx", content=context.render("chrome/navbar.tsx.j2")),
        ProjectFile(path="app/components/Footer.tsx", content=footer_source),
    ]


def hero_button_classes(primary: str, dark: bool) -> dict[str, str]:
    p = primary
    base = "inline-flex items-center justify-center px-8 py-4 rounded-full text-lg font-semibold transition-all duration-300"
    if dark:
        outline = f"border-{p}-400 text-{p}-400 hover:bg-{p}-400/10"
        link_color = f"text-{p}-400 hover:text-{p}-300"
    else:
        outline = f"border-{p}-600 text-{p}-600 hover:bg-{p}-50"
        link_color = f"text-{p}-600 hover:text-{p}-700"
    return {
        "primary": f"{base} bg-{p}-600 text-white hover:bg-{p}-700 shadow-lg shadow-{p}-500/25 hover:shadow-xl hover:-translate-y-0.5",
        "outline": f"{base} border-2 {outline}",
        "ghost": f"{base} border-2 border-white/40 text-white hover:bg-white/10 backdrop-blur-sm",
        "inverted": f"{base} bg-white text-{p}-700 hover:bg-gray-100 shadow-lg",
        "text_link": f"inline-flex items-center text-lg font-semibold underline underline-offset-4 {link_color}",
    }


def _hero(context: RenderContext) -> ProjectFile:
    theme = context.config.theme
    source = context.render(
        f"chrome/hero/{context.config.hero.variant}.tsx.j2",
        **hero_button_classes(theme.primary, theme.is_dark),
    )
    return ProjectFile(path="app/components/Hero.tsx", content=source)


class _SectionFiles:
    """Section components written so far; the first writer of a path wins."""

    def __init__(self, context: RenderContext, diagnostics: list[str]) -> None:
        self._context = context
        self._diagnostics = diagnostics
        self._owners: dict[str, tuple[Any, str]] = {}
        self.files: list[ProjectFile] = []

    def emit(self, slots: Sequence[SectionSlot], where: str) -> None:
        for slot in slots:
            owner = self._owners.get(slot.path)
            if owner is not None:
                section, owner_where = owner
                if section.to_ir() != slot.section.to_ir():
                    message = f"naming collision: {slot.path} from {where} reuses the {owner_where} component"
                    self._diagnostics.append(message)
                    logger.warning(
                        "Section component path already emitted with different content",
                        extra={"path": slot.path, "page": where, "owner": owner_where},
                    )
                continue
            content = render_section(slot.section, self._context, slot.name)
            if content is None:
                continue
            self._owners[slot.path] = (slot.section, where)
            self.files.append(ProjectFile(path=slot.path, content=content))


def render_project(config: WebsiteConfig) -> CompiledProject:
    """Compile a config into a project without touching any image service.

    Image placeholders stay in the returned files and the report's status is
    ``pending`` when any were minted.

    Args:
        config: A well-typed website config

    Returns:
        The compiled project, built from the section-filtered config
    """
    config, diagnostics = filter_supported(config)
    context = RenderContext.for_config(config)

    files = _scaffold(context)
    files.extend(_chrome(context))
    files.append(_hero(context))

    sections = _SectionFiles(context, diagnostics)
    home_slots = assign_component_names(config.sections)
    sections.emit(home_slots, "homepage")

    page_slots: list[tuple[Page, str, list[SectionSlot]]] = []
    seen_paths: set[str] = {"/"}
    for page in config.pages:
        path = normalize_path(page.path)
        if not is_safe_page_path(path):
            diagnostics.append(f"skipped page '{page.title}': path {path} leaves the app directory")
            continue
        if path in seen_paths:
            diagnostics.append(f"skipped page '{page.title}': path {path} is already taken")
            continue
        seen_paths.add(path)
        slots = assign_component_names(page.sections)
        sections.emit(slots, f"page {path}")
        page_slots.append((page, path, slots))

    files.extend(sections.files)
    files.append(
        ProjectFile(path="app/page.tsx", content=context.render("pages/home.tsx.j2", slots=home_slots))
    )
    for page, path, slots in page_slots:
        source = context.render(
            "pages/sub_page.tsx.j2",
            page=page,
            slots=slots,
            prefix=relative_components_prefix(path),
            component=page_component_name(page.title),
        )
        files.append(ProjectFile(path=f"app{path}/page.tsx", content=source))

    harvested = context.images.descriptions
    report = ImageReport(
        status=ImageStatus.pending if harvested else ImageStatus.none,
        descriptions=harvested,
    )
    logger.info(
        "Compiled project",
        extra={
            "files": len(files),
            "pages": len(page_slots),
            "placeholders": context.images.count,
            "diagnostics": len(diagnostics),
        },
    )
    return CompiledProject(
        files=files,
        dependencies=dict(BASE_DEPENDENCIES),
        dev_dependencies=dict(DEV_DEPENDENCIES),
        config=config,
        diagnostics=diagnostics,
        images=report,
    )


async def compile_template(
    config: WebsiteConfig,
    *,
    image_backend: ImageBackend | None = None,
    image_cache: Mapping[str, str] | None = None,
    max_concurrency: int = 4,
) -> CompiledProject:
    """Compile a config and resolve its image placeholders.

    Args:
        config: A well-typed website config
        image_backend: Image service, or None to leave placeholders unresolved
        image_cache: description -> URL pairs carried over from earlier compiles
        max_concurrency: Upper bound on simultaneous image requests

    Returns:
        The compiled project with as many placeholders substituted as possible
    """
    project = render_project(config)
    return await resolve_project_images(
        project, image_backend, image_cache, max_concurrency=max_concurrency
    )


__all__ = [
    "BASE_DEPENDENCIES",
    "DEV_DEPENDENCIES",
    "render_package_json",
    "page_component_name",
    "relative_components_prefix",
    "filter_supported",
    "hero_button_classes",
    "render_project",
    "compile_template",
]
