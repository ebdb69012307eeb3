from __future__ import annotations

import asyncio
import logging
import re
from typing import Mapping, Protocol, Sequence

from .errors import ImageServiceUnavailableError
from .markup import esc_attr
from .models.project import CompiledProject, ImageReport, ImageStatus, ProjectFile

logger = logging.getLogger(__name__)

MAX_PLACEHOLDERS = 6
DEFAULT_IMAGE_DESCRIPTION = "a professional photograph, high quality, modern design"
IMAGE_TOKEN_RE = re.compile(r"\bIMG_\d+\b")
_IMG_ALT_RE = re.compile(r"<img\b[^>]*?\bsrc=[\"'](IMG_\d+)[\"'][^>]*?\balt=\"([^\"]*)\"")


class ImagePlaceholders:
    """Compile-scoped placeholder minter.

    One instance lives for exactly one compile. Tokens are ``IMG_1`` up to
    ``IMG_<limit>``; once the limit is reached further images render as a
    static gradient block that needs no asset.
    """

    def __init__(self, limit: int = MAX_PLACEHOLDERS) -> None:
        self._limit = limit
        self._count = 0
        self._descriptions: dict[str, str] = {}

    @property
    def count(self) -> int:
        return self._count

    @property
    def exhausted(self) -> bool:
        return self._count >= self._limit

    @property
    def descriptions(self) -> dict[str, str]:
        return dict(self._descriptions)

    def harvest(self, token: str, description: str | None) -> None:
        if description and token not in self._descriptions:
            self._descriptions[token] = description

    def tag(self, description: str | None, class_name: str) -> str:
        """Render an image element, or the static fallback once the budget is spent."""
        text = description or DEFAULT_IMAGE_DESCRIPTION
        if self.exhausted:
            return (
                f'<div className="{class_name} bg-gradient-to-br from-gray-200 to-gray-300" '
                f'aria-label="{esc_attr(text)}" />'
            )
        self._count += 1
        token = f"IMG_{self._count}"
        self.harvest(token, text)
        return f'<img src="{token}" alt="{esc_attr(text)}" className="{class_name}" />'


class ImageBackend(Protocol):
    async def generate_image(self, description: str) -> str:
        """Return a URL for an image matching the description."""


def find_image_tokens(files: Sequence[ProjectFile]) -> list[str]:
    """Tokens in order of first appearance across the file set."""
    seen: dict[str, None] = {}
    for item in files:
        for match in IMAGE_TOKEN_RE.finditer(item.content):
            seen.setdefault(match.group(0), None)
    return list(seen)


def _alt_descriptions(files) -> dict[str, str]:
    found: dict[str, str] = {}
    for item in files:
        for token, alt in _IMG_ALT_RE.findall(item.content):
            if len(alt) > 5:
                found.setdefault(token, alt)
    return found


def _substitute(files, urls: Mapping[str, str]) -> list[ProjectFile]:
    if not urls:
        return list(files)

    def replace(match: re.Match[str]) -> str:
        return urls.get(match.group(0), match.group(0))

    return [ProjectFile(path=item.path, content=IMAGE_TOKEN_RE.sub(replace, item.content)) for item in files]


async def resolve_project_images(
    project: CompiledProject,
    backend: ImageBackend | None,
    cache: Mapping[str, str] | None = None,
    *,
    max_concurrency: int = 4,
) -> CompiledProject:
    """Replace placeholder tokens with generated image URLs.

    Descriptions already present in ``cache`` are reused without calling the
    backend. The remaining distinct descriptions are generated concurrently.
    A failed description leaves its tokens untouched, and so does an outage
    that hits only some descriptions. When every pending description hits an
    outage, or there is no backend, every token is left untouched. Either way a new project is returned and
    the report says which case applied.

    Args:
        project: Output of the synchronous compile
        backend: Image generation service, or None when none is configured
        cache: description -> URL pairs from earlier compiles of this project
        max_concurrency: Upper bound on simultaneous backend calls

    Returns:
        A new CompiledProject with substituted files and an updated image report
    """
    previous = dict(cache or {})
    harvested = dict(project.images.descriptions)
    tokens = find_image_tokens(project.files)
    if harvested:
        tokens = [token for token in tokens if token in harvested]

    if not tokens:
        report = ImageReport(status=ImageStatus.none, descriptions=harvested, cache=previous)
        return project.model_copy(update={"images": report})

    alts = _alt_descriptions(project.files)
    by_description: dict[str, list[str]] = {}
    descriptions: dict[str, str] = {}
    for token in tokens:
        description = harvested.get(token) or alts.get(token) or DEFAULT_IMAGE_DESCRIPTION
        descriptions[token] = description
        by_description.setdefault(description, []).append(token)

    pending = [description for description in by_description if description not in previous]

    try:
        generated, failures = await _generate_all(backend, pending, max_concurrency)
    except ImageServiceUnavailableError as exc:
        logger.warning(
            "Image service unavailable; keeping placeholders",
            extra={"error": str(exc), "pending": len(pending)},
        )
        report = ImageReport(
            status=ImageStatus.unavailable,
            descriptions=descriptions,
            cache=previous,
            unresolved=tokens,
        )
        return project.model_copy(update={"images": report})

    resolved_cache = {**previous, **generated}
    urls: dict[str, str] = {}
    unresolved: list[str] = []
    for description, description_tokens in by_description.items():
        url = resolved_cache.get(description)
        for token in description_tokens:
            if url:
                urls[token] = url
            else:
                unresolved.append(token)

    status = ImageStatus.partial if failures else ImageStatus.resolved
    logger.info(
        "Resolved project images",
        extra={
            "tokens": len(tokens),
            "distinct_descriptions": len(by_description),
            "cache_hits": len(by_description) - len(pending),
            "generated": len(generated),
            "failed": len(failures),
        },
    )

    report = ImageReport(
        status=status,
        descriptions=descriptions,
        cache=resolved_cache,
        unresolved=unresolved,
    )
    return project.model_copy(update={"files": _substitute(project.files, urls), "images": report})


async def _generate_all(
    backend: ImageBackend | None,
    descriptions: list[str],
    max_concurrency: int,
) -> tuple[dict[str, str], dict[str, str]]:
    if not descriptions:
        return {}, {}
    if backend is None:
        raise ImageServiceUnavailableError("no image backend configured")

    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def run(description: str) -> str:
        async with semaphore:
            return await backend.generate_image(description)

    try:
        results = await asyncio.gather(*(run(d) for d in descriptions), return_exceptions=True)
    except Exception as exc:
        raise ImageServiceUnavailableError(f"image batch failed: {exc}") from exc

    outages = [result for result in results if isinstance(result, ImageServiceUnavailableError)]
    if len(outages) == len(descriptions):
        raise outages[0]

    generated: dict[str, str] = {}
    failures: dict[str, str] = {}
    for description, result in zip(descriptions, results):
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
        if isinstance(result, Exception) or not result:
            failures[description] = str(result) if result else "empty url"
            logger.warning(
                "Image generation failed",
                extra={"description": description, "error": failures[description]},
            )
            continue
        generated[description] = result

    return generated, failures


__all__ = [
    "MAX_PLACEHOLDERS",
    "DEFAULT_IMAGE_DESCRIPTION",
    "IMAGE_TOKEN_RE",
    "ImagePlaceholders",
    "ImageBackend",
    "find_image_tokens",
    "resolve_project_images",
]
