from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .models.sections import CustomSection

logger = logging.getLogger(__name__)

_COMPONENT_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9]+$")
_DEFAULT_EXPORT_RE = re.compile(r"\bexport\s+default\b")


@dataclass(frozen=True)
class LintMessage:
    line: int
    column: int
    severity: str
    rule: str | None
    message: str


# Errors reject the section; warnings pass through.
Linter = Callable[[str], Sequence[LintMessage]]


def custom_section_problems(section: CustomSection, linter: Linter | None = None) -> list[str]:
    """Reasons a custom section cannot be compiled; empty when it is usable."""
    if not section.code.strip():
        return ["code is empty"]
    problems: list[str] = []
    if not _COMPONENT_NAME_RE.match(section.component_name):
        problems.append(f"component name {section.component_name!r} is not PascalCase")
    if not _DEFAULT_EXPORT_RE.search(section.code):
        problems.append("code has no default export")
    if linter is not None and not problems:
        for message in linter(section.code):
            if message.severity == "error":
                problems.append(f"{message.line}:{message.column} {message.rule or 'lint'}: {message.message}")
    return problems


def validate_custom_sections(sections: Sequence[Any], linter: Linter | None = None) -> list[Any]:
    """Drop custom sections that would not compile; other sections pass through untouched.

    Args:
        sections: One page's sections, in order
        linter: Optional source checker run on the code of otherwise valid sections

    Returns:
        The surviving sections, order preserved
    """
    kept: list[Any] = []
    for index, section in enumerate(sections):
        if isinstance(section, CustomSection):
            problems = custom_section_problems(section, linter)
            if problems:
                logger.warning(
                    "Dropping invalid custom section",
                    extra={
                        "index": index,
                        "component_name": section.component_name,
                        "problems": problems,
                    },
                )
                continue
        kept.append(section)
    return kept


__all__ = ["LintMessage", "Linter", "custom_section_problems", "validate_custom_sections"]
