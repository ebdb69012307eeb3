from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from .models.sections import CustomSection, SectionBase

COMPONENTS_DIR = "app/components"

# Shared chrome already owns these files; a section with the same base name
# is numbered as if the chrome were its first occurrence.
RESERVED_COMPONENT_NAMES = frozenset({"Navbar", "Footer", "Hero"})


@dataclass(frozen=True)
class SectionSlot:
    """A section together with the component name and file it compiles to."""

    section: SectionBase
    name: str
    path: str
    index: int


def to_pascal_case(value: str) -> str:
    """Convert ``feature-grid`` style identifiers to ``FeatureGrid``."""
    words = [word for word in re.split(r"[^0-9A-Za-z]+", value) if word]
    return "".join(word[:1].upper() + word[1:] for word in words)


def base_component_name(section: SectionBase) -> str:
    if isinstance(section, CustomSection) and section.component_name:
        return section.component_name
    return to_pascal_case(section.type)


def component_path(name: str) -> str:
    return f"{COMPONENTS_DIR}/{name}.tsx"


def assign_component_names(
    sections: Sequence[SectionBase],
    *,
    reserved: Iterable[str] = RESERVED_COMPONENT_NAMES,
) -> list[SectionSlot]:
    """Give every section of one page a unique component name.

    The first occurrence of a base name keeps it; later occurrences on the
    same page get ``Base2``, ``Base3`` and so on. Counting restarts for each
    page, which is what lets a sub-page's first ``faq`` map back onto the
    homepage's ``Faq`` file.

    Args:
        sections: Supported sections of a single page, in display order
        reserved: Names already taken by shared chrome

    Returns:
        One slot per section, in the same order
    """
    used = set(reserved)
    counts: dict[str, int] = {}
    slots: list[SectionSlot] = []

    for index, section in enumerate(sections):
        base = base_component_name(section)
        occurrence = counts.get(base, 0) + 1
        name = base if occurrence == 1 else f"{base}{occurrence}"
        # A custom "Faq2" and a second built-in faq must not share a file.
        while name in used:
            occurrence += 1
            name = f"{base}{occurrence}"
        counts[base] = occurrence
        used.add(name)
        slots.append(SectionSlot(section=section, name=name, path=component_path(name), index=index))

    return slots


__all__ = [
    "COMPONENTS_DIR",
    "RESERVED_COMPONENT_NAMES",
    "SectionSlot",
    "to_pascal_case",
    "base_component_name",
    "component_path",
    "assign_component_names",
]
