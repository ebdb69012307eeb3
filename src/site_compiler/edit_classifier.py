from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from .models.config import WebsiteConfig
from .models.edit import EditClassification, EditScope, EditType

logger = logging.getLogger(__name__)


class EditClassifier(Protocol):
    def classify_edit(self, edit_text: str, config: WebsiteConfig) -> EditClassification:
        """Decide what kind of change an edit request asks for."""


class ConfigMutator(Protocol):
    def mutate_config(
        self,
        config: WebsiteConfig,
        edit_text: str,
        classification: EditClassification,
    ) -> WebsiteConfig:
        """Apply an edit, touching only the classification's target fields."""


@dataclass(frozen=True)
class KeywordRule:
    """One edit category and the phrases that select it."""

    type: EditType
    pattern: re.Pattern[str]
    targets: Mapping[str, Sequence[str]]
    default_targets: Sequence[str]

    def matches(self, text: str) -> bool:
        return bool(self.pattern.search(text))

    def target_fields(self, text: str) -> list[str]:
        found: dict[str, None] = {}
        for phrase, fields in self.targets.items():
            if re.search(phrase, text):
                for name in fields:
                    found.setdefault(name, None)
        return list(found) or list(self.default_targets)


def _rule(type_: EditType, pattern: str, targets: Mapping[str, Sequence[str]], default: Sequence[str]) -> KeywordRule:
    return KeywordRule(type=type_, pattern=re.compile(pattern), targets=targets, default_targets=default)


REGENERATE_RE = re.compile(
    r"\b(?:redesign|start over|from scratch|completely different|brand new site)\b"
    r"|\bmake (?:this|it) (?:a|an|into)\b"
    r"|\b(?:turn|convert) (?:this|it) into\b"
    r"|\bchange (?:the )?template\b"
)

LOGO_RULE = _rule(
    "logo-only",
    r"\blogo\b|\bbrand (?:image|mark|icon)\b",
    {},
    ["business.logoUrl"],
)

# Order is precedence when two categories match one request.
DEFAULT_RULES: Sequence[KeywordRule] = (
    _rule(
        "structure-minor",
        r"\b(?:add|remove|delete|drop|reorder|move|insert)\b.*\bsections?\b",
        {},
        ["sections"],
    ),
    _rule(
        "styling",
        r"\b(?:colou?rs?|fonts?|typography|dark|light|theme|palette|primary|secondary|accent)\b",
        {
            r"\bprimary\b": ["theme.primary"],
            r"\bsecondary\b": ["theme.secondary"],
            r"\baccent\b": ["theme.accent"],
            r"\b(?:dark|light)\b": ["theme.background"],
            r"\b(?:fonts?|typography)\b": ["theme.fontStyle"],
        },
        ["theme.primary", "theme.secondary", "theme.accent"],
    ),
    _rule(
        "contact-info",
        r"\b(?:phone|telephone|e-?mail|address|hours|opening times)\b",
        {
            r"\b(?:phone|telephone)\b": ["business.phone"],
            r"\be-?mail\b": ["business.email"],
            r"\baddress\b": ["business.address"],
            r"\b(?:hours|opening times)\b": ["business.hours"],
        },
        ["business"],
    ),
    _rule(
        "navigation",
        r"\b(?:nav|navigation|navbar|menu links?|header links?)\b",
        {r"\b(?:button|cta)\b": ["nav.ctaButton"]},
        ["nav.items"],
    ),
    _rule(
        "images",
        r"\b(?:images?|photos?|pictures?|gallery|imagery)\b",
        {r"\bhero\b": ["hero.imageDescription"], r"\bgallery\b": ["sections"]},
        ["hero.imageDescription", "sections"],
    ),
    _rule(
        "content",
        r"\b(?:headline|subheadline|heading|text|copy|tagline|title|description|wording|slogan|button text)\b",
        {
            r"\bheadline\b": ["hero.headline"],
            r"\bsubheadline\b": ["hero.subheadline"],
            r"\btagline\b": ["business.tagline"],
            r"\bdescription\b": ["business.description"],
            r"\bbutton text\b": ["hero.ctaText"],
        },
        ["hero", "sections"],
    ),
)


class KeywordEditClassifier:
    """Deterministic classifier for running without a language model.

    Wholesale re-theming phrases and requests that touch three or more
    categories at once route to regeneration; everything else maps to the
    highest-precedence matching category.
    """

    def __init__(
        self,
        *,
        rules: Sequence[KeywordRule] = DEFAULT_RULES,
        regenerate_pattern: re.Pattern[str] = REGENERATE_RE,
        max_categories: int = 2,
    ) -> None:
        self._rules = tuple(rules)
        self._regenerate = regenerate_pattern
        self._max_categories = max_categories

    def classify_edit(self, edit_text: str, config: WebsiteConfig) -> EditClassification:
        text = edit_text.lower()

        if self._regenerate.search(text):
            return self._log(EditClassification.ambiguous("request replaces the whole site"))

        logo = LOGO_RULE.matches(text)
        matched = [rule for rule in self._rules if rule.matches(text)]
        if logo:
            # "brand image" is the logo, not a content image
            matched = [rule for rule in matched if rule.type != "images"]
            if not matched:
                return self._log(
                    EditClassification(
                        type="logo-only",
                        scope="narrow",
                        should_regenerate=False,
                        target_fields=list(LOGO_RULE.default_targets),
                        reasoning="only the logo is mentioned",
                    )
                )
            matched.append(LOGO_RULE)

        if not matched:
            return self._log(EditClassification.ambiguous("no recognisable edit category"))

        if len(matched) > self._max_categories:
            return self._log(
                EditClassification(
                    type="structure-major",
                    scope="wide",
                    should_regenerate=True,
                    target_fields=[],
                    reasoning=f"{len(matched)} categories touched at once",
                )
            )

        targets: dict[str, None] = {}
        for rule in matched:
            for name in rule.target_fields(text):
                targets.setdefault(name, None)

        primary = matched[0]
        scope: EditScope = "narrow" if len(matched) == 1 else "moderate"
        if primary.type == "structure-minor":
            scope = "moderate"
        return self._log(
            EditClassification(
                type=primary.type,
                scope=scope,
                should_regenerate=False,
                target_fields=list(targets),
                reasoning="matched " + ", ".join(rule.type for rule in matched),
            )
        )

    def _log(self, classification: EditClassification) -> EditClassification:
        logger.info(
            "Classified edit",
            extra={
                "edit_type": classification.type,
                "scope": classification.scope,
                "should_regenerate": classification.should_regenerate,
                "target_fields": list(classification.target_fields),
            },
        )
        return classification


__all__ = [
    "EditClassifier",
    "ConfigMutator",
    "KeywordRule",
    "REGENERATE_RE",
    "LOGO_RULE",
    "DEFAULT_RULES",
    "KeywordEditClassifier",
]
