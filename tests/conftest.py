import copy
import json
from pathlib import Path

import pytest

from site_compiler.models.config import WebsiteConfig

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def bistro_raw() -> dict:
    return json.loads((FIXTURES / "bistro.json").read_text(encoding="utf-8"))


@pytest.fixture
def bistro(bistro_raw) -> WebsiteConfig:
    return WebsiteConfig.model_validate(bistro_raw)


@pytest.fixture
def make_config():
    """Build a small config; keyword arguments replace top-level IR keys."""

    def build(**overrides) -> WebsiteConfig:
        raw = {
            "templateId": "saas",
            "business": {"name": "Acme", "tagline": "Tools that work", "description": "We make tools."},
            "hero": {"variant": "minimal", "headline": "Build faster", "ctaText": "Start", "ctaHref": "#pricing"},
            "sections": [],
            "pages": [],
        }
        raw.update(copy.deepcopy(overrides))
        return WebsiteConfig.model_validate(raw)

    return build


class FakeImageBackend:
    """Image backend that returns deterministic URLs and records every call."""

    def __init__(self, fail=(), error=None):
        self.calls = []
        self._fail = set(fail)
        self._error = error

    async def generate_image(self, description):
        self.calls.append(description)
        if self._error is not None:
            raise self._error
        if description in self._fail:
            raise RuntimeError(f"cannot render {description}")
        return f"https://cdn.example/{len(self.calls)}.png"


@pytest.fixture
def fake_backend_factory():
    return FakeImageBackend
