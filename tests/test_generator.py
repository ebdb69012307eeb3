import asyncio

import pytest

from site_compiler.edit_classifier import KeywordEditClassifier
from site_compiler.errors import ConfigGenerationError
from site_compiler.field_updaters import KeywordConfigMutator
from site_compiler.generator import SiteGenerator
from site_compiler.models.project import ImageStatus
from site_compiler.normalize import normalize_config


class StubConfigGenerator:
    def __init__(self, raw):
        self.raw = raw
        self.prompts = []

    def generate_config(self, prompt, images=None):
        self.prompts.append(prompt)
        return normalize_config(self.raw)


def _generator(raw, backend=None, **kwargs):
    config_generator = StubConfigGenerator(raw)
    generator = SiteGenerator(
        config_generator=config_generator,
        classifier=KeywordEditClassifier(),
        mutator=KeywordConfigMutator(),
        image_backend=backend,
        **kwargs,
    )
    return generator, config_generator


def test_generate_project_compiles_and_resolves_images(bistro_raw, fake_backend_factory):
    generator, stub = _generator(bistro_raw, fake_backend_factory())
    messages = []

    site = asyncio.run(generator.generate_project("a french bistro", on_progress=messages.append))

    assert stub.prompts == ["a french bistro"]
    assert site.project.images.status is ImageStatus.resolved
    assert "app/menu/page.tsx" in site.project.paths()
    assert not site.should_regenerate
    assert messages[0] == "Generating website configuration..."


def test_invalid_custom_sections_are_removed_before_compiling(bistro_raw):
    bistro_raw["sections"].append(
        {"type": "custom", "variant": "custom", "componentName": "Ticker", "code": "function Ticker() {}"}
    )
    generator, _ = _generator(bistro_raw)

    site = asyncio.run(generator.generate_project("bistro"))

    assert "app/components/Ticker.tsx" not in site.project.paths()
    assert all(section.type != "custom" for section in site.config.sections)


def test_surgical_edit_reuses_the_image_cache(bistro_raw, fake_backend_factory):
    generator, _ = _generator(bistro_raw, fake_backend_factory())
    first = asyncio.run(generator.generate_project("bistro"))

    backend = fake_backend_factory()
    editor, stub = _generator(bistro_raw, backend)
    site = asyncio.run(
        editor.edit_project(
            "Change the primary color to blue", first.config, image_cache=first.project.images.cache
        )
    )

    assert not site.should_regenerate
    assert site.classification.type == "styling"
    assert list(site.changed_paths) == ["theme.primary"]
    assert site.config.theme.primary == "blue"
    assert backend.calls == []
    assert stub.prompts == []
    feature_grid = site.project.file("app/components/FeatureGrid.tsx").content
    assert "blue-500" in feature_grid
    assert "amber-" not in feature_grid


def test_major_edit_regenerates_from_the_edit_text(bistro, bistro_raw):
    generator, stub = _generator(bistro_raw)

    site = asyncio.run(generator.edit_project("Make it a SaaS landing page", bistro))

    assert site.should_regenerate
    assert site.classification.type == "structure-major"
    assert stub.prompts == ["Make it a SaaS landing page"]


def test_generation_without_a_config_generator_fails(bistro):
    generator = SiteGenerator(
        config_generator=None,
        classifier=KeywordEditClassifier(),
        mutator=KeywordConfigMutator(),
    )

    assert not generator.can_generate
    with pytest.raises(ConfigGenerationError):
        asyncio.run(generator.generate_project("anything"))
