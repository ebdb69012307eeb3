from datetime import date

import pytest

from site_compiler.errors import ConfigGenerationError
from site_compiler.normalize import is_safe_page_path, normalize_config, normalize_path, normalize_sections


def test_empty_object_gets_every_default():
    config = normalize_config({})

    assert config.template_id == "saas"
    assert config.business.name == "My Business"
    assert config.business.tagline == "Welcome to our website"
    assert (config.theme.primary, config.theme.secondary, config.theme.accent) == ("blue", "indigo", "amber")
    assert config.theme.background == "light"
    assert config.theme.font_style == "modern"
    assert [item.label for item in config.nav.items] == ["Home", "About"]
    assert config.hero.variant == "centered"
    assert config.hero.cta_href == "#"
    assert config.footer.variant == "simple"
    assert config.footer.copyright == f"© {date.today().year} All rights reserved."
    assert list(config.sections) == []
    assert list(config.pages) == []


def test_template_aliases_and_palette_fallbacks():
    config = normalize_config(
        {
            "templateId": "Cafe",
            "theme": {"primary": "chartreuse", "secondary": "teal", "background": "midnight", "fontStyle": "gothic"},
            "hero": {"variant": "parallax", "headline": "Hello"},
            "footer": {"variant": "mega"},
        }
    )

    assert config.template_id == "restaurant"
    assert config.theme.primary == "blue"
    assert config.theme.secondary == "teal"
    assert config.theme.background == "light"
    assert config.theme.font_style == "modern"
    assert config.hero.variant == "centered"
    assert config.hero.headline == "Hello"
    assert config.footer.variant == "simple"


def test_sections_are_filtered_and_variants_coerced():
    sections = normalize_sections(
        [
            {"type": "faq", "variant": "carousel", "items": [{"question": "q", "answer": "a"}]},
            {"type": "faq"},
            {"variant": "cards"},
            "not a section",
            {"type": "custom", "variant": "custom", "componentName": "lowercase", "code": "export default 1"},
            {"type": "custom", "variant": "custom", "componentName": "Ticker", "code": "   "},
            {"type": "custom", "variant": "custom", "componentName": "Ticker", "code": "export default function Ticker() {}"},
            {"type": "stats", "variant": "cards", "items": [{"value": "1"}]},
            {"type": "sparkles", "variant": "x"},
        ]
    )

    assert [section.type for section in sections] == ["faq", "custom", "sparkles"]
    assert sections[0].variant == "accordion"


def test_pages_need_path_title_and_section_list():
    config = normalize_config(
        {
            "pages": [
                {"path": "about/", "title": "About", "sections": []},
                {"path": "/menu", "sections": []},
                {"path": "/team", "title": "Team"},
                {"path": "contact", "title": "Contact", "sections": [{"type": "contact", "variant": "minimal"}]},
            ]
        }
    )

    assert [page.path for page in config.pages] == ["/about", "/contact"]
    assert config.pages[1].sections[0].type == "contact"


def test_partial_nav_and_cta_are_cleaned():
    config = normalize_config(
        {
            "nav": {"items": [{"label": "Home", "href": "/"}, {"label": "Broken"}], "ctaButton": {"label": "Go"}},
            "hero": {"headline": "Hi", "secondaryCta": {"text": "More"}},
        }
    )

    assert [item.label for item in config.nav.items] == ["Home"]
    assert config.nav.cta_button is None
    assert config.hero.secondary_cta is None


def test_non_object_is_rejected():
    with pytest.raises(ConfigGenerationError):
        normalize_config(["not", "a", "config"])


def test_normalize_path():
    assert normalize_path("about/") == "/about"
    assert normalize_path("/a/b/") == "/a/b"
    assert normalize_path(" / ") == "/"
    assert normalize_path("/./a//b") == "/a/b"


def test_pages_with_parent_segments_are_dropped():
    config = normalize_config(
        {
            "pages": [
                {"path": "/../../x", "title": "Escape", "sections": []},
                {"path": "/about", "title": "About", "sections": []},
            ]
        }
    )

    assert [page.path for page in config.pages] == ["/about"]
    assert not is_safe_page_path("/a/../b")
    assert is_safe_page_path("/a/..b")
