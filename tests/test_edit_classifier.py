import pytest

from site_compiler.edit_classifier import KeywordEditClassifier


@pytest.fixture
def classifier():
    return KeywordEditClassifier()


def test_logo_request_is_logo_only(classifier, bistro):
    result = classifier.classify_edit("Change the logo to https://cdn.example/logo.png", bistro)

    assert result.type == "logo-only"
    assert result.scope == "narrow"
    assert not result.requires_regeneration
    assert list(result.target_fields) == ["business.logoUrl"]


def test_brand_image_counts_as_logo_not_images(classifier, bistro):
    result = classifier.classify_edit("update the brand image please", bistro)

    assert result.type == "logo-only"


@pytest.mark.parametrize(
    "edit_text",
    [
        "Make it a SaaS landing page",
        "Totally redesign the site",
        "start over from scratch with something completely different",
        "Convert it into a portfolio",
    ],
)
def test_wholesale_changes_regenerate(classifier, bistro, edit_text):
    result = classifier.classify_edit(edit_text, bistro)

    assert result.type == "structure-major"
    assert result.should_regenerate


def test_primary_colour_targets_theme_primary(classifier, bistro):
    result = classifier.classify_edit("Change the primary color to blue", bistro)

    assert result.type == "styling"
    assert list(result.target_fields) == ["theme.primary"]
    assert not result.requires_regeneration


def test_dark_mode_targets_background(classifier, bistro):
    result = classifier.classify_edit("switch to a dark theme", bistro)

    assert result.type == "styling"
    assert "theme.background" in result.target_fields


def test_headline_edit_is_content(classifier, bistro):
    result = classifier.classify_edit('Change the hero headline to "Fresh every night"', bistro)

    assert result.type == "content"
    assert list(result.target_fields) == ["hero.headline"]


def test_adding_a_section_is_minor_structure(classifier, bistro):
    result = classifier.classify_edit("Add a testimonials section", bistro)

    assert result.type == "structure-minor"
    assert result.scope == "moderate"
    assert list(result.target_fields) == ["sections"]


def test_contact_details(classifier, bistro):
    result = classifier.classify_edit("update our phone number to 555-0100 and the email", bistro)

    assert result.type == "contact-info"
    assert set(result.target_fields) == {"business.phone", "business.email"}


def test_navigation_edit(classifier, bistro):
    result = classifier.classify_edit("add a Blog link to the navbar", bistro)

    assert result.type == "navigation"
    assert list(result.target_fields) == ["nav.items"]


def test_many_categories_at_once_regenerate(classifier, bistro):
    result = classifier.classify_edit(
        "change the colors, update the phone number, and swap the gallery photos", bistro
    )

    assert result.type == "structure-major"
    assert result.should_regenerate


def test_unrecognised_request_is_conservative(classifier, bistro):
    result = classifier.classify_edit("hmm not sure, do something", bistro)

    assert result.requires_regeneration
