import json
from types import SimpleNamespace

import pytest

from site_compiler.errors import ConfigGenerationError, EditMutationError
from site_compiler.models.config import UploadedAsset
from site_compiler.models.edit import EditClassification
from site_compiler.vertex_ai_adapter import VertexAIAdapter


class FakeGemini:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []

    def generate_content(self, prompt, generation_config=None):
        self.prompts.append(prompt)
        return SimpleNamespace(text=self.responses.pop(0))


def _adapter(*responses):
    model = FakeGemini(*responses)
    return VertexAIAdapter(project_id="demo", model=model), model


def test_generate_config_strips_fences_and_normalizes(bistro_raw):
    adapter, model = _adapter("```json\n" + json.dumps(bistro_raw) + "\n```")

    config = adapter.generate_config("a french bistro")

    assert config.business.name == bistro_raw["business"]["name"]
    assert "a french bistro" in model.prompts[0]


def test_uploaded_logo_becomes_the_logo_url(bistro_raw):
    adapter, model = _adapter(json.dumps(bistro_raw))
    images = [UploadedAsset(name="our-logo.svg", url="https://cdn.example/logo.svg")]

    config = adapter.generate_config("a bistro", images)

    assert config.business.logo_url == "https://cdn.example/logo.svg"
    assert "uploaded 1 image(s)" in model.prompts[0]


def test_unparseable_config_is_a_generation_error():
    adapter, _ = _adapter("Sorry, I cannot help with that.")

    with pytest.raises(ConfigGenerationError):
        adapter.generate_config("a bistro")


def test_classify_edit_reads_camel_case_fields(bistro):
    adapter, model = _adapter(
        json.dumps(
            {
                "type": "contact-info",
                "scope": "narrow",
                "shouldRegenerate": False,
                "targetFields": ["business.phone"],
                "reasoning": "phone change",
            }
        )
    )

    classification = adapter.classify_edit("Our new number is 555-0100", bistro)

    assert classification.type == "contact-info"
    assert list(classification.target_fields) == ["business.phone"]
    assert "555-0100" in model.prompts[0]


@pytest.mark.parametrize("text", ["not json", "[1, 2]", json.dumps({"type": "teleport"})])
def test_unreadable_classification_regenerates(bistro, text):
    adapter, _ = _adapter(text)

    classification = adapter.classify_edit("do something", bistro)

    assert classification.requires_regeneration
    assert classification.type == "structure-major"


def test_mutate_config_returns_a_validated_config(bistro):
    raw = bistro.to_ir()
    raw["business"]["phone"] = "555-0100"
    adapter, model = _adapter(json.dumps(raw))
    classification = EditClassification(type="contact-info", target_fields=["business.phone"])

    mutated = adapter.mutate_config(bistro, "new phone 555-0100", classification)

    assert mutated.business.phone == "555-0100"
    assert "business.phone" in model.prompts[0]


def test_invalid_mutation_raises(bistro):
    raw = bistro.to_ir()
    raw["theme"]["primary"] = "chartreuse"
    adapter, _ = _adapter(json.dumps(raw))
    classification = EditClassification(type="styling", target_fields=["theme.primary"])

    with pytest.raises(EditMutationError):
        adapter.mutate_config(bistro, "make it chartreuse", classification)
