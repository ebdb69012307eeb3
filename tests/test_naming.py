from site_compiler.models.sections import CustomSection, FaqSection, FeatureGridSection
from site_compiler.naming import assign_component_names, to_pascal_case


def test_to_pascal_case():
    assert to_pascal_case("feature-grid") == "FeatureGrid"
    assert to_pascal_case("cta-banner") == "CtaBanner"
    assert to_pascal_case("faq") == "Faq"


def test_repeated_types_get_numbered_suffixes_in_order():
    sections = [FaqSection(title="A"), FeatureGridSection(), FaqSection(title="B"), FaqSection(title="C")]

    slots = assign_component_names(sections)

    assert [slot.name for slot in slots] == ["Faq", "FeatureGrid", "Faq2", "Faq3"]
    assert slots[2].path == "app/components/Faq2.tsx"
    assert [slot.index for slot in slots] == [0, 1, 2, 3]


def test_custom_sections_use_their_component_name():
    code = "export default function Chart() { return null }"
    sections = [
        CustomSection(component_name="RevenueChart", code=code),
        CustomSection(component_name="RevenueChart", code=code),
    ]

    assert [slot.name for slot in assign_component_names(sections)] == ["RevenueChart", "RevenueChart2"]


def test_names_never_shadow_shared_chrome():
    code = "export default function Hero() { return null }"
    slots = assign_component_names([CustomSection(component_name="Hero", code=code)])

    assert slots[0].name == "Hero2"


def test_custom_name_does_not_collide_with_numbered_builtin():
    code = "export default function Faq2() { return null }"
    sections = [FaqSection(), CustomSection(component_name="Faq2", code=code), FaqSection()]

    names = [slot.name for slot in assign_component_names(sections)]

    assert names[:2] == ["Faq", "Faq2"]
    assert len(set(names)) == 3
