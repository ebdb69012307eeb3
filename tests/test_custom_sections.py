from site_compiler.custom_sections import LintMessage, custom_section_problems, validate_custom_sections
from site_compiler.models.sections import CustomSection, FaqSection

GOOD_CODE = '"use client";\n\nexport default function Ticker() {\n  return <div />;\n}\n'


def test_valid_and_non_custom_sections_pass_through():
    sections = [FaqSection(), CustomSection(component_name="Ticker", code=GOOD_CODE)]

    assert validate_custom_sections(sections) == sections


def test_invalid_custom_sections_are_dropped():
    sections = [
        CustomSection(component_name="Ticker", code="   "),
        CustomSection(component_name="ticker", code=GOOD_CODE),
        CustomSection(component_name="Ticker", code="function Ticker() { return null }"),
        FaqSection(title="kept"),
    ]

    kept = validate_custom_sections(sections)

    assert [section.type for section in kept] == ["faq"]


def test_problems_are_described():
    problems = custom_section_problems(CustomSection(component_name="my-widget", code="const x = 1;"))

    assert len(problems) == 2
    assert "PascalCase" in problems[0]
    assert "default export" in problems[1]


def test_linter_errors_reject_but_warnings_do_not():
    def linter(code):
        messages = [LintMessage(line=1, column=1, severity="warning", rule="no-unused-vars", message="unused")]
        if "eval(" in code:
            messages.append(LintMessage(line=3, column=5, severity="error", rule="no-eval", message="eval is not allowed"))
        return messages

    clean = CustomSection(component_name="Ticker", code=GOOD_CODE)
    evil = CustomSection(component_name="Evil", code="export default function Evil() { eval('1'); return null }")

    assert validate_custom_sections([clean, evil], linter=linter) == [clean]
    assert custom_section_problems(evil, linter) == ["3:5 no-eval: eval is not allowed"]
