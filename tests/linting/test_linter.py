from __future__ import annotations

from typing import List

import pytest

from madeindex.errors import NotInitializedError
from madeindex.linting import MarkupLinter
from madeindex.models import LintIssue, Token


@pytest.fixture
def linter() -> MarkupLinter:
    instance = MarkupLinter()
    instance.initialize(
        [Token("--made-color-primary-500", "#FF5F00", "color")],
        ["made-btn", "made-btn-primary", "made-card"],
    )
    return instance


def _messages(issues: List[LintIssue], severity: str | None = None) -> List[str]:
    return [issue.message for issue in issues if severity is None or issue.type == severity]


def test_conforming_snippet_has_only_structure_hint(linter: MarkupLinter) -> None:
    issues = linter.lint('<button class="made-btn made-btn-primary" type="button">Save</button>')

    assert [issue.type for issue in issues] == ["info"]
    assert issues[0].message.startswith("Consider using semantic HTML elements")


def test_multiple_top_level_elements_warn_about_structure(linter: MarkupLinter) -> None:
    issues = linter.lint("<p>One</p><p>Two</p>")

    assert _messages(issues, "warning") == [
        "Consider using semantic HTML elements (main, article, section, header, footer, nav, aside)"
    ]
    assert linter.lint("<main><p>One</p><p>Two</p></main>") == []


def test_lint_requires_initialization() -> None:
    with pytest.raises(NotInitializedError):
        MarkupLinter().lint("<p>x</p>")


@pytest.mark.parametrize(
    "html",
    ["", "<div><span>unclosed", '<button class="made-btn" onclick="alert(1)">Go</button>', "<<<>>>"],
)
def test_lint_never_raises(linter: MarkupLinter, html: str) -> None:
    issues = linter.lint(html)

    assert isinstance(issues, list)


def test_empty_markup_has_no_issues(linter: MarkupLinter) -> None:
    assert linter.lint("") == []


def test_token_references_are_checked(linter: MarkupLinter) -> None:
    issues = linter.lint(
        '<div class="made-card" style="color: var(--made-color-nope); '
        'background: var(--brand); border-color: var(--made-color-primary-500)">x</div>'
    )

    assert _messages(issues, "error") == ["Unknown MADE token: --made-color-nope"]
    assert "Non-MADE CSS variable used: --brand" in _messages(issues, "warning")


def test_unknown_namespaced_class_is_reported(linter: MarkupLinter) -> None:
    issues = linter.lint('<div class="made-widget">x</div>')

    assert "Unknown MADE class: made-widget" in _messages(issues, "info")


def test_button_checks(linter: MarkupLinter) -> None:
    unnamed = linter.lint('<button class="made-btn"></button>')
    titled = linter.lint('<button class="made-btn" title="Close"></button>')
    foreign = linter.lint('<button class="primary">Go</button>')

    assert _messages(unnamed, "error") == ["Button needs accessible text content or aria-label"]
    assert _messages(titled, "error") == []
    assert _messages(foreign, "warning") == [
        "Element <button> doesn't use MADE classes",
        "Button element should use MADE button classes",
    ]


def test_focus_outline_removal_is_flagged(linter: MarkupLinter) -> None:
    issues = linter.lint('<button class="made-btn" style="outline: none">Go</button>')

    assert "Interactive element removes focus outline without alternative" in _messages(issues, "warning")


def test_form_controls_need_labels(linter: MarkupLinter) -> None:
    bare = linter.lint('<input class="made-input" type="text">')
    wrapped = linter.lint('<label>Email <input class="made-input"></label>')
    associated = linter.lint('<div><label for="e">Email</label><input id="e" class="made-input"></div>')
    hidden = linter.lint('<input type="hidden" class="made-input">')
    unstyled = linter.lint('<textarea aria-label="Notes"></textarea>')

    assert _messages(bare, "error") == ["Form element <input> needs a label for accessibility"]
    assert _messages(wrapped, "error") == []
    assert _messages(associated, "error") == []
    assert _messages(hidden, "error") == []
    assert "Form element <textarea> could use MADE form classes" in _messages(unstyled, "info")


def test_link_checks(linter: MarkupLinter) -> None:
    issues = linter.lint("<a>click here</a>")

    assert _messages(issues, "warning") == [
        "Link element should have href attribute",
        "Link text is not descriptive enough",
    ]
    assert _messages(linter.lint('<a href="/x"></a>'), "error") == [
        "Link needs accessible text content or aria-label"
    ]


def test_image_checks(linter: MarkupLinter) -> None:
    issues = linter.lint("<img>")

    assert _messages(issues, "error") == [
        "Image element must have src attribute",
        "Image element must have alt attribute for accessibility",
    ]
    assert _messages(linter.lint('<img src="a.png" alt="">'), "error") == []


def test_component_patterns(linter: MarkupLinter) -> None:
    issues = linter.lint('<div><div class="card">x</div><div class="modal">y</div></div>')

    assert "Card-like component could use MADE card classes" in _messages(issues, "info")
    assert _messages(issues, "error") == ["Modal/dialog should have proper ARIA attributes"]
    assert _messages(linter.lint('<div class="modal" role="dialog">y</div>'), "error") == []


def test_heading_levels_must_not_skip(linter: MarkupLinter) -> None:
    issues = linter.lint("<section><h1>A</h1><h3>B</h3></section>")

    assert _messages(issues, "warning") == ["Heading level 3 skips levels (previous was h1)"]


def test_issues_carry_source_position(linter: MarkupLinter) -> None:
    issues = linter.lint('<div>\n  <img src="a.png">\n</div>')

    alt_issue = next(issue for issue in issues if "alt attribute" in issue.message)
    assert alt_issue.line == 2
    assert alt_issue.column == 3
    assert alt_issue.to_dict()["fixSuggestion"].startswith("Add alt attribute")


def test_suggestions_summarise_issues(linter: MarkupLinter) -> None:
    html = '<button class="made-btn"></button>'
    issues = linter.lint(html)

    assert linter.suggestions(html, issues) == [
        "Fix 1 error(s) to ensure MADE compliance",
        "Add ARIA attributes and labels for better accessibility",
        "Consider using MADE button variants: made-btn-primary, made-btn-secondary",
    ]


def test_suggestions_fall_back_to_summaries_when_parsing_fails(
    linter: MarkupLinter, monkeypatch: pytest.MonkeyPatch
) -> None:
    html = '<button class="made-btn"></button>'
    issues = linter.lint(html)

    def explode(_html: str) -> None:
        raise RuntimeError("parser crashed")

    monkeypatch.setattr("madeindex.linting.markup.parse_fragment", explode)

    assert linter.suggestions(html, issues) == [
        "Fix 1 error(s) to ensure MADE compliance",
        "Add ARIA attributes and labels for better accessibility",
    ]


def test_known_classes_include_component_bases() -> None:
    linter = MarkupLinter("acme")
    linter.initialize([])

    issues = linter.lint('<div class="acme-card acme-sparkle">x</div>')

    assert _messages(issues, "info")[-1] == "Unknown ACME class: acme-sparkle"
    assert "Unknown ACME class: acme-card" not in _messages(issues)
