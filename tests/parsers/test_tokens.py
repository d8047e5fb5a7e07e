"""Tests for the design-token parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from madeindex.parsers.tokens import (
    TokenParser,
    categorize_token,
    describe_token,
    to_custom_property,
)
from tests._fixtures import samples


def test_root_declaration_produces_color_token() -> None:
    parser = TokenParser()
    tokens = parser.parse_css(":root { --made-color-primary-500: #FF5F00; }")

    assert len(tokens) == 1
    token = tokens[0]
    assert token.name == "--made-color-primary-500"
    assert token.category == "color"
    assert token.value == "#FF5F00"
    assert token.description == "color primary 500 color token (#FF5F00)"


def test_only_root_selectors_and_namespaced_properties_are_read() -> None:
    parser = TokenParser()
    parser.parse_css(samples.TOKEN_CSS)

    names = [token.name for token in parser.tokens]
    assert "--unrelated-var" not in names
    assert names == [
        "--made-color-primary-500",
        "--made-space-4",
        "--made-font-size-base",
        "--made-radius-md",
    ]
    # The .theme-dark override is not a :root rule.
    assert parser.tokens[0].value == "#FF5F00"


def test_trailing_comment_overrides_description() -> None:
    parser = TokenParser()
    parser.parse_css(samples.TOKEN_CSS)

    spacing = parser.tokens_by_category("spacing")
    assert [token.name for token in spacing] == ["--made-space-4"]
    assert spacing[0].value == "1rem"
    assert spacing[0].description == "Default gap"


def test_nested_at_rules_are_walked() -> None:
    css = """
    @media (prefers-color-scheme: dark) {
      :root { --made-color-bg: #111; }
    }
    @supports (display: grid) {
      :root, .scoped { --made-breakpoint-md: 768px; }
    }
    """
    parser = TokenParser()
    parser.parse_css(css)

    assert {token.name: token.category for token in parser.tokens} == {
        "--made-color-bg": "color",
        "--made-breakpoint-md": "breakpoint",
    }


def test_unterminated_block_keeps_earlier_tokens() -> None:
    parser = TokenParser()
    parser.parse_css(":root { --made-space-2: 0.5rem; }\n:root { --made-space-3: 0.75rem;")

    assert [token.name for token in parser.tokens] == ["--made-space-2", "--made-space-3"]


def test_first_declaration_wins_across_sources() -> None:
    parser = TokenParser()
    parser.parse_css(samples.TOKEN_CSS)
    added = parser.parse_json(samples.TOKEN_JSON)

    assert [token.name for token in added] == ["--made-color-neutral-100", "--made-duration-fast"]
    names = [token.name for token in parser.tokens]
    assert len(names) == len(set(names))
    primary = next(token for token in parser.tokens if token.name == "--made-color-primary-500")
    assert primary.value == "#FF5F00"


def test_json_keys_are_converted_to_custom_properties() -> None:
    parser = TokenParser()
    tokens = parser.parse_json('{"MadeDurationFast": "150ms", "nested": {"skip": true}}')

    assert [(token.name, token.category) for token in tokens] == [("--made-duration-fast", "time")]
    assert tokens[0].description == "duration fast timing value (150ms)"


def test_malformed_json_yields_nothing() -> None:
    parser = TokenParser()

    assert parser.parse_json("{not json") == []
    assert parser.parse_json("[1, 2, 3]") == []
    assert parser.tokens == []


def test_missing_file_raises(tmp_path: Path) -> None:
    parser = TokenParser()

    with pytest.raises(FileNotFoundError):
        parser.parse_css_file(tmp_path / "missing.css")


def test_utility_classes_are_collected() -> None:
    parser = TokenParser()
    found = parser.parse_utility_css(samples.UTILITY_CSS)

    assert found == ["made-btn", "made-btn-primary", "made-btn-secondary", "made-card", "made-grid"]
    assert parser.utility_classes == found
    assert parser.is_design_system_class("made-anything")
    assert parser.is_design_system_class("p-4")
    assert not parser.is_design_system_class("legacy-thing")


def test_utility_classes_come_from_selectors_only() -> None:
    css = """
    /* .made-commented { } */
    .made-stack > :not(.made-hidden):hover { margin-top: 1.5rem; }
    .made-row .made-col[data-x=".made-fake"] { flex: 0.5; }
    @keyframes made-spin { 0% { opacity: .5; } }
    """
    parser = TokenParser()

    assert parser.parse_utility_css(css) == ["made-col", "made-hidden", "made-row", "made-stack"]


def test_tokens_inside_layers_and_nested_at_rules() -> None:
    css = """
    @layer base {
      :root { --made-color-accent: #0af; /* Accent */ }
    }
    @media print { @supports (color: red) { :root { --made-space-9: 9px; } } }
    :root:hover { --made-space-1: 1px; }
    """
    parser = TokenParser()
    parser.parse_css(css)

    assert [token.name for token in parser.tokens] == ["--made-color-accent", "--made-space-9"]
    assert parser.tokens[0].value == "#0af"


def test_find_tokens_matches_name_or_value() -> None:
    parser = TokenParser()
    parser.parse_css(samples.TOKEN_CSS)

    assert [token.name for token in parser.find_tokens("PRIMARY")] == ["--made-color-primary-500"]
    assert [token.name for token in parser.find_tokens(r"^16px$")] == ["--made-font-size-base"]


def test_clear_resets_state() -> None:
    parser = TokenParser()
    parser.parse_css(samples.TOKEN_CSS)
    parser.parse_utility_css(samples.UTILITY_CSS)
    parser.clear()

    assert parser.tokens == []
    assert parser.utility_classes == []


@pytest.mark.parametrize(
    ("name", "category"),
    [
        ("--made-color-primary-500", "color"),
        ("--made-bg-surface", "color"),
        ("--made-text-blue", "color"),
        ("--made-spacing-lg", "spacing"),
        ("--made-size-4", "spacing"),
        ("--made-font-weight-bold", "typography"),
        ("--made-line-height-tight", "typography"),
        ("--made-shadow-sm", "shadow"),
        ("--made-radius-lg", "radius"),
        ("--made-transition-slow", "time"),
        ("--made-z-index-modal", "other"),
        ("--made-breakpoint-lg", "breakpoint"),
        ("--made-opacity-50", "other"),
        # Rule order decides overlapping names.
        ("--made-text-color-spacing-4", "color"),
        ("--made-border-radius-md", "color"),
    ],
)
def test_categorize_token_follows_rule_order(name: str, category: str) -> None:
    assert categorize_token(name) == category


def test_describe_token_uses_namespace() -> None:
    assert describe_token("--acme-shadow-sm", "0 1px 2px", "acme") == "shadow sm shadow effect (0 1px 2px)"
    assert describe_token("--made-opacity-50", "0.5") == "opacity 50 design token (0.5)"


def test_to_custom_property() -> None:
    assert to_custom_property("MadeColorPrimary500") == "--made-color-primary-500"
    assert to_custom_property("madeSpace4") == "--made-space-4"
    assert to_custom_property("--made-kept") == "--made-kept"
