"""Constants shared by the token and story parsers."""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, Pattern, Tuple

# Ordered (category, terms) rules. The first rule that matches wins; the
# colour rule has an extra text-with-colour clause handled in the parser.
CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("color", ("color", "bg", "background", "border")),
    ("spacing", ("space", "spacing", "padding", "margin", "gap")),
    ("typography", ("font", "text", "line-height", "letter-spacing", "weight")),
    ("shadow", ("shadow", "drop-shadow", "elevation")),
    ("radius", ("radius", "border-radius", "rounded")),
    ("time", ("time", "duration", "transition", "animation", "slow", "fast", "moderate")),
    ("other", ("z-index", "zindex", "layer")),
    ("breakpoint", ("breakpoint", "screen", "container", "viewport")),
)

COLOR_WORD_PATTERN = re.compile(r"red|blue|green|yellow|orange|purple|gray|grey|white|black|teal|gold")
SIZE_STEP_PATTERN = re.compile(r"\d+(-x)?$")

CATEGORY_DESCRIPTIONS: Dict[str, str] = {
    "color": "{label} color token ({value})",
    "spacing": "{label} spacing value ({value})",
    "typography": "{label} typography setting ({value})",
    "shadow": "{label} shadow effect ({value})",
    "radius": "{label} border radius ({value})",
    "breakpoint": "{label} responsive breakpoint ({value})",
    "time": "{label} timing value ({value})",
}
DEFAULT_DESCRIPTION = "{label} design token ({value})"

# Utility class catalogue recognised in addition to namespace-prefixed classes.
UTILITY_CLASS_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"^m[tlbr]?-\d+$",
        r"^p[tlbr]?-\d+$",
        r"^text-(left|center|right|justify)$",
        r"^text-(xs|sm|base|lg|xl|\d*xl)$",
        r"^text-(primary|secondary|white|black)$",
        r"^bg-\w+$",
        r"^border-\w+$",
        r"^flex",
        r"^grid",
        r"^w-\w+$",
        r"^h-\w+$",
        r"^rounded",
        r"^shadow",
    )
)


STORY_SUFFIXES: Tuple[str, ...] = (".stories", ".story")
STORY_EXTENSIONS: Tuple[str, ...] = (".js", ".ts", ".jsx", ".tsx", ".mdx")

EXCLUDED_DIRS: FrozenSet[str] = frozenset({"node_modules", ".git", ".hg", ".svn"})

# Path segments never turned into component tags.
IGNORED_TAG_SEGMENTS: FrozenSet[str] = frozenset({"stories", "src"})

# Arguments that carry content rather than a stylistic choice.
CONTENT_ARGS: FrozenSet[str] = frozenset({"children", "text", "label", "title", "placeholder", "id"})

DEFAULT_COMPONENT_DESCRIPTION = "A reusable component from the design system"

A11Y_NOTE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"/\*\s*a11y:\s*(.*?)\s*\*/", re.IGNORECASE | re.DOTALL),
    re.compile(r"//\s*accessibility:\s*(.+)", re.IGNORECASE),
    re.compile(r"//\s*a11y:\s*(.+)", re.IGNORECASE),
    re.compile(r"<!--\s*a11y:\s*(.*?)\s*-->", re.IGNORECASE | re.DOTALL),
)

FENCED_LANGUAGES: Tuple[str, ...] = ("html", "jsx", "tsx", "js", "ts")

# Elements whose visible text is shortened in the derived scaffold.
INTERACTIVE_TEXT_TAGS: Tuple[str, ...] = ("button", "a", "input")
SCAFFOLD_TEXT_LIMIT = 20
EXAMPLE_ID_MARKERS: Tuple[str, ...] = ("example", "demo")

VOID_ELEMENTS: FrozenSet[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

JSX_ATTRIBUTE_RENAMES: Dict[str, str] = {
    "className": "class",
    "htmlFor": "for",
    "tabIndex": "tabindex",
    "readOnly": "readonly",
    "autoFocus": "autofocus",
    "autoComplete": "autocomplete",
    "maxLength": "maxlength",
}

# JSX attributes that only exist for the framework.
JSX_FRAMEWORK_ATTRIBUTES: FrozenSet[str] = frozenset({"key", "ref"})

__all__ = [
    "A11Y_NOTE_PATTERNS",
    "CATEGORY_DESCRIPTIONS",
    "CATEGORY_RULES",
    "COLOR_WORD_PATTERN",
    "CONTENT_ARGS",
    "DEFAULT_COMPONENT_DESCRIPTION",
    "DEFAULT_DESCRIPTION",
    "EXAMPLE_ID_MARKERS",
    "EXCLUDED_DIRS",
    "FENCED_LANGUAGES",
    "IGNORED_TAG_SEGMENTS",
    "INTERACTIVE_TEXT_TAGS",
    "JSX_ATTRIBUTE_RENAMES",
    "JSX_FRAMEWORK_ATTRIBUTES",
    "SCAFFOLD_TEXT_LIMIT",
    "SIZE_STEP_PATTERN",
    "STORY_EXTENSIONS",
    "STORY_SUFFIXES",
    "UTILITY_CLASS_PATTERNS",
    "VOID_ELEMENTS",
]
