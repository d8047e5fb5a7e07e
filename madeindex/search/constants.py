"""Constants for query tokenisation, pattern families and ranking."""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Tuple

STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "the",
        "and",
        "or",
        "but",
        "for",
        "with",
        "a",
        "an",
        "as",
        "at",
        "by",
        "in",
        "of",
        "on",
        "to",
        "create",
        "make",
        "build",
        "generate",
        "show",
        "display",
        "use",
        "using",
        "want",
        "need",
        "component",
        "element",
        "html",
        "css",
        "class",
        "style",
        "design",
        "system",
    }
)

MIN_TERM_LENGTH = 3
FUZZY_THRESHOLD = 0.7
FUZZY_MIN_QUERY_LENGTH = 3
MAX_RESULTS = 50
SIMILARITY_THRESHOLD = 0.3

# Keyword families; a family is detected when any keyword occurs in the query.
UI_PATTERN_KEYWORDS: Dict[str, List[str]] = {
    "button": ["button", "btn", "click", "action", "submit"],
    "card": ["card", "panel", "container", "box"],
    "modal": ["modal", "dialog", "popup", "overlay"],
    "form": ["form", "input", "field", "text", "submit"],
    "navigation": ["nav", "menu", "navbar", "link"],
    "alert": ["alert", "notification", "message", "toast"],
    "grid": ["grid", "layout", "columns", "rows"],
    "table": ["table", "data", "rows", "columns"],
    "tabs": ["tabs", "tab", "switch", "toggle"],
    "accordion": ["accordion", "collapse", "expand", "fold"],
    "dropdown": ["dropdown", "select", "menu", "options"],
    "tooltip": ["tooltip", "popover", "hover", "hint"],
    "badge": ["badge", "label", "tag", "chip"],
    "avatar": ["avatar", "profile", "user", "image"],
    "breadcrumb": ["breadcrumb", "path", "navigation"],
    "pagination": ["pagination", "pager", "pages", "next", "previous"],
    "progress": ["progress", "bar", "loading", "status"],
    "spinner": ["spinner", "loading", "wait", "busy"],
    "carousel": ["carousel", "slider", "gallery", "slideshow"],
    "chart": ["chart", "graph", "data", "visualization"],
    "themeable": ["dark", "theme"],
    "responsive": ["responsive", "mobile"],
    "icon": ["icon", "symbol"],
}

# Query keyword -> tag fragments signalling that element type in example markup.
ELEMENT_PATTERNS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("button", ("<button",)),
    ("form", ("<form", "<input")),
    ("link", ("<a ",)),
    ("image", ("<img",)),
    ("list", ("<ul", "<ol")),
    ("table", ("<table",)),
)

# Weights for sibling-component similarity.
TAG_WEIGHT = 0.4
CLASS_WEIGHT = 0.3
VARIANT_WEIGHT = 0.3

__all__ = [
    "CLASS_WEIGHT",
    "ELEMENT_PATTERNS",
    "FUZZY_MIN_QUERY_LENGTH",
    "FUZZY_THRESHOLD",
    "MAX_RESULTS",
    "MIN_TERM_LENGTH",
    "SIMILARITY_THRESHOLD",
    "STOP_WORDS",
    "TAG_WEIGHT",
    "UI_PATTERN_KEYWORDS",
    "VARIANT_WEIGHT",
]
