"""Design-token extraction from stylesheets and flat token JSON."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import tinycss2

from ..config import DEFAULT_NAMESPACE
from ..logging import get_logger
from ..models import Token
from .constants import (
    CATEGORY_DESCRIPTIONS,
    CATEGORY_RULES,
    COLOR_WORD_PATTERN,
    DEFAULT_DESCRIPTION,
    SIZE_STEP_PATTERN,
    UTILITY_CLASS_PATTERNS,
)

_LOGGER = get_logger("parsers.tokens")

_VALUE_COMMENT_PATTERN = re.compile(r"^([^/]+)/\*\s*(.+?)\s*\*/$", re.DOTALL)
_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)
_UPPER_PATTERN = re.compile(r"([A-Z])")
_LETTER_DIGIT_PATTERN = re.compile(r"(?<=[A-Za-z])(?=\d)")


def categorize_token(name: str) -> str:
    """Classify a token name; the first matching rule wins."""
    lowered = name.lower()
    for category, terms in CATEGORY_RULES:
        if any(term in lowered for term in terms):
            return category
        if category == "color" and "text" in lowered and COLOR_WORD_PATTERN.search(lowered):
            return "color"
        if category == "spacing" and "size" in lowered and SIZE_STEP_PATTERN.search(lowered):
            return "spacing"
    return "other"


def describe_token(name: str, value: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    """Synthesize a human-readable description from the token's category."""
    label = name.replace(f"--{namespace}-", "", 1).replace("-", " ")
    template = CATEGORY_DESCRIPTIONS.get(categorize_token(name), DEFAULT_DESCRIPTION)
    return template.format(label=label, value=value)


def to_custom_property(key: str) -> str:
    """Convert a camelCase token key (``MadeColorPrimary500``) to ``--made-color-primary-500``."""
    if key.startswith("--"):
        return key
    dashed = _UPPER_PATTERN.sub(r"-\1", key)
    dashed = _LETTER_DIGIT_PATTERN.sub("-", dashed)
    return "--" + dashed.lower().lstrip("-")


def is_utility_class(name: str) -> bool:
    return any(pattern.search(name) for pattern in UTILITY_CLASS_PATTERNS)


class TokenParser:
    """Accumulates tokens and utility classes across any number of sources.

    Re-parsing a token whose name is already known is a no-op, so several
    stylesheets and token maps can be merged without duplicates.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace
        self._prefix = f"--{namespace}-"
        self._tokens: Dict[str, Token] = {}
        self._utility_classes: set[str] = set()

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------
    def parse_css_file(self, path: Path) -> List[Token]:
        """Parse custom properties from a stylesheet; a missing file raises."""
        text = Path(path).read_text(encoding="utf-8")
        added = self.parse_css(text)
        _LOGGER.info("Parsed %d CSS variables from %s", len(added), path)
        return added

    def parse_css(self, text: str) -> List[Token]:
        added: List[Token] = []
        stylesheet = tinycss2.parse_stylesheet(text, skip_comments=False)
        for prelude, declarations in _iter_style_rules(stylesheet):
            if ":root" not in _selectors(prelude):
                continue
            for declaration in declarations:
                if not declaration.name.startswith(self._prefix):
                    continue
                token = self._make_token(declaration.name, tinycss2.serialize(declaration.value))
                if token is not None and self._add(token):
                    added.append(token)
        return added

    def parse_json_file(self, path: Path) -> List[Token]:
        """Parse a flat ``{camelCaseKey: "value"}`` token map; a missing file raises."""
        text = Path(path).read_text(encoding="utf-8")
        added = self.parse_json(text, source=str(path))
        _LOGGER.info("Parsed %d tokens from JSON file %s", len(added), path)
        return added

    def parse_json(self, text: str, *, source: str = "<json>") -> List[Token]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            _LOGGER.warning("Ignoring malformed token JSON %s: %s", source, exc)
            return []
        if not isinstance(data, dict):
            _LOGGER.warning("Token JSON %s is not a flat mapping; skipping", source)
            return []

        added: List[Token] = []
        for key, value in data.items():
            if not isinstance(value, str):
                continue
            name = to_custom_property(str(key))
            token = Token(
                name=name,
                value=value,
                category=categorize_token(name),
                description=describe_token(name, value, self.namespace),
            )
            if self._add(token):
                added.append(token)
        return added

    def parse_utility_file(self, path: Path) -> List[str]:
        """Collect design-system classes from a utility stylesheet; a missing file raises."""
        text = Path(path).read_text(encoding="utf-8")
        found = self.parse_utility_css(text)
        _LOGGER.info("Parsed %d utility classes from %s", len(found), path)
        return found

    def parse_utility_css(self, text: str) -> List[str]:
        found: set[str] = set()
        for prelude, _ in _iter_style_rules(tinycss2.parse_stylesheet(text)):
            for name in _selector_classes(prelude):
                if self.is_design_system_class(name):
                    found.add(name)
        self._utility_classes.update(found)
        return sorted(found)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def tokens(self) -> List[Token]:
        return list(self._tokens.values())

    @property
    def utility_classes(self) -> List[str]:
        return sorted(self._utility_classes)

    def tokens_by_category(self, category: str) -> List[Token]:
        return [token for token in self._tokens.values() if token.category == category]

    def find_tokens(self, pattern: str | re.Pattern[str]) -> List[Token]:
        """Return tokens whose name or value matches ``pattern`` (case-insensitive for strings)."""
        regex = re.compile(pattern, re.IGNORECASE) if isinstance(pattern, str) else pattern
        return [
            token
            for token in self._tokens.values()
            if regex.search(token.name) or regex.search(token.value)
        ]

    def is_design_system_class(self, name: str) -> bool:
        return (
            name in self._utility_classes
            or name.startswith(f"{self.namespace}-")
            or is_utility_class(name)
        )

    def clear(self) -> None:
        self._tokens.clear()
        self._utility_classes.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _add(self, token: Token) -> bool:
        if token.name in self._tokens:
            return False
        self._tokens[token.name] = token
        return True

    def _make_token(self, name: str, raw_value: str) -> Optional[Token]:
        raw_value = raw_value.strip()
        match = _VALUE_COMMENT_PATTERN.match(raw_value)
        if match:
            value = match.group(1).strip()
            description = match.group(2).strip()
        else:
            value = _COMMENT_PATTERN.sub("", raw_value).strip()
            description = describe_token(name, value, self.namespace)
        if not value:
            return None
        return Token(name=name, value=value, category=categorize_token(name), description=description)


def _iter_style_rules(nodes: Iterable[Any], nested: bool = False) -> Iterator[Tuple[Any, List[Any]]]:
    """Yield ``(prelude tokens, declarations)`` for every style rule, at-rules walked.

    Declarations of an at-rule nested inside a style rule are not attributed
    to the enclosing selector.
    """
    for node in nodes:
        if node.type == "qualified-rule":
            body = tinycss2.parse_blocks_contents(node.content) if node.content else []
            yield node.prelude, [item for item in body if item.type == "declaration"]
            yield from _iter_style_rules(body, nested=True)
        elif node.type == "at-rule" and node.content is not None:
            if nested:
                children = tinycss2.parse_blocks_contents(node.content)
            else:
                children = tinycss2.parse_rule_list(node.content)
            yield from _iter_style_rules(children, nested)


def _selectors(prelude: List[Any]) -> List[str]:
    text = tinycss2.serialize([token for token in prelude if token.type != "comment"])
    return [selector.strip() for selector in text.split(",") if selector.strip()]


def _selector_classes(prelude: Iterable[Any]) -> Iterator[str]:
    """Class names in a selector: an ident directly preceded by a ``.`` delimiter."""
    previous = None
    for token in prelude:
        if token.type == "ident" and previous is not None and previous.type == "literal" and previous.value == ".":
            yield token.value
        elif token.type in ("function", "() block", "[] block"):
            yield from _selector_classes(token.arguments if token.type == "function" else token.content)
        previous = token


__all__ = [
    "TokenParser",
    "categorize_token",
    "describe_token",
    "is_utility_class",
    "to_custom_property",
]
