"""Markup helpers: DOM parsing and JSX-to-HTML rendering.

JSX is rendered from tree-sitter nodes. Everything produced here is fed
through BeautifulSoup before use, and fragments without a single element are
dropped.
"""

from __future__ import annotations

import re
from typing import Callable, Iterator, List, Optional

from bs4 import BeautifulSoup, Tag
from tree_sitter import Node

from .constants import (
    JSX_ATTRIBUTE_RENAMES,
    JSX_FRAMEWORK_ATTRIBUTES,
    VOID_ELEMENTS,
)
from .syntax import (
    JSX_ELEMENT_TYPES,
    expression_of,
    jsx_attributes,
    literal_value,
    node_text,
    object_entries,
    parse_jsx,
)

# Receives an expression node from a JSX container and returns its text, if known.
ExpressionResolver = Callable[[Node], Optional[str]]

_EVENT_HANDLER_PATTERN = re.compile(r"^on[A-Z]")
_CAMEL_PATTERN = re.compile(r"([A-Z])")
_CSS_VAR_PATTERN_TEMPLATE = r"var\(\s*(--{ns}-[\w-]+)"
_RAW_VAR_PATTERN_TEMPLATE = r"--{ns}-[\w-]+"
_MARKUP_PATTERN = re.compile(r"<[A-Za-z][^>]*>")
_JSX_HINT_PATTERN = re.compile(r"<[A-Z][^>]*>|className=|\w=\{")


# ----------------------------------------------------------------------
# DOM helpers
# ----------------------------------------------------------------------
def parse_fragment(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def first_element(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.find(True)


def iter_elements(soup: BeautifulSoup) -> Iterator[Tag]:
    yield from soup.find_all(True)


def element_classes(element: Tag) -> List[str]:
    value = element.get("class")
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split()
    return [item.strip() for item in value if item and item.strip()]


def normalize_fragment(html: str) -> Optional[str]:
    """Return the re-serialized markup, or None when it contains no element."""
    soup = parse_fragment(html)
    if first_element(soup) is None:
        return None
    return str(soup).strip()


def looks_like_markup(code: str) -> bool:
    return bool(_MARKUP_PATTERN.search(code)) and "React.createElement" not in code


def looks_like_jsx(code: str) -> bool:
    return bool(_JSX_HINT_PATTERN.search(code))


def css_vars_in_markup(html: str, namespace: str) -> List[str]:
    """Namespaced custom properties referenced by ``var()`` in styles or as raw text."""
    found: set[str] = set()
    var_pattern = re.compile(_CSS_VAR_PATTERN_TEMPLATE.format(ns=re.escape(namespace)))
    for element in iter_elements(parse_fragment(html)):
        style = element.get("style")
        if isinstance(style, str):
            found.update(var_pattern.findall(style))
    found.update(re.findall(_RAW_VAR_PATTERN_TEMPLATE.format(ns=re.escape(namespace)), html))
    return sorted(found)


# ----------------------------------------------------------------------
# JSX rendering
# ----------------------------------------------------------------------
def jsx_to_html(source: str, resolver: Optional[ExpressionResolver] = None) -> str:
    """Convert JSX markup text to plain HTML, inlining literal expressions."""
    fragment = parse_jsx(source)
    if fragment is None:
        return ""
    return render_jsx(fragment, resolver).strip()


def render_jsx(node: Node, resolver: Optional[ExpressionResolver] = None) -> str:
    """Render a JSX element (or fragment) node as HTML.

    Framework-only attributes and event handlers are dropped, ``style`` objects
    become declarations, and expressions that are neither literals nor known to
    ``resolver`` render as nothing.
    """
    if node.type == "jsx_self_closing_element":
        name = node_text(node.child_by_field_name("name"))
        attributes = _render_attributes(node, resolver)
        if name.lower() in VOID_ELEMENTS:
            return f"<{name}{attributes}>"
        return f"<{name}{attributes}></{name}>"

    opening = next((child for child in node.named_children if child.type == "jsx_opening_element"), None)
    children = _render_children(node, resolver)
    name_node = opening.child_by_field_name("name") if opening is not None else None
    if name_node is None:
        return children
    name = node_text(name_node)
    return f"<{name}{_render_attributes(node, resolver)}>{children}</{name}>"


def style_object_to_css(node: Node) -> str:
    """``{ fontSize: '12px', marginTop: 4 }`` becomes ``font-size: 12px; margin-top: 4``."""
    declarations: List[str] = []
    for key, value in object_entries(node):
        matched, literal = literal_value(value)
        if not matched or isinstance(literal, bool):
            continue
        name = _CAMEL_PATTERN.sub(lambda found: "-" + found.group(1).lower(), key)
        declarations.append(f"{name}: {literal}")
    return "; ".join(declarations)


def _render_children(element: Node, resolver: Optional[ExpressionResolver]) -> str:
    source = element.text or b""
    base = element.start_byte
    pieces: List[str] = []
    cursor: Optional[int] = None
    for child in element.named_children:
        if child.type == "jsx_opening_element":
            cursor = child.end_byte
            continue
        if child.type == "jsx_closing_element":
            break
        if cursor is not None:
            # Whitespace between children is not part of any node.
            gap = source[cursor - base : child.start_byte - base].decode("utf-8", errors="replace")
            if not gap.strip():
                pieces.append(gap)
        pieces.append(_render_child(child, resolver))
        cursor = child.end_byte
    closing = next((child for child in element.named_children if child.type == "jsx_closing_element"), None)
    if cursor is not None and closing is not None:
        gap = source[cursor - base : closing.start_byte - base].decode("utf-8", errors="replace")
        if not gap.strip():
            pieces.append(gap)
    return "".join(pieces)


def _render_child(child: Node, resolver: Optional[ExpressionResolver]) -> str:
    if child.type in ("jsx_text", "html_character_reference"):
        return node_text(child)
    if child.type in JSX_ELEMENT_TYPES:
        return render_jsx(child, resolver)
    if child.type != "jsx_expression":
        return ""
    expression = expression_of(child)
    if expression is None or expression.type == "spread_element":
        return ""
    if expression.type in JSX_ELEMENT_TYPES:
        return render_jsx(expression, resolver)
    matched, value = literal_value(expression)
    if matched:
        return "" if isinstance(value, bool) else str(value)
    if resolver is not None:
        return resolver(expression) or ""
    return ""


def _render_attributes(element: Node, resolver: Optional[ExpressionResolver]) -> str:
    return "".join(
        _render_attribute(name, value, resolver) for name, value in jsx_attributes(element)
    )


def _render_attribute(name: str, value: Optional[Node], resolver: Optional[ExpressionResolver]) -> str:
    if name in JSX_FRAMEWORK_ATTRIBUTES or _EVENT_HANDLER_PATTERN.match(name):
        return ""
    html_name = JSX_ATTRIBUTE_RENAMES.get(name, name)
    if value is None:
        return f" {html_name}"
    if value.type == "string":
        return f" {html_name}={node_text(value)}"
    if value.type != "jsx_expression":
        return ""

    expression = expression_of(value)
    if expression is None:
        return ""
    if html_name == "style" and expression.type == "object":
        css = style_object_to_css(expression)
        return f' style="{_escape_attr(css)}"' if css else ""
    matched, literal = literal_value(expression)
    if not matched and resolver is not None:
        resolved = resolver(expression)
        if resolved is not None:
            matched, literal = True, resolved
    if not matched or literal is False or literal is None:
        return ""
    if literal is True:
        return f" {html_name}"
    return f' {html_name}="{_escape_attr(str(literal))}"'


def _escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


__all__ = [
    "ExpressionResolver",
    "css_vars_in_markup",
    "element_classes",
    "first_element",
    "iter_elements",
    "jsx_to_html",
    "looks_like_jsx",
    "looks_like_markup",
    "normalize_fragment",
    "parse_fragment",
    "render_jsx",
    "style_object_to_css",
]
