"""Tree-sitter access to story sources: parsing, traversal and literal values."""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

_GRAMMARS = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

_PARSERS: Dict[str, Parser] = {}

TRANSPARENT_TYPES = frozenset(
    {"parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"}
)
FUNCTION_TYPES = frozenset(
    {
        "arrow_function",
        "function",
        "function_expression",
        "function_declaration",
        "generator_function",
        "generator_function_declaration",
        "method_definition",
    }
)
JSX_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})

_ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------
def language_for(path: str) -> str:
    """Plain TypeScript for ``.ts`` sources; every other story source may carry JSX."""
    return "typescript" if path.lower().endswith((".ts", ".mts", ".cts")) else "tsx"


def get_parser(language: str) -> Parser:
    parser = _PARSERS.get(language)
    if parser is None:
        parser = Parser(Language(_GRAMMARS[language]()))
        _PARSERS[language] = parser
    return parser


def parse_program(text: str, language: str = "tsx") -> Node:
    return get_parser(language).parse(text.encode("utf-8")).root_node


def parse_expression(text: str) -> Optional[Node]:
    """Parse a standalone expression snippet such as ``(args) => <b/>`` or ``<Meta />``."""
    root = parse_program(f"(\n{text}\n);", "tsx")
    statement = first_named(root)
    if statement is None or statement.type != "expression_statement":
        return None
    return unwrap(first_named(statement))


def parse_jsx(text: str) -> Optional[Node]:
    """Parse JSX children by wrapping them in a fragment; returns the fragment node."""
    expression = parse_expression(f"<>\n{text}\n</>")
    if expression is None or expression.type not in JSX_ELEMENT_TYPES:
        return None
    return expression


# ----------------------------------------------------------------------
# Traversal
# ----------------------------------------------------------------------
def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def named(node: Optional[Node]) -> List[Node]:
    """Named children without comments."""
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def first_named(node: Optional[Node]) -> Optional[Node]:
    children = named(node)
    return children[0] if children else None


def unwrap(node: Optional[Node]) -> Optional[Node]:
    """Strip parentheses and type-only wrappers (``as``, ``satisfies``, ``!``, ``<T>x``)."""
    while node is not None:
        if node.type in TRANSPARENT_TYPES:
            node = first_named(node)
        elif node.type == "type_assertion":
            children = named(node)
            node = children[-1] if children else None
        else:
            break
    return node


def walk(node: Node, prune: Optional[Callable[[Node], bool]] = None) -> Iterator[Node]:
    """Pre-order traversal of named nodes, comments included.

    ``prune`` is an optional predicate; nodes it accepts are yielded but not
    descended into.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if prune is not None and prune(current):
            continue
        stack.extend(reversed(current.named_children))


def expression_of(container: Optional[Node]) -> Optional[Node]:
    """The expression held by ``{...}`` JSX containers and ``${...}`` substitutions."""
    if container is None:
        return None
    if container.type in ("jsx_expression", "template_substitution"):
        return unwrap(first_named(container))
    return unwrap(container)


# ----------------------------------------------------------------------
# Literals
# ----------------------------------------------------------------------
def string_value(node: Optional[Node]) -> Optional[str]:
    """Decoded content of a string literal or a template without substitutions."""
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "string":
        return _unescape(node_text(node)[1:-1])
    if node.type == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return None
        return _unescape(node_text(node)[1:-1])
    return None


def literal_value(node: Optional[Node]) -> Tuple[bool, Any]:
    """Evaluate a scalar literal; returns ``(matched, value)``."""
    node = unwrap(node)
    if node is None:
        return False, None
    text = string_value(node)
    if text is not None:
        return True, text
    if node.type == "true":
        return True, True
    if node.type == "false":
        return True, False
    if node.type == "number":
        return _number(node_text(node))
    if node.type == "unary_expression":
        operator = node.child_by_field_name("operator")
        argument = unwrap(node.child_by_field_name("argument"))
        if node_text(operator) == "-" and argument is not None and argument.type == "number":
            matched, value = _number(node_text(argument))
            return (True, -value) if matched else (False, None)
    return False, None


def template_parts(node: Node) -> Iterator[Union[str, Optional[Node]]]:
    """Split a template literal into decoded text chunks and ``${...}`` expressions."""
    source = node.text or b""
    base = node.start_byte
    cursor = base + 1
    for child in node.named_children:
        if child.type != "template_substitution":
            continue
        yield _unescape(source[cursor - base : child.start_byte - base].decode("utf-8", errors="replace"))
        yield expression_of(child)
        cursor = child.end_byte
    yield _unescape(source[cursor - base : len(source) - 1].decode("utf-8", errors="replace"))


def property_name(key: Optional[Node]) -> Optional[str]:
    if key is None:
        return None
    if key.type in ("property_identifier", "identifier", "private_property_identifier", "number"):
        return node_text(key)
    return string_value(key)


def object_entries(node: Optional[Node]) -> Iterator[Tuple[str, Node]]:
    """Yield ``(key, value)`` for the entries of an object literal; spreads are skipped."""
    node = unwrap(node)
    if node is None or node.type != "object":
        return
    for child in named(node):
        if child.type == "pair":
            key = property_name(child.child_by_field_name("key"))
            value = child.child_by_field_name("value")
            if key is not None and value is not None:
                yield key, value
        elif child.type == "method_definition":
            key = property_name(child.child_by_field_name("name"))
            if key is not None:
                yield key, child
        elif child.type == "shorthand_property_identifier":
            yield node_text(child), child


def object_get(node: Optional[Node], key: str) -> Optional[Node]:
    for name, value in object_entries(node):
        if name == key:
            return unwrap(value) if value.type != "method_definition" else value
    return None


def scalar_object(node: Optional[Node]) -> Dict[str, Any]:
    """Scalar-valued entries of an object literal."""
    values: Dict[str, Any] = {}
    for key, value in object_entries(node):
        matched, literal = literal_value(value)
        if matched:
            values[key] = literal
    return values


def string_array(node: Optional[Node]) -> List[str]:
    node = unwrap(node)
    if node is None or node.type != "array":
        return []
    items: List[str] = []
    for element in named(node):
        matched, value = literal_value(element)
        if matched and not isinstance(value, bool):
            items.append(str(value))
    return items


def jsx_attributes(element: Node) -> List[Tuple[str, Optional[Node]]]:
    """``(name, raw value)`` pairs of a JSX element's attributes, spreads excluded."""
    opening = element
    if element.type != "jsx_self_closing_element":
        opening = next((child for child in element.named_children if child.type == "jsx_opening_element"), None)
    if opening is None:
        return []
    attributes: List[Tuple[str, Optional[Node]]] = []
    for attribute in opening.named_children:
        if attribute.type != "jsx_attribute":
            continue
        parts = named(attribute)
        if parts:
            attributes.append((node_text(parts[0]), parts[1] if len(parts) > 1 else None))
    return attributes


def _number(raw: str) -> Tuple[bool, Any]:
    raw = raw.replace("_", "")
    try:
        return True, int(raw, 0)
    except ValueError:
        pass
    try:
        return True, float(raw)
    except ValueError:
        return False, None


def _unescape(text: str) -> str:
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES.get(match.group(1), match.group(1)), text)


__all__ = [
    "FUNCTION_TYPES",
    "JSX_ELEMENT_TYPES",
    "expression_of",
    "first_named",
    "get_parser",
    "jsx_attributes",
    "language_for",
    "literal_value",
    "named",
    "node_text",
    "object_entries",
    "object_get",
    "parse_expression",
    "parse_jsx",
    "parse_program",
    "property_name",
    "scalar_object",
    "string_array",
    "string_value",
    "template_parts",
    "unwrap",
    "walk",
]
