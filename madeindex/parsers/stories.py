"""Component extraction from Storybook story files (CSF and MDX).

CSF modules are read from a tree-sitter syntax tree: the meta object (default
export or ``const meta``), named story exports, ``Template.bind`` stories and
``Story.args = {...}`` assignments. MDX files are scanned for ``<Meta />``,
fenced code blocks and ``<Story>`` elements.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from tree_sitter import Node

from ..config import DEFAULT_NAMESPACE
from ..logging import get_logger
from ..models import Component, Example
from .constants import (
    A11Y_NOTE_PATTERNS,
    CONTENT_ARGS,
    DEFAULT_COMPONENT_DESCRIPTION,
    EXAMPLE_ID_MARKERS,
    EXCLUDED_DIRS,
    FENCED_LANGUAGES,
    IGNORED_TAG_SEGMENTS,
    INTERACTIVE_TEXT_TAGS,
    SCAFFOLD_TEXT_LIMIT,
    STORY_EXTENSIONS,
    STORY_SUFFIXES,
)
from .markup import (
    css_vars_in_markup,
    element_classes,
    iter_elements,
    jsx_to_html,
    looks_like_jsx,
    looks_like_markup,
    normalize_fragment,
    parse_fragment,
    render_jsx,
)
from .syntax import (
    FUNCTION_TYPES,
    JSX_ELEMENT_TYPES,
    expression_of,
    first_named,
    jsx_attributes,
    language_for,
    literal_value,
    named,
    node_text,
    object_entries,
    object_get,
    parse_expression,
    parse_program,
    property_name,
    scalar_object,
    string_array,
    string_value,
    template_parts,
    unwrap,
    walk,
)

_LOGGER = get_logger("parsers.stories")

_MDX_META_PATTERN = re.compile(r"<Meta\b.*?/?>", re.DOTALL)
# Fallbacks for sources whose syntax tree is damaged.
_TITLE_PATTERN = re.compile(r"""title\s*[:=]\s*\{?\s*['"]([^'"]+)['"]""")
_COMPONENT_REF_PATTERN = re.compile(r"component:\s*([A-Z]\w+)")
_TAGS_PATTERN = re.compile(r"tags\s*[:=]\s*\{?\s*\[([^\]]+)\]")
_DESCRIPTION_PATTERN = re.compile(r"""description\s*[:=]\s*\{?\s*['"]([^'"]+)['"]""")
_FENCE_PATTERN = re.compile(
    r"```(" + "|".join(FENCED_LANGUAGES) + r")[^\n]*\n(.*?)\n```", re.DOTALL
)
_STORY_BLOCK_PATTERN = re.compile(r"<Story\b[^>]*?(?<!/)>(.*?)</Story>", re.DOTALL)
_HUMANIZE_PATTERN = re.compile(r"([A-Z])")

_ARG_OBJECTS = ("args", "props")
_EQUALITY_OPERATORS = ("===", "==", "!==", "!=")

# A story source is either a template literal or a JSX element node.
StorySource = Tuple[str, Node]


@dataclass
class _StoryMeta:
    title: Optional[str] = None
    component: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    arg_types: Optional[Node] = None
    args: Dict[str, Any] = field(default_factory=dict)
    render: Optional[StorySource] = None
    damaged: bool = False


@dataclass
class _StoryModule:
    """Top-level bindings of a CSF module."""

    declarations: Dict[str, Node] = field(default_factory=dict)
    exports: List[Tuple[str, Node]] = field(default_factory=list)
    assigned_args: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    default: Optional[Node] = None


def find_story_files(root: Path) -> List[Path]:
    """Return story files under ``root`` sorted by path, skipping vendored trees."""
    found: set[Path] = set()
    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in EXCLUDED_DIRS)
        for filename in filenames:
            if _is_story_file(filename):
                found.add(Path(current) / filename)
    return sorted(found)


def _is_story_file(filename: str) -> bool:
    return any(
        filename.endswith(f"{suffix}{extension}")
        for suffix in STORY_SUFFIXES
        for extension in STORY_EXTENSIONS
    )


class StoryParser:
    """Parses story sources into :class:`Component` records.

    Components accumulate across calls; two files declaring the same component
    name produce two entries.
    """

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace
        self._components: List[Component] = []

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def parse_directory(self, root: Path) -> List[Component]:
        root = Path(root)
        if not root.is_dir():
            _LOGGER.info("Story root %s not found; no components parsed", root)
            return []

        files = find_story_files(root)
        _LOGGER.info("Found %d story files under %s", len(files), root)

        parsed: List[Component] = []
        for path in files:
            try:
                component = self.parse_file(path, root)
            except Exception as exc:
                _LOGGER.warning("Failed to parse story file %s: %s", path, exc)
                continue
            if component is not None:
                parsed.append(component)

        self._components.extend(parsed)
        _LOGGER.info("Parsed %d components from stories", len(parsed))
        return parsed

    def parse_file(self, path: Path, root: Optional[Path] = None) -> Optional[Component]:
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        try:
            relative = path.relative_to(root).as_posix() if root is not None else path.name
        except ValueError:
            relative = path.name
        return self.parse_source(text, relative)

    def parse_source(self, text: str, relative_path: str) -> Optional[Component]:
        """Build a component from one story source, or None when nothing usable is found."""
        is_mdx = relative_path.endswith(".mdx")
        tree: Optional[Node] = None
        if is_mdx:
            meta = _mdx_meta(text)
            examples = self._mdx_examples(text)
        else:
            tree = parse_program(text, language_for(relative_path))
            module = _scan_module(tree)
            meta = _js_meta(module)
            examples = self._js_examples(module, meta)

        title = _declared_title(meta, text)
        if not examples and title is None:
            _LOGGER.debug("No examples or title found in %s", relative_path)
            return None

        arg_types = meta.arg_types if meta is not None else None
        if arg_types is None and tree is not None:
            arg_types = _find_pair_value(tree, "argTypes")
        declared, props = _parse_arg_types(arg_types)
        return Component(
            name=_component_name(title, meta, text, relative_path),
            description=_mdx_description(text, meta) if tree is None else _js_description(tree),
            tags=_extract_tags(text, relative_path, meta),
            variants=_derive_variants(declared, examples),
            props=props,
            a11y_notes=_extract_a11y_notes(text),
            html_scaffold=derive_scaffold(examples),
            css_classes=_collect_classes(examples),
            css_vars_used=self._collect_css_vars(examples),
            examples=examples,
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @property
    def components(self) -> List[Component]:
        return list(self._components)

    def find_component(self, name: str) -> Optional[Component]:
        lowered = name.lower()
        return next((item for item in self._components if item.name.lower() == lowered), None)

    def search_components(self, query: str) -> List[Component]:
        lowered = query.lower()
        return [
            item
            for item in self._components
            if lowered in item.name.lower()
            or lowered in item.description.lower()
            or any(lowered in tag for tag in item.tags)
        ]

    def clear(self) -> None:
        self._components.clear()

    # ------------------------------------------------------------------
    # Example extraction
    # ------------------------------------------------------------------
    def _js_examples(self, module: _StoryModule, meta: Optional[_StoryMeta]) -> List[Example]:
        meta_args = meta.args if meta is not None else {}
        meta_render = meta.render if meta is not None else None

        examples: List[Example] = []
        for name, value in module.exports:
            if not name[:1].isupper():
                continue
            args = dict(meta_args)
            source: Optional[StorySource] = None
            if value.type == "object":
                args.update(scalar_object(object_get(value, "args")))
                source = _function_markup(object_get(value, "render")) or meta_render
            elif value.type == "call_expression":
                source = _bound_template(value, module)
            elif value.type in FUNCTION_TYPES:
                source = _function_markup(value)
            args.update(module.assigned_args.get(name, {}))
            if source is None:
                continue

            html = _render(source, args)
            if html is None:
                _LOGGER.debug("Dropping story %s: no markup produced", name)
                continue
            examples.append(
                Example(
                    title=humanize_story_name(name),
                    html=html,
                    description=f"{name} story variant",
                    props=args,
                )
            )
        return examples

    def _mdx_examples(self, text: str) -> List[Example]:
        examples: List[Example] = []
        counter = 0
        for match in _FENCE_PATTERN.finditer(text):
            code = match.group(2).strip()
            if not looks_like_markup(code):
                continue
            html = _convert_markup(code)
            if html is None:
                continue
            counter += 1
            examples.append(
                Example(
                    title=f"Example {counter}",
                    html=html,
                    description=_nearby_description(text, match.start()),
                )
            )

        for match in _STORY_BLOCK_PATTERN.finditer(text):
            content = match.group(1).strip()
            if not content:
                continue
            if content.startswith("{") and content.endswith("}"):
                source = _function_markup(parse_expression(content[1:-1]))
                html = _render(source, {}) if source is not None else None
            elif looks_like_markup(content):
                html = _convert_markup(content)
            else:
                html = None
            if html is None:
                continue
            examples.append(
                Example(
                    title=f"Story Example {len(examples) + 1}",
                    html=html,
                    description="From Storybook Story component",
                )
            )
        return examples

    def _collect_css_vars(self, examples: List[Example]) -> List[str]:
        found: set[str] = set()
        for example in examples:
            found.update(css_vars_in_markup(example.html, self.namespace))
        return sorted(found)


# ----------------------------------------------------------------------
# Module structure
# ----------------------------------------------------------------------
def _scan_module(tree: Node) -> _StoryModule:
    module = _StoryModule()
    for statement in named(tree):
        exported = False
        if statement.type == "export_statement":
            declaration = statement.child_by_field_name("declaration")
            if any(child.type == "default" for child in statement.children):
                module.default = unwrap(statement.child_by_field_name("value") or declaration)
                continue
            if declaration is None:
                continue
            statement, exported = declaration, True

        if statement.type in ("lexical_declaration", "variable_declaration"):
            for declarator in named(statement):
                if declarator.type != "variable_declarator":
                    continue
                name = declarator.child_by_field_name("name")
                value = unwrap(declarator.child_by_field_name("value"))
                if name is None or name.type != "identifier" or value is None:
                    continue
                module.declarations.setdefault(node_text(name), value)
                if exported:
                    module.exports.append((node_text(name), value))
        elif statement.type in ("function_declaration", "generator_function_declaration"):
            name = node_text(statement.child_by_field_name("name"))
            if name:
                module.declarations.setdefault(name, statement)
                if exported:
                    module.exports.append((name, statement))
        elif statement.type == "expression_statement":
            _record_args_assignment(first_named(statement), module)
    return module


def _record_args_assignment(node: Optional[Node], module: _StoryModule) -> None:
    """``Story.args = {...}`` assigns args to an already exported story."""
    if node is None or node.type != "assignment_expression":
        return
    left = node.child_by_field_name("left")
    if left is None or left.type != "member_expression":
        return
    if node_text(left.child_by_field_name("property")) != "args":
        return
    target = node_text(left.child_by_field_name("object"))
    module.assigned_args.setdefault(target, {}).update(scalar_object(node.child_by_field_name("right")))


def _js_meta(module: _StoryModule) -> Optional[_StoryMeta]:
    candidate = module.default
    if candidate is not None and candidate.type == "identifier":
        candidate = module.declarations.get(node_text(candidate))
    if candidate is None or candidate.type != "object":
        candidate = module.declarations.get("meta")
    if candidate is None or candidate.type != "object":
        return None
    return _read_meta(lambda key: object_get(candidate, key), candidate.has_error)


def _mdx_meta(text: str) -> Optional[_StoryMeta]:
    match = _MDX_META_PATTERN.search(text)
    element = parse_expression(match.group(0)) if match else None
    if element is None or element.type not in JSX_ELEMENT_TYPES:
        return None
    attributes = {name: expression_of(value) for name, value in jsx_attributes(element) if value is not None}
    return _read_meta(attributes.get, element.has_error)


def _read_meta(lookup: Callable[[str], Optional[Node]], damaged: bool) -> _StoryMeta:
    component = lookup("component")
    return _StoryMeta(
        title=string_value(lookup("title")),
        component=node_text(component) if component is not None and component.type == "identifier" else None,
        tags=string_array(lookup("tags")),
        arg_types=lookup("argTypes"),
        args=scalar_object(lookup("args")),
        render=_function_markup(lookup("render")),
        damaged=damaged,
    )


def _find_pair_value(tree: Node, key: str) -> Optional[Node]:
    for node in walk(tree):
        if node.type == "pair" and property_name(node.child_by_field_name("key")) == key:
            return unwrap(node.child_by_field_name("value"))
    return None


# ----------------------------------------------------------------------
# Metadata
# ----------------------------------------------------------------------
def _declared_title(meta: Optional[_StoryMeta], text: str) -> Optional[str]:
    """Last segment of the grouping title."""
    title = meta.title if meta is not None else None
    if title is None and (meta is None or meta.damaged):
        match = _TITLE_PATTERN.search(text)
        title = match.group(1) if match else None
    if not title:
        return None
    segment = title.split("/")[-1].strip()
    return segment or None


def _component_name(title: Optional[str], meta: Optional[_StoryMeta], text: str, relative_path: str) -> str:
    if title:
        return title
    if meta is not None and meta.component:
        return meta.component
    if meta is None:
        match = _COMPONENT_REF_PATTERN.search(text)
        if match:
            return match.group(1)
    return component_name_from_path(relative_path)


def component_name_from_path(relative_path: str) -> str:
    """``button-group.stories.tsx`` becomes ``Button Group``."""
    stem = PurePosixPath(relative_path).name
    stem = stem.rsplit(".", 1)[0] if "." in stem else stem
    for suffix in STORY_SUFFIXES:
        if stem.endswith(suffix):
            stem = stem[: -len(suffix)]
            break
    stem = re.sub(r"[_-]", " ", stem)
    return re.sub(r"\b\w", lambda found: found.group(0).upper(), stem).strip()


def humanize_story_name(name: str) -> str:
    """``PrimaryLarge`` becomes ``Primary Large``."""
    spaced = _HUMANIZE_PATTERN.sub(r" \1", name).strip()
    return spaced[:1].upper() + spaced[1:]


def _is_arg_types_pair(node: Node) -> bool:
    return node.type == "pair" and property_name(node.child_by_field_name("key")) == "argTypes"


def _js_description(tree: Node) -> str:
    """A ``description`` outside ``argTypes``, else the first doc comment."""
    for node in walk(tree, prune=_is_arg_types_pair):
        if node.type != "pair" or property_name(node.child_by_field_name("key")) != "description":
            continue
        value = unwrap(node.child_by_field_name("value"))
        if value is not None and value.type == "object":
            value = object_get(value, "component")
        text = string_value(value)
        if text:
            return text
    for node in walk(tree):
        if node.type == "comment":
            summary = _doc_comment_summary(node_text(node))
            if summary:
                return summary
    return DEFAULT_COMPONENT_DESCRIPTION


def _doc_comment_summary(comment: str) -> Optional[str]:
    if not comment.startswith("/**"):
        return None
    for line in comment[3:].rstrip("/").rstrip("*").splitlines():
        stripped = line.strip().lstrip("*").strip()
        if stripped and not stripped.startswith("@"):
            return stripped
    return None


def _mdx_description(text: str, meta: Optional[_StoryMeta]) -> str:
    searchable = text
    if meta is not None and meta.arg_types is not None:
        searchable = text.replace(node_text(meta.arg_types), "", 1)
    match = _DESCRIPTION_PATTERN.search(searchable)
    if match:
        return match.group(1)
    in_fence = False
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("```"):
            in_fence = not in_fence
            continue
        if in_fence or not stripped:
            continue
        if stripped.startswith(("import ", "export ", "<", "{", "#")):
            continue
        return stripped
    return DEFAULT_COMPONENT_DESCRIPTION


def _extract_tags(text: str, relative_path: str, meta: Optional[_StoryMeta]) -> List[str]:
    tags: List[str] = []
    for part in PurePosixPath(relative_path).parts:
        if part in IGNORED_TAG_SEGMENTS or "." in part:
            continue
        tags.append(part.lower())
    declared = list(meta.tags) if meta is not None else []
    if not declared and (meta is None or meta.damaged):
        match = _TAGS_PATTERN.search(text)
        if match:
            declared = [raw.strip().strip("'\"`") for raw in match.group(1).split(",")]
    tags.extend(tag.lower() for tag in declared if tag)
    return list(dict.fromkeys(tags))


def _extract_a11y_notes(text: str) -> List[str]:
    found: List[Tuple[int, str]] = []
    for pattern in A11Y_NOTE_PATTERNS:
        for match in pattern.finditer(text):
            note = " ".join(match.group(1).split())
            if note:
                found.append((match.start(), note))
    found.sort(key=lambda item: item[0])
    return list(dict.fromkeys(note for _, note in found))


def _parse_arg_types(arg_types: Optional[Node]) -> Tuple[Dict[str, List[str]], Dict[str, Dict[str, Any]]]:
    """Return declared variant options and prop descriptors from ``argTypes``."""
    declared: Dict[str, List[str]] = {}
    props: Dict[str, Dict[str, Any]] = {}
    for name, entry in object_entries(arg_types):
        entry = unwrap(entry)
        if entry is None or entry.type != "object":
            continue
        info: Dict[str, Any] = {}
        control_type: Optional[str] = None
        type_name: Optional[str] = None
        for key, value in object_entries(entry):
            matched, literal = literal_value(value)
            if key == "control":
                control_type = literal if matched and isinstance(literal, str) else _string_field(value, "type")
            elif key == "type":
                type_name = literal if matched and isinstance(literal, str) else _string_field(value, "name")
            elif key == "description" and matched:
                info["description"] = str(literal)
            elif key == "options":
                options = string_array(value)
                if options:
                    info["options"] = options
            elif key == "defaultValue" and matched:
                info["defaultValue"] = literal
        if control_type or type_name:
            info["type"] = control_type or type_name
        if "options" in info:
            declared[name] = list(dict.fromkeys(info["options"]))
        props[name] = info
    return declared, props


def _string_field(node: Optional[Node], key: str) -> Optional[str]:
    value = scalar_object(node).get(key)
    return value if isinstance(value, str) else None


def _derive_variants(declared: Mapping[str, List[str]], examples: List[Example]) -> Dict[str, List[str]]:
    """Merge declared options with observed string args; keep axes with 2+ values."""
    observed: Dict[str, List[str]] = {}
    for example in examples:
        for key, value in (example.props or {}).items():
            if key in CONTENT_ARGS or not isinstance(value, str):
                continue
            values = observed.setdefault(key, [])
            if value not in values:
                values.append(value)

    variants: Dict[str, List[str]] = {}
    axes = list(declared) + [axis for axis in observed if axis not in declared]
    for axis in axes:
        merged = list(dict.fromkeys([*declared.get(axis, []), *observed.get(axis, [])]))
        if len(merged) >= 2:
            variants[axis] = merged
    return variants


# ----------------------------------------------------------------------
# Markup
# ----------------------------------------------------------------------
def derive_scaffold(examples: List[Example]) -> str:
    """Canonical template from the first example; empty when there is none."""
    if not examples:
        return ""
    soup = parse_fragment(examples[0].html)
    for element in iter_elements(soup):
        if element.name in INTERACTIVE_TEXT_TAGS:
            if len(element.get_text().strip()) > SCAFFOLD_TEXT_LIMIT:
                element.string = "..."
        element_id = element.get("id")
        if isinstance(element_id, str) and any(marker in element_id for marker in EXAMPLE_ID_MARKERS):
            del element["id"]
    return str(soup).strip()


def _collect_classes(examples: List[Example]) -> List[str]:
    found: set[str] = set()
    for example in examples:
        for element in iter_elements(parse_fragment(example.html)):
            found.update(element_classes(element))
    return sorted(found)


def _convert_markup(code: str) -> Optional[str]:
    if looks_like_jsx(code):
        code = jsx_to_html(code)
    return normalize_fragment(code)


def _nearby_description(text: str, index: int) -> str:
    before = text[max(0, index - 200) : index]
    for line in reversed(before.split("\n")):
        stripped = line.strip()
        if stripped and not stripped.startswith("```") and not stripped.startswith("#"):
            return stripped
    return ""


# ----------------------------------------------------------------------
# Story sources
# ----------------------------------------------------------------------
def _bound_template(call: Node, module: _StoryModule) -> Optional[StorySource]:
    """``Template.bind({})`` renders through the function bound to ``Template``."""
    callee = unwrap(call.child_by_field_name("function"))
    if callee is None or callee.type != "member_expression":
        return None
    if node_text(callee.child_by_field_name("property")) != "bind":
        return None
    template = module.declarations.get(node_text(callee.child_by_field_name("object")))
    if template is None or template.type not in FUNCTION_TYPES:
        return None
    return _function_markup(template)


def _function_markup(node: Optional[Node]) -> Optional[StorySource]:
    """Markup returned by a render function, or the markup expression itself."""
    node = unwrap(node)
    if node is None:
        return None
    if node.type not in FUNCTION_TYPES:
        return _markup_source(node)
    body = unwrap(node.child_by_field_name("body"))
    if body is None:
        return None
    if body.type != "statement_block":
        return _markup_source(body)
    for child in walk(body, prune=lambda current: current.type in FUNCTION_TYPES):
        if child.type == "return_statement":
            return _markup_source(first_named(child))
    return None


def _markup_source(node: Optional[Node]) -> Optional[StorySource]:
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "template_string":
        return "template", node
    if node.type == "call_expression":
        # Tagged templates such as html`...`.
        arguments = node.child_by_field_name("arguments")
        if arguments is not None and arguments.type == "template_string":
            return "template", arguments
        return None
    if node.type in JSX_ELEMENT_TYPES:
        return "jsx", node
    return None


def _render(source: StorySource, args: Mapping[str, Any]) -> Optional[str]:
    kind, node = source
    if kind == "template":
        html = _interpolate(node, args)
        if looks_like_jsx(html) and "class=" not in html:
            html = jsx_to_html(html)
    else:
        html = render_jsx(node, lambda expression: _evaluate(expression, args))
    return normalize_fragment(html)


def _interpolate(template: Node, args: Mapping[str, Any]) -> str:
    return "".join(
        part if isinstance(part, str) else (_evaluate(part, args) or "")
        for part in template_parts(template)
    )


def _evaluate(node: Optional[Node], args: Mapping[str, Any]) -> Optional[str]:
    """Best-effort evaluation of an interpolated expression against story args."""
    node = unwrap(node)
    if node is None:
        return None
    matched, literal = literal_value(node)
    if matched:
        return _stringify(literal)
    if node.type == "template_string":
        return _interpolate(node, args)

    if node.type == "binary_expression":
        operator = node_text(node.child_by_field_name("operator"))
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if operator in ("||", "??"):
            resolved = _evaluate(left, args)
            return resolved if resolved else _evaluate(right, args)
        if operator == "&&":
            return _evaluate(right, args) if _arg_value(left, args) else ""
        if operator == "+":
            head, tail = _evaluate(left, args), _evaluate(right, args)
            return head + tail if head is not None and tail is not None else None

    if node.type == "ternary_expression":
        condition = _arg_value(node.child_by_field_name("condition"), args)
        branch = node.child_by_field_name("consequence" if condition else "alternative")
        return _evaluate(branch, args) or ""

    value = _arg_value(node, args)
    if value is not None:
        return _stringify(value)
    if "children" in node_text(node):
        return "Button Text"
    return None


def _arg_value(node: Optional[Node], args: Mapping[str, Any]) -> Any:
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "member_expression":
        owner = unwrap(node.child_by_field_name("object"))
        if owner is not None and owner.type == "identifier" and node_text(owner) in _ARG_OBJECTS:
            return args.get(node_text(node.child_by_field_name("property")))
        return None
    if node.type == "identifier":
        return args.get(node_text(node))
    if node.type == "unary_expression" and node_text(node.child_by_field_name("operator")) == "!":
        return not _arg_value(node.child_by_field_name("argument"), args)
    if node.type == "binary_expression":
        operator = node_text(node.child_by_field_name("operator"))
        if operator in _EQUALITY_OPERATORS:
            equal = _arg_value(node.child_by_field_name("left"), args) == _arg_value(
                node.child_by_field_name("right"), args
            )
            return equal if operator.startswith("=") else not equal
        return None
    matched, literal = literal_value(node)
    return literal if matched else None


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else ""
    return str(value)


__all__ = [
    "StoryParser",
    "component_name_from_path",
    "derive_scaffold",
    "find_story_files",
    "humanize_story_name",
]
