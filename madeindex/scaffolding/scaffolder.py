"""Synthesize customised component markup from an indexed scaffold."""

from __future__ import annotations

import re
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from ..config import DEFAULT_NAMESPACE
from ..errors import ComponentNotFoundError, NotInitializedError, ScaffoldingError
from ..logging import get_logger
from ..models import Component, ScaffoldResult
from ..parsers.constants import VOID_ELEMENTS
from ..parsers.markup import element_classes, first_element, iter_elements, parse_fragment
from .props import (
    INTRINSIC_TAGS,
    CustomDataAttribute,
    IntrinsicAttribute,
    IntrinsicKind,
    ResolvedProp,
    UnrecognizedProp,
    VariantAssignment,
    resolve_props,
)

_LOGGER = get_logger("scaffolding")

BASE_CLASS_NAMES: Dict[str, str] = {"button": "btn", "card": "card", "alert": "alert"}
SUFFIX_AXES = ("variant", "color", "size")
MODIFIER_AXES = ("state",)
INTERACTION_ATTRIBUTES = ("data-toggle", "onclick", "data-dismiss")
MAX_PREVIEW_COMBINATIONS = 20
MAX_PREVIEW_RENDERS = 10

_ROLE_PATTERN = re.compile(r"""role=["']([^"']+)["']""")
_ARIA_PATTERN = re.compile(r"""(aria-[\w-]+)=["']([^"']+)["']""")
_SIZE_STEP_PATTERN = re.compile(r"^(?:x{0,3}s|sm|md|lg|x{0,3}l|\d?xl)$")


class ComponentScaffolder:
    """Applies props, accessibility fixes and class hygiene to a component scaffold."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace
        self._components: Sequence[Component] = ()
        self._initialized = False

    def initialize(self, components: Sequence[Component]) -> None:
        self._components = components
        self._initialized = True
        _LOGGER.info("Component scaffolder initialized with %d components", len(components))

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def scaffold(self, component: Component, props: Optional[Mapping[str, Any]] = None) -> ScaffoldResult:
        props = dict(props or {})
        try:
            return self._scaffold(component, props)
        except Exception as exc:
            _LOGGER.error("Scaffolding %s failed: %s", component.name, exc)
            raise ScaffoldingError(f"Failed to scaffold component '{component.name}': {exc}") from exc

    def scaffold_variations(
        self, name: str, prop_sets: Sequence[Mapping[str, Any]]
    ) -> List[ScaffoldResult]:
        component = self._find(name)
        return [self.scaffold(component, props) for props in prop_sets]

    def generate_preview(self, name: str) -> Dict[str, Any]:
        """Render a bounded set of representative variant combinations."""
        component = self._find(name)
        variations: List[Dict[str, Any]] = []
        for props in variant_combinations(component.variants):
            try:
                result = self.scaffold(component, props)
            except ScaffoldingError as exc:
                _LOGGER.warning("Skipping preview %s for %s: %s", props, component.name, exc)
                continue
            variations.append({"props": props, "html": result.html})
            if len(variations) >= MAX_PREVIEW_RENDERS:
                break
        return {"component": component.name, "variations": variations}

    def base_class(self, component: Component) -> str:
        key = component.name.lower()
        suffix = BASE_CLASS_NAMES.get(key) or key.replace(" ", "-")
        return f"{self.namespace}-{suffix}"

    def variant_class(self, component: Component, axis: str, value: str) -> str:
        base = self.base_class(component)
        if axis in SUFFIX_AXES:
            return f"{base}-{value}"
        if axis in MODIFIER_AXES:
            return f"{base}--{value}"
        return f"{base}-{axis}-{value}"

    def is_variant_class(self, component: Component, axis: str, name: str) -> bool:
        """Whether ``name`` selects some value of ``axis``, declared or not.

        Suffix axes share the ``<base>-<value>`` shape, so a suffix is claimed
        by the axis that declares it; undeclared suffixes go to ``size`` when
        they look like a size step and to ``variant``/``color`` otherwise.
        """
        base = self.base_class(component)
        if axis in MODIFIER_AXES:
            return name.startswith(f"{base}--")
        if axis not in SUFFIX_AXES:
            return name.startswith(f"{base}-{axis}-")
        if not name.startswith(f"{base}-") or "--" in name:
            return False
        suffix = name[len(base) + 1 :]
        if suffix in component.variants.get(axis, []):
            return True
        for other, values in component.variants.items():
            if other != axis and (suffix in values or suffix.startswith(f"{other}-")):
                return False
        size_like = bool(_SIZE_STEP_PATTERN.match(suffix))
        return size_like if axis == "size" else not size_like

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _scaffold(self, component: Component, props: Dict[str, Any]) -> ScaffoldResult:
        soup = parse_fragment(component.html_scaffold)
        target = self._target(soup)
        notes: List[str] = []

        operations, resolution_notes = resolve_props(props, component.variants)
        notes.extend(resolution_notes)
        for operation in operations:
            self._apply(operation, target, component, notes)

        self._accessibility_pass(soup, component, notes)
        self._class_pass(soup, target, component, notes)
        self._development_notes(component, props, notes)

        return ScaffoldResult(
            html=str(soup).strip(),
            notes=notes,
            dependencies=self._dependencies(component),
        )

    def _target(self, soup: BeautifulSoup) -> Optional[Tag]:
        prefix = f"{self.namespace}-"
        for element in iter_elements(soup):
            if any(name.startswith(prefix) for name in element_classes(element)):
                return element
        return first_element(soup)

    def _apply(
        self,
        operation: ResolvedProp,
        target: Optional[Tag],
        component: Component,
        notes: List[str],
    ) -> None:
        if isinstance(operation, UnrecognizedProp):
            notes.append(f"Warning: Unknown prop '{operation.key}' for component {component.name}")
            return
        if target is None:
            notes.append(f"Skipped {_operation_label(operation)}: scaffold has no elements")
            return

        if isinstance(operation, VariantAssignment):
            classes = [
                name
                for name in element_classes(target)
                if not self.is_variant_class(component, operation.axis, name)
            ]
            classes.append(self.variant_class(component, operation.axis, operation.value))
            target["class"] = classes
            notes.append(f"Applied {operation.axis} variant: {operation.value}")
        elif isinstance(operation, IntrinsicAttribute):
            self._apply_intrinsic(operation, target, notes)
        elif isinstance(operation, CustomDataAttribute):
            target[operation.key] = _attribute_text(operation.value)
            notes.append(f"Set custom attribute: {operation.key}")

    def _apply_intrinsic(self, operation: IntrinsicAttribute, target: Tag, notes: List[str]) -> None:
        kind, value = operation.kind, operation.value
        allowed_tags = INTRINSIC_TAGS.get(kind)
        if allowed_tags is not None and target.name not in allowed_tags:
            notes.append(f"Ignored {kind.value}: not supported on <{target.name}> elements")
            return

        if kind is IntrinsicKind.TEXT:
            if target.name in VOID_ELEMENTS:
                notes.append(f"Ignored text: <{target.name}> elements cannot contain text")
                return
            target.string = _attribute_text(value)
        elif kind is IntrinsicKind.CLASS:
            extra = str(value).split()
            target["class"] = element_classes(target) + extra
        elif kind is IntrinsicKind.DISABLED:
            if _truthy(value):
                target["disabled"] = ""
            elif target.has_attr("disabled"):
                del target["disabled"]
        else:
            target[kind.value] = _attribute_text(value)

    def _accessibility_pass(self, soup: BeautifulSoup, component: Component, notes: List[str]) -> None:
        for element in iter_elements(soup):
            if element.name == "button":
                if not element.has_attr("type"):
                    element["type"] = "button"
                if not element.get_text(strip=True) and not element.get("aria-label"):
                    element["aria-label"] = f"{component.name} button"
                    notes.append("Added default aria-label to button - customize as needed")
            elif element.name == "input":
                if not element.has_attr("type"):
                    element["type"] = "text"
                if not element.get("id"):
                    generated = f"{component.name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:9]}"
                    element["id"] = generated
                    notes.append(f"Added ID for accessibility - associate with label: {generated}")
            elif element.name == "img":
                if not element.has_attr("alt"):
                    element["alt"] = ""
                    notes.append(
                        "Added empty alt attribute - update with descriptive text if not decorative"
                    )
            elif element.name == "a" and not element.get("href"):
                notes.append("Link element needs href attribute")

        recommended: List[Tuple[str, str]] = []
        for note in component.a11y_notes:
            role = _ROLE_PATTERN.search(note)
            if role:
                recommended.append(("role", role.group(1)))
            recommended.extend(_ARIA_PATTERN.findall(note))

        # Recommendations fill every element still missing the attribute.
        for attribute, value in dict.fromkeys(recommended):
            missing = [element for element in iter_elements(soup) if not element.has_attr(attribute)]
            for element in missing:
                element[attribute] = value
            if not missing:
                continue
            message = (
                f"Applied recommended role: {value}"
                if attribute == "role"
                else f"Applied recommended ARIA: {attribute}"
            )
            if message not in notes:
                notes.append(message)

    def _class_pass(
        self,
        soup: BeautifulSoup,
        target: Optional[Tag],
        component: Component,
        notes: List[str],
    ) -> None:
        known = set(component.css_classes)
        base = self.base_class(component)
        for element in iter_elements(soup):
            if not element.has_attr("class"):
                continue
            classes = list(dict.fromkeys(element_classes(element)))
            essentials: List[str] = []
            if element is target:
                essentials.append(base)
            if element.name == "button":
                essentials.append(f"{self.namespace}-btn")
            elif element.name in ("input", "textarea", "select"):
                essentials.append(f"{self.namespace}-form-control")
            elif element.name == "nav":
                essentials.append(f"{self.namespace}-nav")
            for name in dict.fromkeys(essentials):
                if name in known and name not in classes:
                    classes.insert(0, name)
                    notes.append(f"Added essential class: {name}")
            if classes:
                element["class"] = classes
            else:
                del element["class"]

    def _development_notes(self, component: Component, props: Mapping[str, Any], notes: List[str]) -> None:
        notes.append(f"Component: {component.name}")
        if component.variants:
            notes.append("Available variants:")
            notes.extend(f"  {axis}: {', '.join(values)}" for axis, values in component.variants.items())
        if component.css_vars_used:
            notes.append("Design tokens used:")
            notes.extend(f"  {name}" for name in component.css_vars_used)
        if component.a11y_notes:
            notes.append("Accessibility considerations:")
            notes.extend(f"  {note}" for note in component.a11y_notes)
        if not props:
            notes.append("Tip: You can customize this component by passing props like:")
            if component.variants.get("variant"):
                notes.append(f"  variant: {component.variants['variant'][0]}")
            if component.variants.get("size"):
                notes.append(f"  size: {component.variants['size'][0]}")
            notes.append('  className: "custom-class"')
            notes.append('  id: "unique-id"')

    def _dependencies(self, component: Component) -> List[str]:
        dependencies: List[str] = []
        markup = " ".join(example.html for example in component.examples)
        if any(attribute in markup for attribute in INTERACTION_ATTRIBUTES):
            dependencies.append(f"{self.namespace}.js - For interactive functionality")
        if any("icon" in name for name in component.css_classes) or "icon" in component.html_scaffold:
            dependencies.append(f"{self.namespace.upper()} icons - Icon font or SVG sprites")
        if component.css_vars_used:
            dependencies.append(f"{self.namespace}-css-variables.css - For design token support")
        dependencies.append(f"{self.namespace}.css - Core {self.namespace.upper()} styles")
        return dependencies

    def _find(self, name: str) -> Component:
        if not self._initialized:
            raise NotInitializedError("Component scaffolder not initialized")
        lowered = name.lower()
        for component in self._components:
            if component.name.lower() == lowered:
                return component
        raise ComponentNotFoundError(name)


def variant_combinations(variants: Mapping[str, Sequence[str]]) -> List[Dict[str, str]]:
    """Every single-axis value plus pairings of the first two values of the first two axes."""
    axes = [(axis, list(values)) for axis, values in variants.items() if values]
    if not axes:
        return [{}]
    combinations: List[Dict[str, str]] = [{axis: value} for axis, values in axes for value in values]
    if len(axes) >= 2:
        (first_axis, first_values), (second_axis, second_values) = axes[0], axes[1]
        for first in first_values[:2]:
            for second in second_values[:2]:
                combinations.append({first_axis: first, second_axis: second})
    return combinations[:MAX_PREVIEW_COMBINATIONS]


def _operation_label(operation: ResolvedProp) -> str:
    if isinstance(operation, VariantAssignment):
        return f"{operation.axis} variant"
    if isinstance(operation, IntrinsicAttribute):
        return operation.kind.value
    return getattr(operation, "key", "prop")


def _attribute_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "false", "0", "no", "off")
    return bool(value)


__all__ = ["ComponentScaffolder", "variant_combinations"]
