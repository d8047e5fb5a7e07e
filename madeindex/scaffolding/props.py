"""Resolution of a free-form property bag into typed scaffold operations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union


class IntrinsicKind(str, Enum):
    """Attributes the scaffolder knows how to apply directly."""

    TEXT = "text"
    ID = "id"
    CLASS = "class"
    HREF = "href"
    TYPE = "type"
    DISABLED = "disabled"
    PLACEHOLDER = "placeholder"
    VALUE = "value"
    ARIA_LABEL = "aria-label"
    ROLE = "role"


INTRINSIC_PROPS: Dict[str, IntrinsicKind] = {
    "text": IntrinsicKind.TEXT,
    "children": IntrinsicKind.TEXT,
    "id": IntrinsicKind.ID,
    "class": IntrinsicKind.CLASS,
    "className": IntrinsicKind.CLASS,
    "href": IntrinsicKind.HREF,
    "type": IntrinsicKind.TYPE,
    "disabled": IntrinsicKind.DISABLED,
    "placeholder": IntrinsicKind.PLACEHOLDER,
    "value": IntrinsicKind.VALUE,
    "ariaLabel": IntrinsicKind.ARIA_LABEL,
    "role": IntrinsicKind.ROLE,
}

# Tags each intrinsic attribute may be applied to; kinds absent here apply anywhere.
INTRINSIC_TAGS: Dict[IntrinsicKind, Tuple[str, ...]] = {
    IntrinsicKind.HREF: ("a",),
    IntrinsicKind.TYPE: ("button", "input"),
    IntrinsicKind.DISABLED: ("button", "input", "select", "textarea"),
    IntrinsicKind.PLACEHOLDER: ("input", "textarea"),
    IntrinsicKind.VALUE: ("input", "textarea", "select"),
}


@dataclass(frozen=True)
class VariantAssignment:
    axis: str
    value: str


@dataclass(frozen=True)
class IntrinsicAttribute:
    kind: IntrinsicKind
    value: Any


@dataclass(frozen=True)
class CustomDataAttribute:
    key: str
    value: Any


@dataclass(frozen=True)
class UnrecognizedProp:
    key: str
    value: Any


ResolvedProp = Union[VariantAssignment, IntrinsicAttribute, CustomDataAttribute, UnrecognizedProp]

_UPPER = re.compile(r"([A-Z])")


def data_attribute_name(key: str) -> str:
    """``trackingId`` becomes ``data-tracking-id``."""
    kebab = _UPPER.sub(r"-\1", key).lower().strip("-")
    kebab = re.sub(r"[^a-z0-9-]+", "-", kebab)
    return f"data-{kebab}"


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def resolve_props(
    props: Mapping[str, Any],
    variants: Mapping[str, Sequence[str]],
) -> Tuple[List[ResolvedProp], List[str]]:
    """Classify every prop once; returns the operations plus resolution notes.

    A variant key whose value is not allowed is noted and then falls through
    to the intrinsic and custom-attribute rules.
    """
    resolved: List[ResolvedProp] = []
    notes: List[str] = []
    for key, value in props.items():
        allowed = variants.get(key)
        if allowed is not None:
            if isinstance(value, str) and value in allowed:
                resolved.append(VariantAssignment(axis=key, value=value))
                continue
            notes.append(f"Value '{value}' is not a known {key} variant (available: {', '.join(allowed)})")

        kind = INTRINSIC_PROPS.get(key)
        if kind is not None:
            resolved.append(IntrinsicAttribute(kind=kind, value=value))
        elif is_scalar(value):
            resolved.append(CustomDataAttribute(key=data_attribute_name(key), value=value))
        else:
            resolved.append(UnrecognizedProp(key=key, value=value))
    return resolved, notes


__all__ = [
    "CustomDataAttribute",
    "INTRINSIC_PROPS",
    "INTRINSIC_TAGS",
    "IntrinsicAttribute",
    "IntrinsicKind",
    "ResolvedProp",
    "UnrecognizedProp",
    "VariantAssignment",
    "data_attribute_name",
    "is_scalar",
    "resolve_props",
]
