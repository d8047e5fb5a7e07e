"""Core data models shared across madeindex components.

Every model converts to and from the JSON shape used both for the persisted
index artifacts and for operation responses (camelCase keys).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

TOKEN_CATEGORIES: Tuple[str, ...] = (
    "color",
    "spacing",
    "typography",
    "shadow",
    "radius",
    "breakpoint",
    "time",
    "other",
)

LINT_SEVERITIES: Tuple[str, ...] = ("error", "warning", "info")


@dataclass(frozen=True)
class Token:
    """A named design value extracted from a stylesheet or token map."""

    name: str
    value: str
    category: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "category": self.category,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Token":
        name = _require_str(payload, "name")
        category = payload.get("category", "other")
        if category not in TOKEN_CATEGORIES:
            category = "other"
        return cls(
            name=name,
            value=str(payload.get("value", "")),
            category=category,
            description=str(payload.get("description") or ""),
        )


@dataclass
class Example:
    """A single markup example owned by a component."""

    title: str
    html: str
    description: Optional[str] = None
    props: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title, "html": self.html}
        if self.description is not None:
            data["description"] = self.description
        if self.props is not None:
            data["props"] = dict(self.props)
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Example":
        props = payload.get("props")
        description = payload.get("description")
        return cls(
            title=_require_str(payload, "title"),
            html=str(payload.get("html", "")),
            description=str(description) if description is not None else None,
            props=dict(props) if isinstance(props, Mapping) else None,
        )


@dataclass
class Component:
    """An indexed UI component with variants, scaffold and examples."""

    name: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    variants: Dict[str, List[str]] = field(default_factory=dict)
    props: Dict[str, Any] = field(default_factory=dict)
    a11y_notes: List[str] = field(default_factory=list)
    html_scaffold: str = ""
    css_classes: List[str] = field(default_factory=list)
    css_vars_used: List[str] = field(default_factory=list)
    examples: List[Example] = field(default_factory=list)

    def public_dict(self) -> Dict[str, Any]:
        """Fields exposed by component listings (no scaffold or class data)."""
        return {
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
            "variants": {axis: list(values) for axis, values in self.variants.items()},
            "props": copy.deepcopy(self.props),
            "a11yNotes": list(self.a11y_notes),
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.public_dict()
        data.update(
            {
                "htmlScaffold": self.html_scaffold,
                "cssClasses": list(self.css_classes),
                "cssVarsUsed": list(self.css_vars_used),
                "examples": [example.to_dict() for example in self.examples],
            }
        )
        return data

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Component":
        variants_raw = payload.get("variants") or {}
        if not isinstance(variants_raw, Mapping):
            raise ValueError("component variants must be a mapping")
        examples_raw = payload.get("examples") or []
        if not isinstance(examples_raw, list):
            raise ValueError("component examples must be a list")
        props = payload.get("props") or {}
        return cls(
            name=_require_str(payload, "name"),
            description=str(payload.get("description") or ""),
            tags=_str_list(payload.get("tags")),
            variants={str(axis): _str_list(values) for axis, values in variants_raw.items()},
            props=copy.deepcopy(dict(props)) if isinstance(props, Mapping) else {},
            a11y_notes=_str_list(payload.get("a11yNotes")),
            html_scaffold=str(payload.get("htmlScaffold") or ""),
            css_classes=_str_list(payload.get("cssClasses")),
            css_vars_used=_str_list(payload.get("cssVarsUsed")),
            examples=[Example.from_dict(item) for item in examples_raw if isinstance(item, Mapping)],
        )


@dataclass(frozen=True)
class IndexMeta:
    """Snapshot record describing one index build."""

    version: str
    upstream_commit: str
    upstream_ref: str
    build_time: str
    components_count: int
    tokens_count: int

    def built_at(self) -> Optional[datetime]:
        """Return the build time as an aware datetime, or None if unparseable."""
        try:
            parsed = datetime.fromisoformat(self.build_time.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "upstreamCommit": self.upstream_commit,
            "upstreamRef": self.upstream_ref,
            "buildTime": self.build_time,
            "componentsCount": self.components_count,
            "tokensCount": self.tokens_count,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "IndexMeta":
        return cls(
            version=str(payload.get("version", "")),
            upstream_commit=str(payload.get("upstreamCommit", "")),
            upstream_ref=str(payload.get("upstreamRef", "")),
            build_time=str(payload.get("buildTime", "")),
            components_count=int(payload.get("componentsCount", 0)),
            tokens_count=int(payload.get("tokensCount", 0)),
        )


@dataclass
class SearchResult:
    """One ranked search hit; computed per query and never persisted."""

    component: str
    title: str
    html: str
    source_path: str
    upstream_ref: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component": self.component,
            "title": self.title,
            "html": self.html,
            "sourcePath": self.source_path,
            "upstreamRef": self.upstream_ref,
        }


@dataclass
class LintIssue:
    """A single lint finding for a markup fragment."""

    type: str
    message: str
    fix_suggestion: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "message": self.message}
        if self.fix_suggestion is not None:
            data["fixSuggestion"] = self.fix_suggestion
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        return data


@dataclass
class ScaffoldResult:
    """Customised markup plus the notes and dependencies explaining it."""

    html: str
    notes: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "html": self.html,
            "notes": list(self.notes),
            "dependencies": list(self.dependencies),
        }


@dataclass(frozen=True)
class IndexDataset:
    """Immutable-after-construction snapshot of one build.

    A rebuild produces a new dataset value; owners swap their reference rather
    than mutating a live dataset.
    """

    tokens: Tuple[Token, ...] = ()
    components: Tuple[Component, ...] = ()
    meta: Optional[IndexMeta] = None
    utility_classes: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.tokens and not self.components

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokens": [token.to_dict() for token in self.tokens],
            "components": [component.to_dict() for component in self.components],
            "meta": self.meta.to_dict() if self.meta is not None else None,
            "utilityClasses": list(self.utility_classes),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "IndexDataset":
        tokens_raw = payload.get("tokens") or []
        components_raw = payload.get("components") or []
        if not isinstance(tokens_raw, list) or not isinstance(components_raw, list):
            raise ValueError("tokens and components must be lists")
        meta_raw = payload.get("meta")
        return cls(
            tokens=tuple(Token.from_dict(item) for item in tokens_raw),
            components=tuple(Component.from_dict(item) for item in components_raw),
            meta=IndexMeta.from_dict(meta_raw) if isinstance(meta_raw, Mapping) else None,
            utility_classes=tuple(_str_list(payload.get("utilityClasses"))),
        )


def utc_timestamp() -> str:
    """Return the current UTC time in ISO-8601 form with a Z suffix."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def _require_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"missing or invalid '{key}'")
    return value


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float))]
