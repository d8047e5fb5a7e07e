"""Exception types shared by the index, search, scaffolding and lint layers."""

from __future__ import annotations


class MadeIndexError(Exception):
    """Base class for errors raised by madeindex operations."""


class NotInitializedError(MadeIndexError, RuntimeError):
    """Raised when a query runs before indexes were loaded or built."""


class ComponentNotFoundError(MadeIndexError, LookupError):
    """Raised when no component matches a name case-insensitively."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Component '{name}' not found")
        self.name = name


class ScaffoldingError(MadeIndexError, RuntimeError):
    """Raised when markup synthesis for a component fails."""


__all__ = [
    "ComponentNotFoundError",
    "MadeIndexError",
    "NotInitializedError",
    "ScaffoldingError",
]
