"""Offline design-system index: tokens, components, search, scaffolding and linting."""

__version__ = "1.0.0"

__all__ = ["__version__"]
