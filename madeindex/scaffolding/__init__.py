"""Component scaffolding: prop resolution and markup synthesis."""

from .props import resolve_props
from .scaffolder import ComponentScaffolder, variant_combinations

__all__ = ["ComponentScaffolder", "resolve_props", "variant_combinations"]
