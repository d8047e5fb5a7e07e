"""Markup linting against the indexed design system."""

from .markup import MarkupLinter

__all__ = ["MarkupLinter"]
