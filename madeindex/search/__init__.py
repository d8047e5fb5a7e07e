"""Relevance-ranked search over indexed components."""

from .engine import SearchEngine, extract_terms

__all__ = ["SearchEngine", "extract_terms"]
