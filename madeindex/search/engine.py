"""Deterministic relevance ranking over indexed components and examples."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from ..errors import NotInitializedError
from ..logging import get_logger
from ..models import Component, Example, SearchResult, Token
from .constants import (
    CLASS_WEIGHT,
    ELEMENT_PATTERNS,
    FUZZY_MIN_QUERY_LENGTH,
    FUZZY_THRESHOLD,
    MAX_RESULTS,
    MIN_TERM_LENGTH,
    SIMILARITY_THRESHOLD,
    STOP_WORDS,
    TAG_WEIGHT,
    UI_PATTERN_KEYWORDS,
    VARIANT_WEIGHT,
)
from .similarity import jaccard, similarity_ratio

_LOGGER = get_logger("search")

_NON_TERM_CHARS = re.compile(r"[^a-z0-9\s-]")


def extract_terms(query: str) -> List[str]:
    """Lowercase alphanumeric terms of three or more characters, minus stop words."""
    cleaned = _NON_TERM_CHARS.sub(" ", query.lower())
    terms = [
        term
        for term in cleaned.split()
        if len(term) >= MIN_TERM_LENGTH and term not in STOP_WORDS
    ]
    return list(dict.fromkeys(terms))


def detect_ui_patterns(query: str) -> List[str]:
    lowered = query.lower()
    return [
        pattern
        for pattern, keywords in UI_PATTERN_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]


def component_matches_pattern(component: Component, pattern: str) -> bool:
    name = component.name.lower()
    tags = " ".join(component.tags).lower()
    classes = " ".join(component.css_classes).lower()

    if pattern == "button":
        return "button" in name or "btn" in name or "btn" in classes
    if pattern == "card":
        return "card" in name or "card" in tags or "card" in classes
    if pattern == "modal":
        return "modal" in name or "dialog" in name or "overlay" in tags
    if pattern == "form":
        return "form" in name or "input" in name or "form" in tags
    if pattern == "navigation":
        return "nav" in name or "menu" in name or "navigation" in tags
    if pattern == "alert":
        return "alert" in name or "notification" in name or "feedback" in tags
    if pattern == "themeable":
        return (
            "theme" in component.variants
            or "color" in component.variants
            or "dark" in classes
            or "light" in classes
        )
    if pattern == "responsive":
        return any(marker in classes for marker in ("responsive", "sm", "md", "lg"))
    if pattern == "icon":
        return "icon" in name or "icon" in classes
    return pattern in name or pattern in tags


def html_matches_element_pattern(html: str, query: str) -> bool:
    lowered_html = html.lower()
    return any(
        keyword in query and any(fragment in lowered_html for fragment in fragments)
        for keyword, fragments in ELEMENT_PATTERNS
    )


def relevance(result: SearchResult, terms: Sequence[str]) -> int:
    score = 0
    title = result.title.lower()
    html = result.html.lower()
    if any(title.startswith(term) for term in terms):
        score += 10
    score += 5 * sum(1 for term in terms if term in title)
    score += 2 * sum(1 for term in terms if term in html)
    if "Component" in result.title and ":" not in result.title:
        score += 3
    if 0 < len(result.html) < 1000:
        score += 1
    return score


class SearchEngine:
    """Free-text search over a dataset snapshot.

    ``initialize`` keeps references to the given collections; callers pass a
    snapshot that is not mutated for the lifetime of the session.
    """

    def __init__(self) -> None:
        self._components: Sequence[Component] = ()
        self._tokens: Sequence[Token] = ()
        self._upstream_ref = "main"
        self._initialized = False

    def initialize(
        self,
        components: Sequence[Component],
        tokens: Sequence[Token],
        *,
        upstream_ref: str = "main",
    ) -> None:
        self._components = components
        self._tokens = tokens
        self._upstream_ref = upstream_ref or "main"
        self._initialized = True
        _LOGGER.info(
            "Search engine initialized with %d components and %d tokens",
            len(components),
            len(tokens),
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    # Free-text search
    # ------------------------------------------------------------------
    def search(self, query: str) -> List[SearchResult]:
        self._require_initialized()
        lowered = query.lower()
        terms = extract_terms(lowered)
        patterns = detect_ui_patterns(lowered)

        candidates: List[SearchResult] = []
        for component in self._components:
            if self._component_matches(component, terms, lowered, patterns):
                candidates.append(self._component_result(component))
        for component in self._components:
            for example in component.examples:
                if self._example_matches(example, terms, lowered):
                    candidates.append(self._example_result(component, example))

        # sorted() is stable, so ties keep insertion order.
        ranked = sorted(candidates, key=lambda result: relevance(result, terms), reverse=True)
        _LOGGER.debug("Query %r matched %d candidates", query, len(ranked))
        return ranked[:MAX_RESULTS]

    def _component_matches(
        self,
        component: Component,
        terms: Sequence[str],
        query: str,
        patterns: Sequence[str],
    ) -> bool:
        variant_text = [
            item
            for axis, values in component.variants.items()
            for item in (axis, *values)
        ]
        searchable = " ".join(
            [
                component.name,
                component.description,
                *component.tags,
                *component.css_classes,
                *variant_text,
                *component.a11y_notes,
            ]
        ).lower()
        if query in searchable:
            return True
        if any(term in searchable for term in terms):
            return True
        if len(query) >= FUZZY_MIN_QUERY_LENGTH and similarity_ratio(component.name.lower(), query) >= FUZZY_THRESHOLD:
            return True
        return any(component_matches_pattern(component, pattern) for pattern in patterns)

    def _example_matches(self, example: Example, terms: Sequence[str], query: str) -> bool:
        searchable = " ".join([example.title, example.description or "", example.html]).lower()
        if query in searchable:
            return True
        if any(term in searchable for term in terms):
            return True
        return html_matches_element_pattern(example.html, query)

    # ------------------------------------------------------------------
    # Auxiliary modes
    # ------------------------------------------------------------------
    def search_by_tags(self, tags: Sequence[str]) -> List[SearchResult]:
        self._require_initialized()
        wanted = [tag.lower() for tag in tags if tag]
        results: List[SearchResult] = []
        for component in self._components:
            matched = [tag for tag in component.tags if any(item in tag.lower() for item in wanted)]
            if matched:
                result = self._component_result(component)
                result.title = f"{component.name} Component ({', '.join(matched)})"
                results.append(result)
        return results

    def search_by_variant(self, axis: str, value: Optional[str] = None) -> List[SearchResult]:
        self._require_initialized()
        results: List[SearchResult] = []
        for component in self._components:
            values = component.variants.get(axis)
            if not values:
                continue
            matching = [item for item in values if value is None or value in item]
            for item in matching:
                example = next(
                    (ex for ex in component.examples if ex.props and ex.props.get(axis) == item),
                    component.examples[0] if component.examples else None,
                )
                results.append(
                    SearchResult(
                        component=component.name,
                        title=f"{component.name} - {axis}: {item}",
                        html=example.html if example is not None else component.html_scaffold,
                        source_path=f"components/{component.name.lower()}/variants",
                        upstream_ref=self._upstream_ref,
                    )
                )
        return results

    def search_similar(self, name: str) -> List[SearchResult]:
        """Siblings of ``name`` ranked by blended tag, class and variant-axis overlap."""
        self._require_initialized()
        lowered = name.lower()
        target = next((item for item in self._components if item.name.lower() == lowered), None)
        if target is None:
            return []

        scored: List[tuple[float, SearchResult]] = []
        for component in self._components:
            if component.name == target.name:
                continue
            score = component_similarity(target, component)
            if score > SIMILARITY_THRESHOLD:
                result = self._component_result(component)
                result.title = f"{component.name} Component (similar to {target.name})"
                scored.append((score, result))
        scored.sort(key=lambda item: item[0], reverse=True)
        return [result for _, result in scored]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _component_result(self, component: Component) -> SearchResult:
        html = component.examples[0].html if component.examples else component.html_scaffold
        return SearchResult(
            component=component.name,
            title=f"{component.name} Component",
            html=html,
            source_path=f"components/{component.name.lower()}",
            upstream_ref=self._upstream_ref,
        )

    def _example_result(self, component: Component, example: Example) -> SearchResult:
        return SearchResult(
            component=component.name,
            title=f"{component.name}: {example.title}",
            html=example.html,
            source_path=f"components/{component.name.lower()}/examples",
            upstream_ref=self._upstream_ref,
        )

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("Search engine not initialized")


def component_similarity(left: Component, right: Component) -> float:
    return (
        jaccard(left.tags, right.tags) * TAG_WEIGHT
        + jaccard(left.css_classes, right.css_classes) * CLASS_WEIGHT
        + jaccard(left.variants.keys(), right.variants.keys()) * VARIANT_WEIGHT
    )


__all__ = [
    "SearchEngine",
    "component_matches_pattern",
    "component_similarity",
    "detect_ui_patterns",
    "extract_terms",
    "relevance",
]
