"""Design-system conformance and accessibility checks for markup fragments."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Set

from bs4 import BeautifulSoup, Tag

from ..config import DEFAULT_NAMESPACE
from ..errors import NotInitializedError
from ..logging import get_logger
from ..models import LintIssue, Token
from ..parsers.markup import element_classes, iter_elements, parse_fragment
from ..parsers.tokens import is_utility_class

_LOGGER = get_logger("linting")

SECTIONING_TAGS = ("main", "article", "section", "header", "footer", "nav", "aside")
DESIGN_SYSTEM_TAGS = ("button", "input", "textarea", "select", "nav", "card", "modal")
FORM_CONTROL_TAGS = ("input", "textarea", "select")
INTERACTIVE_TAGS = ("button", "a", "input", "select", "textarea")
UNLABELLED_INPUT_TYPES = ("hidden", "submit", "button", "reset", "image")
GENERIC_LINK_TEXT = ("click here", "read more", "learn more", "here")
CARD_LIKE_CLASSES = ("card", "panel", "box")
MODAL_LIKE_CLASSES = ("modal", "dialog", "overlay")
HEADING_PATTERN = re.compile(r"^h([1-6])$")
BASE_COMPONENT_CLASSES = (
    "btn",
    "button",
    "card",
    "alert",
    "modal",
    "input",
    "form",
    "form-control",
    "textarea",
    "nav",
    "navbar",
    "menu",
    "grid",
    "container",
    "row",
    "col",
    "text",
    "heading",
    "title",
    "badge",
    "tag",
    "chip",
    "icon",
    "avatar",
    "image",
)

_VAR_PATTERN = re.compile(r"var\(\s*(--[\w-]+)")
_OUTLINE_REMOVED_PATTERN = re.compile(r"outline\s*:\s*(none|0)\b")


class MarkupLinter:
    """Report design-system and accessibility issues without ever raising on markup."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace
        self._token_names: Set[str] = set()
        self._known_classes: Set[str] = set()
        self._initialized = False

    def initialize(self, tokens: Sequence[Token], known_classes: Iterable[str] = ()) -> None:
        self._token_names = {token.name for token in tokens}
        self._known_classes = {f"{self.namespace}-{name}" for name in BASE_COMPONENT_CLASSES}
        self._known_classes.update(name for name in known_classes if name)
        self._initialized = True
        _LOGGER.info(
            "Markup linter initialized with %d tokens and %d known classes",
            len(self._token_names),
            len(self._known_classes),
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def prefix(self) -> str:
        return f"{self.namespace}-"

    @property
    def label(self) -> str:
        return self.namespace.upper()

    def lint(self, html: str) -> List[LintIssue]:
        if not self._initialized:
            raise NotInitializedError("Markup linter not initialized")
        issues: List[LintIssue] = []
        try:
            soup = parse_fragment(html)
            elements = list(iter_elements(soup))
            if elements:
                self._lint_structure(soup, issues)
            for element in elements:
                self._lint_element(element, issues)
            self._lint_patterns(elements, issues)
            self._lint_headings(elements, issues)
        except Exception as exc:
            _LOGGER.debug("Markup lint failed: %s", exc)
            issues.append(
                LintIssue(
                    type="error",
                    message=f"Failed to parse HTML: {exc}",
                    fix_suggestion="Check HTML syntax and ensure valid markup",
                )
            )
        return issues

    def suggestions(self, html: str, issues: Sequence[LintIssue] = ()) -> List[str]:
        """Issue summaries followed by structure-based hints."""
        suggestions: List[str] = []
        errors = sum(1 for issue in issues if issue.type == "error")
        warnings = sum(1 for issue in issues if issue.type == "warning")
        if errors:
            suggestions.append(f"Fix {errors} error(s) to ensure {self.label} compliance")
        if warnings:
            suggestions.append(f"Consider addressing {warnings} warning(s) for better accessibility")
        if any(f"doesn't use {self.label} classes" in issue.message for issue in issues):
            suggestions.append(f"Add appropriate {self.label} CSS classes to ensure consistent styling")
        if any("accessib" in issue.message.lower() or "label" in issue.message for issue in issues):
            suggestions.append("Add ARIA attributes and labels for better accessibility")

        try:
            soup = parse_fragment(html)
        except Exception as exc:
            _LOGGER.debug("Suggestion scan failed: %s", exc)
            return suggestions
        ns = self.namespace
        if soup.find("button"):
            suggestions.append(f"Consider using {self.label} button variants: {ns}-btn-primary, {ns}-btn-secondary")
        if soup.find(class_=["card", "panel"]):
            suggestions.append(f"Use {self.label} card component: {ns}-card, {ns}-card-header, {ns}-card-body")
        if soup.find(["form", "input", "textarea"]):
            suggestions.append(f"Apply {self.label} form styling: {ns}-form-control, {ns}-form-group")
        if soup.find("nav") or soup.find(class_="navigation"):
            suggestions.append(f"Consider {self.label} navigation components: {ns}-nav, {ns}-navbar")
        return suggestions

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------
    def _lint_structure(self, soup: BeautifulSoup, issues: List[LintIssue]) -> None:
        if soup.find(list(SECTIONING_TAGS)):
            return
        top_level = [child for child in soup.children if isinstance(child, Tag)]
        # A lone component snippet is not expected to carry page structure.
        issues.append(
            LintIssue(
                type="info" if len(top_level) <= 1 else "warning",
                message="Consider using semantic HTML elements (" + ", ".join(SECTIONING_TAGS) + ")",
                fix_suggestion="Wrap content in appropriate semantic elements for better accessibility",
            )
        )

    def _lint_element(self, element: Tag, issues: List[LintIssue]) -> None:
        classes = element_classes(element)
        self._check_classes(element, classes, issues)
        self._check_css_variables(element, issues)
        self._check_focus_outline(element, issues)

        if element.name == "button":
            self._lint_button(element, classes, issues)
        elif element.name in FORM_CONTROL_TAGS:
            self._lint_form_control(element, classes, issues)
        elif element.name == "a":
            self._lint_link(element, issues)
        elif element.name == "img":
            self._lint_image(element, issues)

    def _check_classes(self, element: Tag, classes: List[str], issues: List[LintIssue]) -> None:
        recognised = [name for name in classes if self._is_design_system_class(name)]
        if classes and not recognised and element.name in DESIGN_SYSTEM_TAGS:
            issues.append(
                _issue(
                    element,
                    "warning",
                    f"Element <{element.name}> doesn't use {self.label} classes",
                    f"Consider adding appropriate {self.label} classes like "
                    f"'{self.prefix}{element.name}' or utility classes",
                )
            )
        for name in classes:
            if name.startswith(self.prefix) and name not in self._known_classes and not is_utility_class(name):
                issues.append(
                    _issue(
                        element,
                        "info",
                        f"Unknown {self.label} class: {name}",
                        f"Verify this class exists in the current {self.label} design system version",
                    )
                )

    def _check_css_variables(self, element: Tag, issues: List[LintIssue]) -> None:
        style = element.get("style")
        if not isinstance(style, str):
            return
        for name in _VAR_PATTERN.findall(style):
            if not name.startswith(f"--{self.prefix}"):
                issues.append(
                    _issue(
                        element,
                        "warning",
                        f"Non-{self.label} CSS variable used: {name}",
                        f"Consider using {self.label} design tokens (--{self.prefix}*) for consistency",
                    )
                )
            elif name not in self._token_names:
                issues.append(
                    _issue(
                        element,
                        "error",
                        f"Unknown {self.label} token: {name}",
                        f"Check available {self.label} design tokens or update to a valid token",
                    )
                )

    def _check_focus_outline(self, element: Tag, issues: List[LintIssue]) -> None:
        if element.name not in INTERACTIVE_TAGS:
            return
        style = element.get("style")
        if isinstance(style, str) and _OUTLINE_REMOVED_PATTERN.search(style) and "focus" not in style:
            issues.append(
                _issue(
                    element,
                    "warning",
                    "Interactive element removes focus outline without alternative",
                    "Provide alternative focus indicator when removing outline",
                )
            )

    def _lint_button(self, element: Tag, classes: List[str], issues: List[LintIssue]) -> None:
        if not any("btn" in name or "button" in name for name in classes):
            issues.append(
                _issue(
                    element,
                    "warning",
                    f"Button element should use {self.label} button classes",
                    f"Add classes like '{self.prefix}btn', '{self.prefix}btn-primary', etc.",
                )
            )
        if not _has_accessible_name(element):
            issues.append(
                _issue(
                    element,
                    "error",
                    "Button needs accessible text content or aria-label",
                    "Add text content or aria-label attribute",
                )
            )

    def _lint_form_control(self, element: Tag, classes: List[str], issues: List[LintIssue]) -> None:
        if not any(marker in name for name in classes for marker in ("form", "input", "field")):
            issues.append(
                _issue(
                    element,
                    "info",
                    f"Form element <{element.name}> could use {self.label} form classes",
                    f"Consider adding '{self.prefix}form-control', '{self.prefix}input', etc.",
                )
            )
        input_type = str(element.get("type") or "").lower()
        if element.name == "input" and input_type in UNLABELLED_INPUT_TYPES:
            return
        if not _has_label(element):
            issues.append(
                _issue(
                    element,
                    "error",
                    f"Form element <{element.name}> needs a label for accessibility",
                    "Add a <label> element or aria-label/aria-labelledby attribute",
                )
            )

    def _lint_link(self, element: Tag, issues: List[LintIssue]) -> None:
        text = element.get_text(strip=True)
        if not element.get("href"):
            issues.append(
                _issue(
                    element,
                    "warning",
                    "Link element should have href attribute",
                    "Add href attribute or use button element for actions",
                )
            )
        if not _has_accessible_name(element):
            issues.append(
                _issue(
                    element,
                    "error",
                    "Link needs accessible text content or aria-label",
                    "Add text content or aria-label attribute",
                )
            )
        if text.lower() in GENERIC_LINK_TEXT:
            issues.append(
                _issue(
                    element,
                    "warning",
                    "Link text is not descriptive enough",
                    "Use more descriptive link text that explains the destination",
                )
            )

    def _lint_image(self, element: Tag, issues: List[LintIssue]) -> None:
        if not element.get("src"):
            issues.append(_issue(element, "error", "Image element must have src attribute"))
        if not element.has_attr("alt"):
            issues.append(
                _issue(
                    element,
                    "error",
                    "Image element must have alt attribute for accessibility",
                    'Add alt attribute with descriptive text or empty alt="" for decorative images',
                )
            )

    def _lint_patterns(self, elements: Sequence[Tag], issues: List[LintIssue]) -> None:
        for element in elements:
            classes = element_classes(element)
            if any(name in CARD_LIKE_CLASSES for name in classes) and not any(
                name.startswith(self.prefix) for name in classes
            ):
                issues.append(
                    _issue(
                        element,
                        "info",
                        f"Card-like component could use {self.label} card classes",
                        f"Consider using '{self.prefix}card' and related classes",
                    )
                )
            if any(name in MODAL_LIKE_CLASSES for name in classes) and not (
                element.has_attr("role") or element.has_attr("aria-modal")
            ):
                issues.append(
                    _issue(
                        element,
                        "error",
                        "Modal/dialog should have proper ARIA attributes",
                        'Add role="dialog" and aria-modal="true"',
                    )
                )

    def _lint_headings(self, elements: Sequence[Tag], issues: List[LintIssue]) -> None:
        previous = 0
        for element in elements:
            match = HEADING_PATTERN.match(element.name or "")
            if not match:
                continue
            level = int(match.group(1))
            if level > previous + 1:
                issues.append(
                    _issue(
                        element,
                        "warning",
                        f"Heading level {level} skips levels (previous was h{previous})",
                        "Use sequential heading levels for proper document structure",
                    )
                )
            previous = level

    def _is_design_system_class(self, name: str) -> bool:
        return name.startswith(self.prefix) or name in self._known_classes or is_utility_class(name)


def _issue(element: Tag, severity: str, message: str, fix: Optional[str] = None) -> LintIssue:
    line = getattr(element, "sourceline", None)
    position = getattr(element, "sourcepos", None)
    return LintIssue(
        type=severity,
        message=message,
        fix_suggestion=fix,
        line=line,
        column=position + 1 if isinstance(position, int) else None,
    )


def _has_accessible_name(element: Tag) -> bool:
    return bool(
        element.get_text(strip=True)
        or element.get("aria-label")
        or element.get("aria-labelledby")
        or element.get("title")
    )


def _has_label(element: Tag) -> bool:
    if element.get("aria-label") or element.get("aria-labelledby"):
        return True
    if element.find_parent("label") is not None:
        return True
    element_id = element.get("id")
    if not element_id:
        return False
    root = element
    while root.parent is not None:
        root = root.parent
    return root.find("label", attrs={"for": element_id}) is not None


__all__ = ["MarkupLinter"]
