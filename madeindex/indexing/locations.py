"""Conventional locations of design-system sources inside a repository tree."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

# Sub-paths are templated with the namespace. Patterns containing "*" match
# versioned dist directories and are tried newest version first.
TOKEN_STYLESHEETS: Tuple[str, ...] = (
    "packages/{ns}-css/dist/*/{ns}-css-variables.css",
    "packages/{ns}-css/dist/{ns}-css-variables.css",
    "packages/{ns}-css/src/01-settings/tokens.css",
    "storybook/stories/assets/css/{ns}-css-variables.css",
    "{ns}-css-variables.css",
    "dist/{ns}-css-variables.css",
    "build/{ns}-css-variables.css",
    "css/{ns}-css-variables.css",
    "packages/{ns}-design-tokens/dist/*/web/themes/b2b/tokens-variables.css",
    "assets/partnerbank-test-theme/tokens-variables.css",
)

TOKEN_JSON: Tuple[str, ...] = (
    "packages/{ns}-design-tokens/dist/*/web/themes/b2b/tokens.json",
    "assets/partnerbank-test-theme/tokens.json",
    "tokens.json",
    "dist/tokens.json",
    "build/tokens.json",
)

UTILITY_STYLESHEETS: Tuple[str, ...] = (
    "packages/{ns}-css/dist/*/{ns}.css",
    "packages/{ns}-css/dist/{ns}.css",
    "{ns}.css",
    "dist/{ns}.css",
    "build/{ns}.css",
    "css/{ns}.css",
)

# The first marker directory that exists selects its parent as the story root.
STORY_ROOT_MARKERS: Tuple[str, ...] = (
    ".storybook",
    "storybook",
    "stories",
    "src/stories",
    "docs/stories",
)

_NATURAL_SPLIT = re.compile(r"(\d+)")


def candidate_files(
    repo: Path,
    patterns: Sequence[str],
    namespace: str,
    extra: Sequence[str] = (),
) -> List[Path]:
    """Existing files for ``extra`` then ``patterns``, in priority order, without repeats."""
    found: List[Path] = []
    seen: set[Path] = set()
    for raw in [*extra, *patterns]:
        pattern = raw.format(ns=namespace)
        if "*" in pattern:
            matches = sorted(repo.glob(pattern), key=_natural_key, reverse=True)
        else:
            matches = [repo / pattern]
        for path in matches:
            if path.is_file() and path not in seen:
                seen.add(path)
                found.append(path)
    return found


def locate_story_root(repo: Path, extra: Sequence[str] = ()) -> Optional[Path]:
    """Directory to scan for stories, or None when no conventional location exists.

    Configured roots are used as-is; a conventional marker directory selects
    its parent so sibling component folders are scanned too.
    """
    for raw in extra:
        path = Path(raw) if Path(raw).is_absolute() else repo / raw
        if path.is_dir():
            return path
    for marker in STORY_ROOT_MARKERS:
        path = repo / marker
        if path.exists():
            return path.parent
    return None


def _natural_key(path: Path) -> List[object]:
    return [int(part) if part.isdigit() else part for part in _NATURAL_SPLIT.split(path.as_posix())]


__all__ = [
    "STORY_ROOT_MARKERS",
    "TOKEN_JSON",
    "TOKEN_STYLESHEETS",
    "UTILITY_STYLESHEETS",
    "candidate_files",
    "locate_story_root",
]
