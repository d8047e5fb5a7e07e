"""Helper utilities for constructing temporary design-system repositories in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from tests._fixtures import samples


class DesignRepoBuilder:
    """Utility for writing design-system sources into a throwaway repository."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_default(self) -> Path:
        """Populate tokens, utilities and two components (Button, Card)."""
        self.write(
            {
                "made-css-variables.css": samples.TOKEN_CSS,
                "tokens.json": samples.TOKEN_JSON,
                "made.css": samples.UTILITY_CSS,
                "stories/components/button/Button.stories.ts": samples.BUTTON_STORY,
                "stories/components/card/Card.stories.mdx": samples.CARD_MDX,
                "node_modules/vendor/Ignored.stories.js": samples.VENDORED_STORY,
            }
        )
        return self.root

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


__all__ = ["DesignRepoBuilder"]
