"""Index orchestration: build from a repository tree, persist, reload, query."""

from __future__ import annotations

import copy
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .. import __version__
from ..config import DEFAULT_NAMESPACE, MadeIndexConfig, SourcesConfig
from ..logging import get_logger
from ..models import Component, IndexDataset, IndexMeta, Token, utc_timestamp
from ..parsers import StoryParser, TokenParser
from .locations import (
    TOKEN_JSON,
    TOKEN_STYLESHEETS,
    UTILITY_STYLESHEETS,
    candidate_files,
    locate_story_root,
)
from .store import IndexStore

_LOGGER = get_logger("indexing")

_RECOVERABLE_ERRORS = (OSError, UnicodeDecodeError, ValueError)


class IndexManager:
    """Owns the current :class:`IndexDataset` and its persisted artifacts.

    The dataset reference is only replaced after a build or import has fully
    completed and been persisted; readers see either the old or the new
    snapshot. Concurrent builds must be serialised by the caller.
    """

    def __init__(
        self,
        index_dir: Path,
        cache_dir: Path,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        sources: Optional[SourcesConfig] = None,
        version: str = __version__,
    ) -> None:
        self.namespace = namespace
        self.sources = sources or SourcesConfig()
        self.version = version
        self.store = IndexStore(index_dir, cache_dir)
        self._dataset = IndexDataset()

    @classmethod
    def from_config(cls, config: MadeIndexConfig) -> "IndexManager":
        return cls(
            config.index_dir or config.root / "data" / "indexes",
            config.cache_dir or config.root / "data" / "cache",
            namespace=config.namespace,
            sources=config.sources,
        )

    # ------------------------------------------------------------------
    # Build and load
    # ------------------------------------------------------------------
    def build(self, repo_path: Path, ref: str = "main", commit: str = "unknown") -> IndexMeta:
        """Parse the repository tree into a fresh dataset, persist it, then swap it in."""
        repo = Path(repo_path)
        if not repo.exists():
            raise FileNotFoundError(f"Repository path not found: {repo}")
        if not repo.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {repo}")

        _LOGGER.info("Building indexes from %s (ref=%s, commit=%s)", repo, ref, commit)
        token_parser = TokenParser(self.namespace)
        self._parse_token_sources(repo, token_parser)
        components = self._parse_stories(repo)
        tokens = token_parser.tokens

        meta = IndexMeta(
            version=self.version,
            upstream_commit=commit,
            upstream_ref=ref,
            build_time=utc_timestamp(),
            components_count=len(components),
            tokens_count=len(tokens),
        )
        dataset = IndexDataset(
            tokens=tuple(tokens),
            components=tuple(components),
            meta=meta,
            utility_classes=tuple(token_parser.utility_classes),
        )
        self.store.save(dataset)
        self._dataset = dataset

        if not tokens:
            _LOGGER.warning("Build produced no tokens")
        if not components:
            _LOGGER.warning("Build produced no components")
        _LOGGER.info("Built indexes: %d tokens, %d components", len(tokens), len(components))
        return meta

    def load(self) -> bool:
        """Reload persisted artifacts; on failure the current dataset is kept."""
        dataset = self.store.load()
        if dataset is None:
            if not self.store.has_artifacts():
                _LOGGER.info("No persisted indexes found in %s", self.store.index_dir)
            return False
        self._dataset = dataset
        _LOGGER.info(
            "Loaded %d tokens and %d components",
            len(dataset.tokens),
            len(dataset.components),
        )
        return True

    def _parse_token_sources(self, repo: Path, parser: TokenParser) -> None:
        groups: Sequence[tuple[str, Sequence[str], Sequence[str], Callable[[Path], Any]]] = (
            ("CSS variables", TOKEN_STYLESHEETS, self.sources.token_stylesheets, parser.parse_css_file),
            ("token JSON", TOKEN_JSON, self.sources.token_json, parser.parse_json_file),
            ("utility CSS", UTILITY_STYLESHEETS, self.sources.utility_stylesheets, parser.parse_utility_file),
        )
        for label, patterns, extra, parse in groups:
            for path in candidate_files(repo, patterns, self.namespace, extra):
                _LOGGER.info("Found %s file: %s", label, path)
                try:
                    parse(path)
                except _RECOVERABLE_ERRORS as exc:
                    _LOGGER.warning("Skipping %s file %s: %s", label, path, exc)

    def _parse_stories(self, repo: Path) -> List[Component]:
        root = locate_story_root(repo, self.sources.story_roots)
        if root is None:
            _LOGGER.warning("No Storybook directory found, scanning the entire repository")
            root = repo
        return StoryParser(self.namespace).parse_directory(root)

    # ------------------------------------------------------------------
    # Accessors (always independent copies)
    # ------------------------------------------------------------------
    @property
    def dataset(self) -> IndexDataset:
        """The current snapshot; treat as read-only."""
        return self._dataset

    def snapshot(self) -> IndexDataset:
        return copy.deepcopy(self._dataset)

    def tokens(self) -> List[Token]:
        return list(self._dataset.tokens)

    def components(self) -> List[Component]:
        return copy.deepcopy(list(self._dataset.components))

    def meta(self) -> Optional[IndexMeta]:
        return self._dataset.meta

    def utility_classes(self) -> List[str]:
        return list(self._dataset.utility_classes)

    def has_valid_indexes(self) -> bool:
        return not self._dataset.is_empty

    def is_stale(self, max_age: timedelta = timedelta(hours=24)) -> bool:
        meta = self._dataset.meta
        built_at = meta.built_at() if meta is not None else None
        if built_at is None:
            return True
        return datetime.now(UTC) - built_at > max_age

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def tokens_by_category(self, category: str) -> List[Token]:
        return [token for token in self._dataset.tokens if token.category == category]

    def search_tokens(self, query: str) -> List[Token]:
        lowered = query.lower()
        return [
            token
            for token in self._dataset.tokens
            if lowered in token.name.lower()
            or lowered in token.value.lower()
            or lowered in token.description.lower()
        ]

    def find_component(self, name: str) -> Optional[Component]:
        component = self._find(name)
        return copy.deepcopy(component) if component is not None else None

    def search_components(self, query: str) -> List[Component]:
        lowered = query.lower()
        matches = [
            component
            for component in self._dataset.components
            if lowered in component.name.lower()
            or lowered in component.description.lower()
            or any(lowered in tag for tag in component.tags)
            or any(
                lowered in example.title.lower() or lowered in (example.description or "").lower()
                for example in component.examples
            )
        ]
        return copy.deepcopy(matches)

    def component_classes(self, name: str) -> List[str]:
        component = self._find(name)
        return list(component.css_classes) if component is not None else []

    def component_tokens(self, name: str) -> List[Token]:
        component = self._find(name)
        if component is None:
            return []
        used = set(component.css_vars_used)
        return [token for token in self._dataset.tokens if token.name in used]

    def _find(self, name: str) -> Optional[Component]:
        lowered = name.lower()
        return next(
            (component for component in self._dataset.components if component.name.lower() == lowered),
            None,
        )

    # ------------------------------------------------------------------
    # Backup and migration
    # ------------------------------------------------------------------
    def export_indexes(self) -> Dict[str, Any]:
        return self._dataset.to_dict()

    def import_indexes(self, payload: Mapping[str, Any]) -> IndexDataset:
        """Replace the dataset wholesale from an export payload and persist it."""
        dataset = IndexDataset.from_dict(payload)
        self.store.save(dataset)
        self._dataset = dataset
        _LOGGER.info(
            "Imported %d tokens and %d components",
            len(dataset.tokens),
            len(dataset.components),
        )
        return dataset

    def rebuild_search_cache(self) -> None:
        self.store.write_search_cache(self._dataset)


__all__ = ["IndexManager"]
