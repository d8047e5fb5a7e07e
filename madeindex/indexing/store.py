"""Durable storage for built index artifacts."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..logging import get_logger
from ..models import Component, IndexDataset, IndexMeta, Token

META_FILENAME = "index-meta.json"
TOKENS_FILENAME = "tokens.json"
COMPONENTS_FILENAME = "components.json"
UTILITY_CLASSES_FILENAME = "utility-classes.json"
SEARCH_CACHE_FILENAME = "search-index.json"
_TMP_SUFFIX = ".tmp"

_LOGGER = get_logger("indexing.store")


class IndexStore:
    """Reads and writes the meta, token and component artifacts.

    Artifacts are staged as temp files and renamed into place with the meta
    document last, so a reader never observes a half-written file and a
    meta file always describes artifacts that finished writing.
    """

    def __init__(self, index_dir: Path, cache_dir: Path) -> None:
        self.index_dir = Path(index_dir)
        self.cache_dir = Path(cache_dir)

    @property
    def meta_path(self) -> Path:
        return self.index_dir / META_FILENAME

    @property
    def tokens_path(self) -> Path:
        return self.index_dir / TOKENS_FILENAME

    @property
    def components_path(self) -> Path:
        return self.index_dir / COMPONENTS_FILENAME

    @property
    def utility_classes_path(self) -> Path:
        return self.index_dir / UTILITY_CLASSES_FILENAME

    @property
    def search_cache_path(self) -> Path:
        return self.cache_dir / SEARCH_CACHE_FILENAME

    def has_artifacts(self) -> bool:
        return any(path.exists() for path in (self.meta_path, self.tokens_path, self.components_path))

    def is_accessible(self) -> bool:
        """True when the index directory exists (or can be created) and is writable."""
        try:
            self.index_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return os.access(self.index_dir, os.W_OK)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self, dataset: IndexDataset) -> None:
        """Stage every artifact, then rename them into place with the meta last.

        A failure while staging leaves the previous artifacts untouched.
        """
        staged: List[Path] = []
        try:
            staged.append(_stage_json(self.tokens_path, [token.to_dict() for token in dataset.tokens]))
            staged.append(
                _stage_json(self.components_path, [component.to_dict() for component in dataset.components])
            )
            if dataset.utility_classes:
                staged.append(_stage_json(self.utility_classes_path, list(dataset.utility_classes)))
            if dataset.meta is not None:
                staged.append(_stage_json(self.meta_path, dataset.meta.to_dict()))
        except Exception:
            for tmp_path in staged:
                tmp_path.unlink(missing_ok=True)
            raise

        if dataset.meta is None:
            self.meta_path.unlink(missing_ok=True)
        for tmp_path in staged:
            os.replace(tmp_path, _final_path(tmp_path))
        if not dataset.utility_classes:
            self.utility_classes_path.unlink(missing_ok=True)
        self.write_search_cache(dataset)
        _LOGGER.info("Indexes saved to %s", self.index_dir)

    def write_search_cache(self, dataset: IndexDataset) -> None:
        _write_json(self.search_cache_path, build_search_cache(dataset))

    def load(self) -> Optional[IndexDataset]:
        """Read whichever artifacts exist; None when none do or any is unreadable."""
        if not self.has_artifacts():
            return None
        try:
            meta_raw = _read_json(self.meta_path)
            tokens_raw = _read_json(self.tokens_path) or []
            components_raw = _read_json(self.components_path) or []
            utility_raw = _read_json(self.utility_classes_path) or []
            if not isinstance(tokens_raw, list) or not isinstance(components_raw, list):
                raise ValueError("token and component artifacts must be JSON arrays")
            dataset = IndexDataset(
                tokens=tuple(Token.from_dict(item) for item in tokens_raw),
                components=tuple(Component.from_dict(item) for item in components_raw),
                meta=IndexMeta.from_dict(meta_raw) if isinstance(meta_raw, dict) else None,
                utility_classes=tuple(str(item) for item in utility_raw if isinstance(item, str)),
            )
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            _LOGGER.warning("Failed to load indexes from %s: %s", self.index_dir, exc)
            return None
        return dataset


def build_search_cache(dataset: IndexDataset) -> Dict[str, List[Dict[str, Any]]]:
    """Lowercase projection of the dataset; an optimisation hint, never authoritative."""
    return {
        "components": [
            {
                "name": component.name.lower(),
                "description": component.description.lower(),
                "tags": list(component.tags),
                "examples": [
                    {
                        "title": example.title.lower(),
                        "description": (example.description or "").lower(),
                    }
                    for example in component.examples
                ],
            }
            for component in dataset.components
        ],
        "tokens": [
            {
                "name": token.name.lower(),
                "category": token.category,
                "description": token.description.lower(),
            }
            for token in dataset.tokens
        ],
    }


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None


def _stage_json(path: Path, payload: Any) -> Path:
    """Write ``payload`` next to ``path`` under a ``.tmp`` name and return that name."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}{_TMP_SUFFIX}")
    try:
        tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path


def _final_path(tmp_path: Path) -> Path:
    return tmp_path.with_name(tmp_path.name[: -len(_TMP_SUFFIX)])


def _write_json(path: Path, payload: Any) -> None:
    os.replace(_stage_json(path, payload), path)


__all__ = [
    "COMPONENTS_FILENAME",
    "IndexStore",
    "META_FILENAME",
    "SEARCH_CACHE_FILENAME",
    "TOKENS_FILENAME",
    "UTILITY_CLASSES_FILENAME",
    "build_search_cache",
]
