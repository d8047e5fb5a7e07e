"""The named operations exposed to callers, wired over one index snapshot."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from . import __version__
from .config import MadeIndexConfig
from .errors import ComponentNotFoundError, NotInitializedError
from .indexing import IndexManager
from .linting import MarkupLinter
from .logging import get_logger
from .models import IndexDataset
from .scaffolding import ComponentScaffolder
from .search import SearchEngine

_LOGGER = get_logger("server")

HEALTHY = "healthy"
DEGRADED = "degraded"
UNHEALTHY = "unhealthy"


class IndexServer:
    """Coordinates the index manager with search, scaffolding and linting.

    Every build or load re-initializes the query components with the manager's
    new dataset snapshot, so queries never observe a partially built index.
    """

    def __init__(
        self,
        manager: IndexManager,
        *,
        version: str = __version__,
        max_index_age_hours: float = 24.0,
    ) -> None:
        self.manager = manager
        self.server_version = version
        self.max_index_age_hours = max_index_age_hours
        self.search_engine = SearchEngine()
        self.linter = MarkupLinter(manager.namespace)
        self.scaffolder = ComponentScaffolder(manager.namespace)
        self._initialized = False

    @classmethod
    def from_config(cls, config: MadeIndexConfig) -> "IndexServer":
        return cls(
            IndexManager.from_config(config),
            max_index_age_hours=config.max_index_age_hours,
        )

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self) -> None:
        _LOGGER.info("Initializing index server")
        for directory in (self.manager.store.index_dir, self.manager.store.cache_dir):
            Path(directory).mkdir(parents=True, exist_ok=True)
        self.manager.load()
        self._wire(self.manager.dataset)
        self._initialized = True
        _LOGGER.info("Index server initialized")

    def build_indexes(self, repo_path: Path, ref: str = "main", commit: str = "unknown") -> Dict[str, Any]:
        meta = self.manager.build(Path(repo_path), ref=ref, commit=commit)
        self._wire(self.manager.dataset)
        self._initialized = True
        return meta.to_dict()

    def load_indexes(self) -> Dict[str, Any]:
        loaded = self.manager.load()
        self._wire(self.manager.dataset)
        self._initialized = True
        dataset = self.manager.dataset
        return {
            "loaded": loaded,
            "tokensCount": len(dataset.tokens),
            "componentsCount": len(dataset.components),
        }

    def _wire(self, dataset: IndexDataset) -> None:
        known_classes: List[str] = list(dataset.utility_classes)
        for component in dataset.components:
            known_classes.extend(component.css_classes)
        upstream_ref = dataset.meta.upstream_ref if dataset.meta is not None else "main"
        self.search_engine.initialize(dataset.components, dataset.tokens, upstream_ref=upstream_ref)
        self.linter.initialize(dataset.tokens, known_classes)
        self.scaffolder.initialize(dataset.components)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("Server not initialized. Call initialize() first.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_tokens(self, scope: Optional[str] = None) -> Dict[str, Any]:
        self._ensure_initialized()
        tokens = self.manager.tokens()
        filtered = [token for token in tokens if token.category == scope] if scope else tokens
        return {
            "tokens": [token.to_dict() for token in filtered],
            "meta": {"totalCount": len(tokens), "filteredCount": len(filtered)},
        }

    def list_components(self) -> Dict[str, Any]:
        self._ensure_initialized()
        return {"components": [component.public_dict() for component in self.manager.components()]}

    def get_component(self, name: str) -> Dict[str, Any]:
        self._ensure_initialized()
        component = self.manager.find_component(name)
        if component is None:
            raise ComponentNotFoundError(name)
        payload = component.to_dict()
        payload["html"] = component.html_scaffold
        payload["classes"] = list(component.css_classes)
        return payload

    def scaffold_component(self, name: str, props: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        self._ensure_initialized()
        component = self.manager.find_component(name)
        if component is None:
            raise ComponentNotFoundError(name)
        return self.scaffolder.scaffold(component, props).to_dict()

    def search_examples(self, query: str) -> Dict[str, Any]:
        self._ensure_initialized()
        results = self.search_engine.search(query)
        return {
            "results": [result.to_dict() for result in results],
            "meta": {"totalResults": len(results), "query": query},
        }

    def lint_markup(self, html: str) -> Dict[str, Any]:
        self._ensure_initialized()
        issues = self.linter.lint(html)
        return {
            "valid": not any(issue.type == "error" for issue in issues),
            "issues": [issue.to_dict() for issue in issues],
            "suggestions": self.linter.suggestions(html, issues),
        }

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    def health_check(self) -> Dict[str, Any]:
        checks: List[Dict[str, Any]] = []
        dataset = self.manager.dataset
        if self.manager.has_valid_indexes():
            checks.append(
                {
                    "name": "indexes_loaded",
                    "status": "pass",
                    "message": f"{len(dataset.components)} components, {len(dataset.tokens)} tokens loaded",
                }
            )
        else:
            checks.append({"name": "indexes_loaded", "status": "fail", "message": "No indexes loaded"})

        if self.manager.store.is_accessible():
            checks.append({"name": "data_directory", "status": "pass"})
        else:
            checks.append(
                {"name": "data_directory", "status": "fail", "message": "Data directory not accessible"}
            )

        checks.append(
            {
                "name": "initialization",
                "status": "pass" if self._initialized else "fail",
                "message": "Server initialized" if self._initialized else "Server not initialized",
            }
        )

        if not self._initialized:
            status = UNHEALTHY
        elif any(check["status"] == "fail" for check in checks):
            status = DEGRADED
        else:
            status = HEALTHY

        meta = dataset.meta
        return {
            "status": status,
            "version": self.server_version,
            "upstreamVersion": meta.upstream_ref if meta is not None else None,
            "lastSync": meta.build_time if meta is not None else None,
            "stale": self.is_stale(),
            "checks": checks,
        }

    def is_stale(self) -> bool:
        return self.manager.is_stale(timedelta(hours=self.max_index_age_hours))

    def version(self) -> Dict[str, Any]:
        meta = self.manager.meta()
        return {
            "server": self.server_version,
            "upstream": meta.upstream_ref if meta is not None else "unknown",
            "lastSync": meta.build_time if meta is not None else "never",
            "indexMeta": meta.to_dict()
            if meta is not None
            else {
                "version": self.server_version,
                "upstreamCommit": "unknown",
                "upstreamRef": "unknown",
                "buildTime": "unknown",
                "componentsCount": 0,
                "tokensCount": 0,
            },
        }


__all__ = ["DEGRADED", "HEALTHY", "IndexServer", "UNHEALTHY"]
