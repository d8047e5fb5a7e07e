from __future__ import annotations

from pathlib import Path

import pytest

from madeindex.indexing import IndexManager
from madeindex.server import IndexServer
from tests._fixtures.repo_builder import DesignRepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> DesignRepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return DesignRepoBuilder(tmp_path)


@pytest.fixture
def design_repo(repo_builder: DesignRepoBuilder) -> Path:
    """A repository populated with the default sample sources."""
    return repo_builder.write_default()


@pytest.fixture
def manager(tmp_path: Path) -> IndexManager:
    return IndexManager(tmp_path / "data" / "indexes", tmp_path / "data" / "cache")


@pytest.fixture
def built_server(manager: IndexManager, design_repo: Path) -> IndexServer:
    """An index server whose indexes were built from ``design_repo``."""
    server = IndexServer(manager)
    server.build_indexes(design_repo, ref="v1.2.0", commit="abc123")
    return server
