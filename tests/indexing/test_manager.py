from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from madeindex.config import SourcesConfig
from madeindex.indexing import IndexManager
from tests._fixtures.repo_builder import DesignRepoBuilder

EXPECTED_TOKENS = [
    "--made-color-primary-500",
    "--made-space-4",
    "--made-font-size-base",
    "--made-radius-md",
    "--made-color-neutral-100",
    "--made-duration-fast",
]


def _fresh_manager(tmp_path: Path) -> IndexManager:
    return IndexManager(tmp_path / "data" / "indexes", tmp_path / "data" / "cache")


def test_build_indexes_tokens_components_and_utilities(manager: IndexManager, design_repo: Path) -> None:
    meta = manager.build(design_repo, ref="v1.2.0", commit="abc123")

    assert [token.name for token in manager.tokens()] == EXPECTED_TOKENS
    assert [component.name for component in manager.components()] == ["Button", "Card"]
    assert manager.utility_classes() == [
        "made-btn",
        "made-btn-primary",
        "made-btn-secondary",
        "made-card",
        "made-grid",
    ]
    assert meta.upstream_ref == "v1.2.0"
    assert meta.upstream_commit == "abc123"
    assert meta.tokens_count == 6
    assert meta.components_count == 2
    assert meta.build_time.endswith("Z")
    assert manager.has_valid_indexes()
    assert manager.store.meta_path.exists()


def test_root_stylesheet_wins_over_token_json(manager: IndexManager, design_repo: Path) -> None:
    manager.build(design_repo)

    primary = next(token for token in manager.tokens() if token.name == "--made-color-primary-500")
    spacing = next(token for token in manager.tokens() if token.name == "--made-space-4")
    duration = next(token for token in manager.tokens() if token.name == "--made-duration-fast")

    assert primary.value == "#FF5F00"
    assert spacing.description == "Default gap"
    assert duration.category == "time"
    assert duration.description == "duration fast timing value (150ms)"


def test_build_rejects_missing_or_file_paths(manager: IndexManager, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        manager.build(tmp_path / "missing")

    file_path = tmp_path / "not-a-dir.txt"
    file_path.write_text("x", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        manager.build(file_path)


def test_build_of_empty_repo_produces_empty_dataset(manager: IndexManager, repo_builder: DesignRepoBuilder) -> None:
    meta = manager.build(repo_builder.path())

    assert meta.tokens_count == 0
    assert meta.components_count == 0
    assert not manager.has_valid_indexes()


def test_load_restores_persisted_indexes(manager: IndexManager, design_repo: Path, tmp_path: Path) -> None:
    manager.build(design_repo, ref="v1.2.0", commit="abc123")

    reloaded = _fresh_manager(tmp_path)
    assert reloaded.load() is True

    assert reloaded.dataset == manager.dataset


def test_failed_load_keeps_current_dataset(manager: IndexManager, design_repo: Path) -> None:
    manager.build(design_repo)
    before = manager.dataset
    manager.store.tokens_path.write_text("[{", encoding="utf-8")

    assert manager.load() is False
    assert manager.dataset is before


def test_load_without_artifacts_returns_false(manager: IndexManager) -> None:
    assert manager.load() is False
    assert manager.meta() is None
    assert manager.is_stale()


def test_returned_components_are_independent_copies(manager: IndexManager, design_repo: Path) -> None:
    manager.build(design_repo)

    found = manager.find_component("BUTTON")
    assert found is not None
    found.tags.append("mutated")
    found.examples.clear()

    again = manager.find_component("button")
    assert again is not None
    assert "mutated" not in again.tags
    assert len(again.examples) == 3

    listed = manager.components()
    listed[0].variants["variant"].append("rogue")
    assert manager.find_component("Button").variants["variant"] == ["primary", "secondary", "ghost"]


def test_token_and_component_queries(manager: IndexManager, design_repo: Path) -> None:
    manager.build(design_repo)

    assert [token.name for token in manager.tokens_by_category("color")] == [
        "--made-color-primary-500",
        "--made-color-neutral-100",
    ]
    assert [token.name for token in manager.search_tokens("gap")] == ["--made-space-4"]
    assert [component.name for component in manager.search_components("basic card")] == ["Card"]
    assert [token.name for token in manager.component_tokens("button")] == ["--made-color-primary-500"]
    assert manager.component_classes("Card") == ["made-card", "made-card-body", "made-card-title"]
    assert manager.component_classes("Missing") == []
    assert manager.find_component("Missing") is None


def test_staleness_uses_build_time(manager: IndexManager, design_repo: Path) -> None:
    manager.build(design_repo)

    assert not manager.is_stale()
    assert manager.is_stale(timedelta(seconds=-1))


def test_export_import_round_trip(manager: IndexManager, design_repo: Path, tmp_path: Path) -> None:
    manager.build(design_repo, ref="v1.2.0", commit="abc123")
    payload = manager.export_indexes()

    other = IndexManager(tmp_path / "other" / "indexes", tmp_path / "other" / "cache")
    imported = other.import_indexes(payload)

    assert imported == manager.dataset
    assert other.export_indexes() == payload
    assert other.store.components_path.exists()


def test_import_rejects_malformed_payload(manager: IndexManager) -> None:
    with pytest.raises(ValueError):
        manager.import_indexes({"tokens": "nope", "components": []})
    assert manager.dataset.is_empty


def test_configured_sources_are_tried_first(repo_builder: DesignRepoBuilder, tmp_path: Path) -> None:
    repo_builder.write(
        {
            "theme/vars.css": ":root { --made-space-2: 0.5rem; }",
            "made-css-variables.css": ":root { --made-space-2: 9rem; --made-space-8: 2rem; }",
        }
    )
    manager = IndexManager(
        tmp_path / "data" / "indexes",
        tmp_path / "data" / "cache",
        sources=SourcesConfig(token_stylesheets=["theme/vars.css"]),
    )

    manager.build(repo_builder.path())

    assert [(token.name, token.value) for token in manager.tokens()] == [
        ("--made-space-2", "0.5rem"),
        ("--made-space-8", "2rem"),
    ]


def test_versioned_dist_directories_prefer_newest(repo_builder: DesignRepoBuilder, manager: IndexManager) -> None:
    repo_builder.write(
        {
            "packages/made-css/dist/2.9.0/made-css-variables.css": ":root { --made-radius-sm: 2px; }",
            "packages/made-css/dist/2.10.0/made-css-variables.css": ":root { --made-radius-sm: 3px; }",
        }
    )

    manager.build(repo_builder.path())

    assert [token.value for token in manager.tokens()] == ["3px"]


def test_malformed_token_json_is_skipped(repo_builder: DesignRepoBuilder, manager: IndexManager) -> None:
    repo_builder.write(
        {
            "tokens.json": "{broken",
            "made-css-variables.css": ":root { --made-gap-1: 4px; }",
        }
    )

    manager.build(repo_builder.path())

    assert [token.name for token in manager.tokens()] == ["--made-gap-1"]
