"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from madeindex.indexing import IndexManager
from madeindex.server import IndexServer
from madeindex.service import create_app


@pytest.fixture
def client(built_server: IndexServer, design_repo: Path) -> TestClient:
    app = create_app(lambda: built_server, repo_path=design_repo)
    return TestClient(app)


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["upstreamVersion"] == "v1.2.0"


def test_version_endpoint(client: TestClient) -> None:
    data = client.get("/version").json()

    assert data["upstream"] == "v1.2.0"
    assert data["indexMeta"]["tokensCount"] == 6


def test_tokens_endpoint_filters_by_scope(client: TestClient) -> None:
    data = client.get("/tokens", params={"scope": "color"}).json()

    assert data["meta"] == {"totalCount": 6, "filteredCount": 2}


def test_component_endpoints(client: TestClient) -> None:
    listed = client.get("/components").json()
    found = client.get("/components/button")
    missing = client.get("/components/tabs")

    assert [item["name"] for item in listed["components"]] == ["Button", "Card"]
    assert found.status_code == 200
    assert found.json()["classes"] == ["made-btn", "made-btn-primary", "made-btn-secondary"]
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Component 'tabs' not found"}


def test_scaffold_endpoint(client: TestClient) -> None:
    response = client.post("/components/Button/scaffold", json={"props": {"variant": "secondary"}})

    assert response.status_code == 200
    assert 'class="made-btn made-btn-secondary"' in response.json()["html"]

    defaults = client.post("/components/Button/scaffold", json={})
    assert defaults.status_code == 200
    assert defaults.json()["notes"][0] == "Component: Button"


def test_search_endpoint(client: TestClient) -> None:
    response = client.post("/search", json={"query": "button"})

    assert response.status_code == 200
    assert response.json()["results"][0]["title"] == "Button Component"
    assert client.post("/search", json={}).status_code == 422


def test_lint_endpoint(client: TestClient) -> None:
    response = client.post("/lint", json={"html": "<img>"})

    assert response.status_code == 200
    assert response.json()["valid"] is False


def test_build_and_load_endpoints(client: TestClient, tmp_path: Path) -> None:
    built = client.post("/indexes/build", json={"ref": "v2.0.0"})
    missing = client.post("/indexes/build", json={"repo_path": str(tmp_path / "missing")})
    loaded = client.post("/indexes/load")

    assert built.status_code == 200
    assert built.json()["upstreamRef"] == "v2.0.0"
    assert built.json()["componentsCount"] == 2
    assert missing.status_code == 404
    assert loaded.json() == {"loaded": True, "tokensCount": 6, "componentsCount": 2}
    assert client.get("/version").json()["upstream"] == "v2.0.0"


def test_build_without_repo_path_is_rejected(manager: IndexManager) -> None:
    client = TestClient(create_app(lambda: IndexServer(manager)))

    response = client.post("/indexes/build", json={})

    assert response.status_code == 400
    assert response.json() == {"detail": "repo_path is required"}


def test_uninitialized_server_returns_503(manager: IndexManager, monkeypatch: pytest.MonkeyPatch) -> None:
    server = IndexServer(manager)
    monkeypatch.setattr(server, "initialize", lambda: None)
    client = TestClient(create_app(lambda: server))

    response = client.get("/tokens")

    assert response.status_code == 503
    assert response.json()["detail"] == "Server not initialized. Call initialize() first."
    assert client.get("/health").json()["status"] == "unhealthy"
