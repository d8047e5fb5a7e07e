"""FastAPI application exposing the index operations over HTTP."""

from __future__ import annotations

import asyncio
import functools
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..config import MadeIndexConfig, load_config
from ..errors import ComponentNotFoundError, NotInitializedError, ScaffoldingError
from ..logging import get_logger
from ..server import IndexServer

_LOGGER = get_logger("service")


class ScaffoldRequest(BaseModel):
    props: Dict[str, Any] = Field(default_factory=dict)


class SearchRequest(BaseModel):
    query: str


class LintRequest(BaseModel):
    html: str


class BuildRequest(BaseModel):
    repo_path: Optional[str] = None
    ref: str = "main"
    commit: str = "unknown"


def _default_server() -> IndexServer:
    return IndexServer.from_config(load_config(Path.cwd()))


async def _run_blocking(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


def create_app(
    server_factory: Callable[[], IndexServer] = _default_server,
    *,
    repo_path: Optional[Path] = None,
) -> FastAPI:
    """Create the FastAPI application; the server is built and initialized once."""

    app = FastAPI(title="madeindex", version=__version__)
    server = server_factory()
    server.initialize()
    build_lock = threading.Lock()

    async def get_server() -> IndexServer:
        return server

    @app.get("/health")
    async def health(index_server: IndexServer = Depends(get_server)) -> Dict[str, Any]:
        return index_server.health_check()

    @app.get("/version")
    async def version(index_server: IndexServer = Depends(get_server)) -> Dict[str, Any]:
        return index_server.version()

    @app.get("/tokens")
    async def list_tokens(
        scope: Optional[str] = None,
        index_server: IndexServer = Depends(get_server),
    ) -> Dict[str, Any]:
        return index_server.list_tokens(scope)

    @app.get("/components")
    async def list_components(index_server: IndexServer = Depends(get_server)) -> Dict[str, Any]:
        return index_server.list_components()

    @app.get("/components/{name}")
    async def get_component(name: str, index_server: IndexServer = Depends(get_server)) -> Dict[str, Any]:
        return index_server.get_component(name)

    @app.post("/components/{name}/scaffold")
    async def scaffold_component(
        name: str,
        payload: ScaffoldRequest,
        index_server: IndexServer = Depends(get_server),
    ) -> Dict[str, Any]:
        return await _run_blocking(index_server.scaffold_component, name, payload.props)

    @app.post("/search")
    async def search_examples(
        payload: SearchRequest,
        index_server: IndexServer = Depends(get_server),
    ) -> Dict[str, Any]:
        return await _run_blocking(index_server.search_examples, payload.query)

    @app.post("/lint")
    async def lint_markup(
        payload: LintRequest,
        index_server: IndexServer = Depends(get_server),
    ) -> Dict[str, Any]:
        return await _run_blocking(index_server.lint_markup, payload.html)

    @app.post("/indexes/build")
    async def build_indexes(
        payload: BuildRequest,
        index_server: IndexServer = Depends(get_server),
    ) -> Dict[str, Any]:
        target = Path(payload.repo_path) if payload.repo_path else repo_path
        if target is None:
            raise ValueError("repo_path is required")

        def _run_build() -> Dict[str, Any]:
            with build_lock:
                return index_server.build_indexes(target, ref=payload.ref, commit=payload.commit)

        return await _run_blocking(_run_build)

    @app.post("/indexes/load")
    async def load_indexes(index_server: IndexServer = Depends(get_server)) -> Dict[str, Any]:
        return await _run_blocking(index_server.load_indexes)

    @app.exception_handler(ComponentNotFoundError)
    async def component_not_found_handler(_: Request, exc: ComponentNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Request, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Request, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotInitializedError)
    async def not_initialized_handler(_: Request, exc: NotInitializedError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(ScaffoldingError)
    async def scaffolding_error_handler(_: Request, exc: ScaffoldingError) -> JSONResponse:
        _LOGGER.error("Scaffolding request failed: %s", exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    config: MadeIndexConfig, host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    app = create_app(lambda: IndexServer.from_config(config), repo_path=config.repo_path)
    _LOGGER.info("Serving madeindex on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
