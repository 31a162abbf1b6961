"""FastAPI application entrypoint for apidocgen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..classifier import classify
from ..orchestrator import BuildOutcome, Orchestrator


class ParseRequest(BaseModel):
    comment: str


class ParseResponse(BaseModel):
    shape: Optional[str] = None
    document: Optional[Dict[str, Any]] = None


class CatalogRequest(BaseModel):
    path: str


class BuildRequest(BaseModel):
    path: str
    output: Optional[str] = None


class BuildResponse(BaseModel):
    output_dir: str
    pages: List[str]
    packages: List[str]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing apidocgen operations."""

    app = FastAPI(title="apidocgen Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # A fresh orchestrator per request keeps aggregation state private.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/parse", response_model=ParseResponse)
    async def parse_comment(payload: ParseRequest) -> ParseResponse:
        document = classify(payload.comment)
        if document is None:
            return ParseResponse()
        return ParseResponse(shape=document.shape.value, document=document.to_dict())

    @app.post("/catalog")
    async def catalog(
        payload: CatalogRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> Dict[str, Any]:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, orchestrator.collect, payload.path)
        return result.to_dict()

    @app.post("/build", response_model=BuildResponse)
    async def build(
        payload: BuildRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> BuildResponse:
        def _run_build() -> BuildOutcome:
            return orchestrator.run_build(payload.path, payload.output)

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run_build)
        return BuildResponse(
            output_dir=str(outcome.output_dir),
            pages=[str(page) for page in outcome.pages],
            packages=list(outcome.catalog.package_names),
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(
        _: Any, exc: NotADirectoryError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
