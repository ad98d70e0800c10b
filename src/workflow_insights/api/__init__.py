"""FastAPI application factory for workflow insights."""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from workflow_insights.adapters.store_factory import create_store
from workflow_insights.api.routers import health, insights
from workflow_insights.builders import BuilderRegistry, default_registry
from workflow_insights.config import GenerationSettings, load_settings
from workflow_insights.errors import CollaboratorUnavailable, GenerationCancelled, UnknownCategory
from workflow_insights.observability import add_observability_middleware
from workflow_insights.ports import DirectoryPort, InsightStorePort

log = logging.getLogger("workflow_insights.api")


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": detail})


def create_app(
    *,
    directory: DirectoryPort,
    store: InsightStorePort | None = None,
    settings: GenerationSettings | None = None,
    registry: BuilderRegistry | None = None,
) -> FastAPI:
    """Build and return a configured FastAPI application."""
    app = FastAPI(
        title="Workflow Insights",
        description="Turns defend insight findings into exception-list remediation records",
        version="0.1.0",
    )

    app.state.directory = directory
    app.state.store = store if store is not None else create_store()
    app.state.settings = settings or load_settings()
    app.state.registry = registry or default_registry()

    # ---------------------------------------------------------------
    # Exception handlers: {"error": "..."} bodies
    # ---------------------------------------------------------------

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            loc = ".".join(str(l) for l in first.get("loc", []))
            msg = first.get("msg", "Invalid input")
            detail = f"{loc}: {msg}" if loc else msg
        else:
            detail = "Invalid JSON body"
        return _error(400, detail)

    @app.exception_handler(UnknownCategory)
    async def unknown_category_handler(request: Request, exc: UnknownCategory):
        return _error(400, str(exc))

    @app.exception_handler(CollaboratorUnavailable)
    async def collaborator_handler(request: Request, exc: CollaboratorUnavailable):
        log.warning("Generation aborted: %s", exc)
        return _error(503, str(exc))

    @app.exception_handler(GenerationCancelled)
    async def cancelled_handler(request: Request, exc: GenerationCancelled):
        return _error(409, str(exc))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        log.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error(500, str(exc))

    add_observability_middleware(app)

    # ---------------------------------------------------------------
    # Routers: versioned API under /v1, health and metrics at the root
    # ---------------------------------------------------------------

    api = APIRouter()
    api.include_router(insights.router)
    app.include_router(api, prefix="/v1")
    app.include_router(health.router)

    return app
