"""
FastAPI application entry point for the energy analytics API.

Registers the ingest, analytics, status and health routers and maps the
core exception taxonomy to HTTP responses:

- ValidationError  -> 400 (request bodies failing the record schema too)
- NotFoundError    -> 404
- PersistenceError -> 503

CHANGELOG:
- 2026-10-19: Report request-body schema errors as 400 with the offending
  field, like core validation errors (STORY-015)
- 2026-10-08: Register status router (STORY-012)
- 2026-10-06: Register health router, configure JSON logging (STORY-010)
- 2026-10-05: Register analytics router (STORY-007)
- 2026-10-03: Initial creation (STORY-005)

TODO:
- None
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from energy_analytics.api.analytics import router as analytics_router
from energy_analytics.api.health import router as health_router
from energy_analytics.api.ingest import router as ingest_router
from energy_analytics.api.status import router as status_router
from energy_analytics.config import get_settings
from energy_analytics.db.session import dispose_engine, init_engine
from energy_analytics.exceptions import NotFoundError, PersistenceError, ValidationError
from energy_analytics.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging and the database engine."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    init_engine()
    logger.info("Energy analytics API ready")
    yield
    await dispose_engine()
    logger.info("Energy analytics API shutting down")


app = FastAPI(
    title="Energy Analytics API",
    description="Meter and vehicle telemetry ingestion with 24h charging-efficiency analytics.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(ingest_router)
app.include_router(analytics_router)
app.include_router(status_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Invalid input caught by the core: caller's fault, not retried."""
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "field": exc.field},
    )


def _field_path(loc: tuple) -> str:
    """Render a request error location as ``voltage`` or ``records[3].voltage``."""
    path = ""
    for part in loc:
        if part == "body":
            continue
        if isinstance(part, int):
            path = f"{path or 'records'}[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path or "body"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Body rejected by the record schema: same 400 as a core ValidationError."""
    error = exc.errors()[0]
    return await validation_error_handler(
        request, ValidationError(_field_path(tuple(error["loc"])), error["msg"]),
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """No data in the requested window."""
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Storage failure; the write was rolled back and may be retried."""
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/")
async def root() -> dict:
    """Root health check endpoint.

    Returns:
        dict: JSON object with application status.
    """
    return {"status": "ok"}
