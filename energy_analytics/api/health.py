"""
Liveness endpoint backed by a database round trip.

GET /health answers 200 when ``SELECT 1`` completes within
``PING_TIMEOUT_S`` and 503 otherwise, so a load balancer stops routing
ingest traffic to an instance that cannot commit.

CHANGELOG:
- 2026-10-06: Initial creation (STORY-010)

TODO:
- None
"""

import asyncio
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from energy_analytics import __version__
from energy_analytics.db.session import get_session_factory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

PING_TIMEOUT_S = 2.0


async def _ping() -> None:
    async with get_session_factory()() as session:
        await session.execute(text("SELECT 1"))


async def _check_db() -> str:
    """Run the database ping.

    Returns:
        "ok" if the ping succeeds in time, "error" otherwise.
    """
    try:
        await asyncio.wait_for(_ping(), timeout=PING_TIMEOUT_S)
    except (SQLAlchemyError, OSError, TimeoutError):
        logger.warning("Health check: database ping failed", exc_info=True)
        return "error"
    return "ok"


@router.get("/health")
async def health_check() -> JSONResponse:
    """Report service and database status.

    Returns:
        JSONResponse: ``{"status", "db", "version"}`` with HTTP 200 when the
            database is reachable, HTTP 503 (status ``degraded``) when not.
    """
    db_status = await _check_db()
    healthy = db_status == "ok"

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "ok" if healthy else "degraded",
            "db": db_status,
            "version": __version__,
        },
    )
