"""
FastAPI dependency injection providers.

Provides database sessions, the ingestion writer, the window aggregator and
request limits for use with FastAPI's Depends() mechanism. Services receive
the session factory through their constructor; nothing here holds state
beyond the lazily created engine in energy_analytics.db.session.

CHANGELOG:
- 2026-10-09: Add WindowAggregator provider (STORY-013)
- 2026-10-04: Add IngestionWriter provider and MaxBatchSize (STORY-009)
- 2026-09-28: Initial creation (STORY-001)

TODO:
- None
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from energy_analytics.config import get_settings
from energy_analytics.db.session import get_async_session, get_session_factory
from energy_analytics.services.analytics import WindowAggregator
from energy_analytics.services.ingestion import IngestionWriter

# Type alias for injecting an async DB session via FastAPI Depends().
# Usage in route handlers:
#   async def my_route(db: DbSession):
#       result = await db.execute(...)
DbSession = Annotated[AsyncSession, Depends(get_async_session)]


def get_ingestion_writer() -> IngestionWriter:
    """Build an IngestionWriter bound to the shared session factory.

    Returns:
        IngestionWriter: Writer for the dual-path ingest operations.
    """
    return IngestionWriter(get_session_factory())


def get_window_aggregator() -> WindowAggregator:
    """Build a WindowAggregator bound to the shared session factory.

    Returns:
        WindowAggregator: Aggregator using the identity meter mapping.
    """
    return WindowAggregator(get_session_factory())


def get_max_batch_size() -> int:
    """Return the configured MAX_BATCH_SIZE."""
    return get_settings().MAX_BATCH_SIZE


Writer = Annotated[IngestionWriter, Depends(get_ingestion_writer)]
Aggregator = Annotated[WindowAggregator, Depends(get_window_aggregator)]
MaxBatchSize = Annotated[int, Depends(get_max_batch_size)]
