"""
Process-wide async engine and session factory.

The engine (asyncpg against PostgreSQL) is created on first use or by the
application lifespan, and disposed on shutdown. Services never build their
own engine: the writer and aggregator receive ``get_session_factory()``
through their constructor, request handlers get a session from
``get_async_session``. Every ingest or query checks out exactly one pooled
connection, so ``DB_POOL_SIZE + DB_MAX_OVERFLOW`` bounds concurrent writes.

CHANGELOG:
- 2026-10-06: Pool sizing from settings, dispose_engine() for shutdown (STORY-010)
- 2026-10-03: Add get_session_factory() for services that open their own
  transactions (STORY-004)
- 2026-09-28: Initial creation (STORY-001)

TODO:
- None
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from energy_analytics.config import get_settings

async_engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine() -> AsyncEngine:
    """Build the telemetry database engine from DATABASE_URL and pool settings."""
    settings = get_settings()
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """Bind a session factory to *engine* (a fresh engine from settings if None).

    Sessions keep attribute values after commit so status rows can be
    serialised once the transaction has ended.
    """
    return async_sessionmaker(
        engine if engine is not None else create_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


def init_engine() -> None:
    """Create the shared engine and factory unless they already exist."""
    global async_engine, async_session_factory  # noqa: PLW0603
    if async_engine is None:
        async_engine = create_engine()
        async_session_factory = create_session_factory(async_engine)


async def dispose_engine() -> None:
    """Close pooled connections and forget the shared engine."""
    global async_engine, async_session_factory  # noqa: PLW0603
    engine, async_engine, async_session_factory = async_engine, None, None
    if engine is not None:
        await engine.dispose()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory, creating the engine on first call."""
    init_engine()
    assert async_session_factory is not None, "Session factory not initialized"
    return async_session_factory


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    Yields:
        AsyncSession: Closed (connection returned to the pool) after the
            response is sent.
    """
    async with get_session_factory()() as session:
        yield session
