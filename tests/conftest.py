"""
Shared test fixtures.

Behavioural tests of the writer and aggregator run against a temporary
SQLite database (aiosqlite) created from the ORM metadata; API tests mock
the services through FastAPI dependency overrides.

CHANGELOG:
- 2026-10-04: Add SQLite engine, session factory, writer and aggregator
  fixtures (STORY-009)
- 2026-09-28: Initial creation (STORY-001)

TODO:
- None
"""

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool

from energy_analytics.db.models import Base
from energy_analytics.services.analytics import WindowAggregator
from energy_analytics.services.ingestion import IngestionWriter

# Settings environment variable names, used for cleanup.
_ALL_ENV_VARS = (
    "DATABASE_URL",
    "DB_ECHO",
    "DB_POOL_SIZE",
    "DB_MAX_OVERFLOW",
    "LOG_LEVEL",
    "MAX_BATCH_SIZE",
)


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Reset settings env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@localhost/db")
    monkeypatch.chdir(tmp_path)


@pytest_asyncio.fixture()
async def engine(tmp_path: Path) -> AsyncEngine:
    """Async SQLite engine on a fresh database file with all tables created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'telemetry.db'}",
        poolclass=AsyncAdaptedQueuePool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the SQLite test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
def writer(session_factory: async_sessionmaker[AsyncSession]) -> IngestionWriter:
    """IngestionWriter bound to the SQLite test database."""
    return IngestionWriter(session_factory)


@pytest.fixture()
def aggregator(session_factory: async_sessionmaker[AsyncSession]) -> WindowAggregator:
    """WindowAggregator (identity meter mapping) bound to the SQLite test database."""
    return WindowAggregator(session_factory)


@pytest.fixture()
def unavailable_session_factory(tmp_path: Path) -> async_sessionmaker[AsyncSession]:
    """Session factory whose database file cannot be opened."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'telemetry.db'}",
    )
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
