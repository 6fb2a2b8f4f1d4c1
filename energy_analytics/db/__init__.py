"""
Database package for SQLAlchemy models and session management.

CHANGELOG:
- 2026-09-29: Export the four telemetry models (STORY-002)
- 2026-09-28: Initial creation (STORY-001)

TODO:
- None
"""

from energy_analytics.db.models import (
    Base,
    MeterCurrentStatus,
    MeterTelemetryHistory,
    VehicleCurrentStatus,
    VehicleTelemetryHistory,
)
from energy_analytics.db.session import (
    create_engine,
    create_session_factory,
    dispose_engine,
    get_async_session,
    get_session_factory,
    init_engine,
)

__all__ = [
    "Base",
    "MeterCurrentStatus",
    "MeterTelemetryHistory",
    "VehicleCurrentStatus",
    "VehicleTelemetryHistory",
    "create_engine",
    "create_session_factory",
    "dispose_engine",
    "get_async_session",
    "get_session_factory",
    "init_engine",
]
