"""
Current-status lookups (hot store).

Primary-key reads of the one-row-per-device tables maintained by the
ingestion writer. No cache in front: a read issued after a successful ingest
sees that ingest's values.

CHANGELOG:
- 2026-10-08: Initial creation (STORY-012)

TODO:
- None
"""

from sqlalchemy.ext.asyncio import AsyncSession

from energy_analytics.db.models import MeterCurrentStatus, VehicleCurrentStatus


async def get_meter_status(
    session: AsyncSession,
    meter_id: str,
) -> MeterCurrentStatus | None:
    """Return the current-status row of a meter, or None if never ingested."""
    return await session.get(MeterCurrentStatus, meter_id)


async def get_vehicle_status(
    session: AsyncSession,
    vehicle_id: str,
) -> VehicleCurrentStatus | None:
    """Return the current-status row of a vehicle, or None if never ingested."""
    return await session.get(VehicleCurrentStatus, vehicle_id)
