"""
Current-status API endpoints.

Serves the latest ingested values of a meter or vehicle straight from the
one-row-per-device tables via GET /v1/status/meter/{meter_id} and
GET /v1/status/vehicle/{vehicle_id}.

CHANGELOG:
- 2026-10-08: Initial creation (STORY-012)

TODO:
- None
"""

from fastapi import APIRouter, HTTPException

from energy_analytics.api.deps import DbSession
from energy_analytics.schemas import MeterStatus, VehicleStatus
from energy_analytics.services.status import get_meter_status, get_vehicle_status

router = APIRouter(prefix="/v1/status", tags=["status"])


@router.get("/meter/{meter_id}", response_model=MeterStatus)
async def meter_status(meter_id: str, db: DbSession) -> MeterStatus:
    """Return the latest reading of a meter.

    Raises:
        HTTPException: 404 if the meter has never been ingested.
    """
    row = await get_meter_status(db, meter_id)
    if row is None:
        raise HTTPException(
            status_code=404,
            detail=f"No data found for meter_id '{meter_id}'",
        )
    return MeterStatus.model_validate(row)


@router.get("/vehicle/{vehicle_id}", response_model=VehicleStatus)
async def vehicle_status(vehicle_id: str, db: DbSession) -> VehicleStatus:
    """Return the latest reading of a vehicle.

    Raises:
        HTTPException: 404 if the vehicle has never been ingested.
    """
    row = await get_vehicle_status(db, vehicle_id)
    if row is None:
        raise HTTPException(
            status_code=404,
            detail=f"No data found for vehicle_id '{vehicle_id}'",
        )
    return VehicleStatus.model_validate(row)
