"""
Analytics API endpoint for 24-hour vehicle performance.

Provides GET /v1/analytics/performance/{vehicle_id}. NotFoundError and
PersistenceError raised by the aggregator are mapped to 404 / 503 by the
application's exception handlers.

CHANGELOG:
- 2026-10-05: Initial creation (STORY-007)

TODO:
- None
"""

import logging

from fastapi import APIRouter

from energy_analytics.api.deps import Aggregator
from energy_analytics.schemas import PerformanceSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/analytics", tags=["analytics"])


@router.get("/performance/{vehicle_id}", response_model=PerformanceSummary)
async def get_vehicle_performance(
    vehicle_id: str,
    aggregator: Aggregator,
) -> PerformanceSummary:
    """Return the vehicle's charging efficiency over the last 24 hours.

    Args:
        vehicle_id: Vehicle identifier (path parameter).
        aggregator: Window aggregator (injected).

    Returns:
        PerformanceSummary: Energy totals, efficiency ratio, average battery
            temperature, sample count and health status.
    """
    logger.info("Fetching performance analytics for vehicle: %s", vehicle_id)
    return await aggregator.get_performance(vehicle_id)
