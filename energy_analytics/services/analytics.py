"""
Windowed efficiency analytics over the telemetry history.

Computes the trailing 24-hour charging-efficiency summary of a vehicle from
two bounded range reads, one per device class, each filtered by device id
and ``ts BETWEEN now - 24h AND now`` so the (device id, ts) composite
indexes drive the scan:

- vehicle stream: SUM(kwh_delivered_dc), AVG(battery_temp), COUNT(*)
- meter stream:   SUM(kwh_consumed_ac)

The meter that fed a vehicle is resolved by a pluggable ``meter_resolver``;
the default assumes the meter id equals the vehicle id.

CHANGELOG:
- 2026-10-09: Pluggable meter resolver (STORY-013)
- 2026-10-05: Initial creation (STORY-007)

TODO:
- None
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from energy_analytics.db.models import MeterTelemetryHistory, VehicleTelemetryHistory
from energy_analytics.exceptions import NotFoundError, PersistenceError
from energy_analytics.schemas import PerformanceSummary, as_utc
from energy_analytics.services.health import classify

logger = logging.getLogger(__name__)

WINDOW = timedelta(hours=24)

_RATIO_PLACES = Decimal("0.0001")
_ENERGY_PLACES = Decimal("0.0001")
_TEMP_PLACES = Decimal("0.01")

# (vehicle_id, window_start, window_end) -> meter_id
MeterResolver = Callable[[str, datetime, datetime], str]


def identity_meter_resolver(vehicle_id: str, start: datetime, end: datetime) -> str:
    """Assume the vehicle charged from the meter sharing its identifier."""
    return vehicle_id


def _decimal(value: object) -> Decimal:
    """Convert an aggregate result (Decimal, float, int or NULL) to Decimal."""
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def efficiency_ratio(delivered_dc: Decimal, consumed_ac: Decimal) -> Decimal:
    """DC delivered over AC consumed, 4 decimal places; 0 when AC is not positive."""
    if consumed_ac <= 0:
        return Decimal(0)
    return (delivered_dc / consumed_ac).quantize(_RATIO_PLACES, rounding=ROUND_HALF_UP)


class WindowAggregator:
    """Reads the history tables and builds a vehicle performance summary.

    Args:
        session_factory: Factory for the read-only session of each query.
        meter_resolver: Maps a vehicle id and window to the meter id whose
            AC consumption is compared against the vehicle's DC delivery.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        meter_resolver: MeterResolver = identity_meter_resolver,
    ) -> None:
        self._session_factory = session_factory
        self._meter_resolver = meter_resolver

    async def get_performance(
        self,
        vehicle_id: str,
        now: datetime | None = None,
    ) -> PerformanceSummary:
        """Summarise the vehicle's charging efficiency over ``[now - 24h, now]``.

        Args:
            vehicle_id: Vehicle to analyse.
            now: Window end; defaults to the current UTC time.

        Returns:
            PerformanceSummary: Totals, ratio, average temperature and health.

        Raises:
            NotFoundError: No vehicle readings fall inside the window.
            PersistenceError: The history could not be read.
        """
        end = datetime.now(UTC) if now is None else as_utc(now)
        start = end - WINDOW
        meter_id = self._meter_resolver(vehicle_id, start, end)

        logger.debug(
            "Fetching analytics for %s (meter %s) from %s to %s",
            vehicle_id,
            meter_id,
            start.isoformat(),
            end.isoformat(),
        )

        async with self._session_factory() as session:
            try:
                total_dc, avg_temp, count = await self._vehicle_totals(
                    session, vehicle_id, start, end,
                )
                if count == 0:
                    raise NotFoundError(vehicle_id, start, end)
                total_ac = await self._meter_total(session, meter_id, start, end)
            except (SQLAlchemyError, OSError) as exc:
                logger.error(
                    "Analytics query failed for vehicle %s", vehicle_id, exc_info=True,
                )
                raise PersistenceError(
                    f"Failed to read telemetry history for vehicle {vehicle_id}"
                ) from exc

        ratio = efficiency_ratio(total_dc, total_ac)
        return PerformanceSummary(
            vehicle_id=vehicle_id,
            period_start=start,
            period_end=end,
            total_energy_consumed_ac=float(total_ac.quantize(_ENERGY_PLACES)),
            total_energy_delivered_dc=float(total_dc.quantize(_ENERGY_PLACES)),
            efficiency_ratio=float(ratio),
            avg_battery_temp=float(
                avg_temp.quantize(_TEMP_PLACES, rounding=ROUND_HALF_UP)
            ),
            data_points_analyzed=count,
            health_status=classify(ratio, count),
        )

    async def _vehicle_totals(
        self,
        session: AsyncSession,
        vehicle_id: str,
        start: datetime,
        end: datetime,
    ) -> tuple[Decimal, Decimal, int]:
        history = VehicleTelemetryHistory
        stmt = select(
            func.sum(history.kwh_delivered_dc),
            func.avg(history.battery_temp),
            func.count(),
        ).where(
            history.vehicle_id == vehicle_id,
            history.ts >= start,
            history.ts <= end,
        )
        total_dc, avg_temp, count = (await session.execute(stmt)).one()
        return _decimal(total_dc), _decimal(avg_temp), int(count or 0)

    async def _meter_total(
        self,
        session: AsyncSession,
        meter_id: str,
        start: datetime,
        end: datetime,
    ) -> Decimal:
        history = MeterTelemetryHistory
        stmt = select(func.sum(history.kwh_consumed_ac)).where(
            history.meter_id == meter_id,
            history.ts >= start,
            history.ts <= end,
        )
        return _decimal((await session.execute(stmt)).scalar_one())
