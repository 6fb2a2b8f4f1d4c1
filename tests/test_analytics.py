"""
Tests for the 24-hour WindowAggregator.

Seeds the history tables through the IngestionWriter and checks window
bounds, totals, the efficiency ratio, the health label and error mapping.

CHANGELOG:
- 2026-10-09: Add meter resolver tests (STORY-013)
- 2026-10-05: Initial creation (STORY-007)

TODO:
- None
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from energy_analytics.exceptions import NotFoundError, PersistenceError
from energy_analytics.services.analytics import (
    WINDOW,
    WindowAggregator,
    efficiency_ratio,
    identity_meter_resolver,
)
from energy_analytics.services.health import HealthStatus

T = datetime(2026, 10, 18, 8, 0, tzinfo=UTC)
NOW = T + timedelta(minutes=10)


def _vehicle(vehicle_id: str, ts: datetime, kwh: str = "105.2134",
             temp: str = "32.50") -> dict:
    return {
        "vehicle_id": vehicle_id,
        "soc": "80",
        "kwh_delivered_dc": kwh,
        "battery_temp": temp,
        "ts": ts,
    }


def _meter(meter_id: str, ts: datetime, kwh: str = "125.5432") -> dict:
    return {
        "meter_id": meter_id,
        "kwh_consumed_ac": kwh,
        "voltage": "240.5",
        "ts": ts,
    }


# ---------------------------------------------------------------------------
# efficiency_ratio
# ---------------------------------------------------------------------------


class TestEfficiencyRatio:
    """DC/AC ratio rounding and zero-division handling."""

    def test_rounds_to_four_places(self) -> None:
        assert efficiency_ratio(Decimal("1052.134"), Decimal("1255.432")) == Decimal("0.8381")

    def test_half_up(self) -> None:
        assert efficiency_ratio(Decimal("1.00005"), Decimal("1")) == Decimal("1.0001")

    def test_zero_ac_yields_zero(self) -> None:
        assert efficiency_ratio(Decimal("50"), Decimal("0")) == Decimal("0")

    def test_ratio_above_one_is_reported(self) -> None:
        """A faulty meter can make DC exceed AC; the ratio is not clamped."""
        assert efficiency_ratio(Decimal("12"), Decimal("10")) == Decimal("1.2000")


class TestIdentityResolver:
    def test_returns_vehicle_id(self) -> None:
        assert identity_meter_resolver("V-1", T, NOW) == "V-1"


# ---------------------------------------------------------------------------
# get_performance
# ---------------------------------------------------------------------------


class TestGetPerformance:
    """Summaries built from the history tables."""

    @pytest.mark.asyncio()
    async def test_end_to_end_warning(self, writer, aggregator) -> None:
        """Ten paired readings at 105.2134 DC / 125.5432 AC classify as WARNING."""
        await writer.ingest_vehicle_batch(
            [_vehicle("VEH-001", T + timedelta(minutes=i)) for i in range(10)]
        )
        await writer.ingest_meter_batch(
            [_meter("VEH-001", T + timedelta(minutes=i)) for i in range(10)]
        )

        summary = await aggregator.get_performance("VEH-001", now=NOW)

        assert summary.vehicle_id == "VEH-001"
        assert summary.data_points_analyzed == 10
        assert summary.total_energy_delivered_dc == pytest.approx(1052.134)
        assert summary.total_energy_consumed_ac == pytest.approx(1255.432)
        assert summary.efficiency_ratio == pytest.approx(0.8381)
        assert summary.avg_battery_temp == pytest.approx(32.5)
        assert summary.health_status == HealthStatus.WARNING
        assert summary.period_end == NOW
        assert summary.period_start == NOW - WINDOW

    @pytest.mark.asyncio()
    async def test_only_window_readings_count(self, writer, aggregator) -> None:
        """Readings older than 24h or after now are ignored."""
        inside = [_vehicle("V-1", NOW - timedelta(hours=h), kwh="1") for h in range(1, 6)]
        outside = [
            _vehicle("V-1", NOW - timedelta(hours=25), kwh="100"),
            _vehicle("V-1", NOW - timedelta(days=3), kwh="100"),
            _vehicle("V-1", NOW + timedelta(minutes=1), kwh="100"),
        ]
        await writer.ingest_vehicle_batch(inside + outside)
        await writer.ingest_meter(_meter("V-1", NOW - timedelta(hours=1), kwh="10"))
        await writer.ingest_meter(_meter("V-1", NOW - timedelta(hours=30), kwh="1000"))

        summary = await aggregator.get_performance("V-1", now=NOW)

        assert summary.data_points_analyzed == 5
        assert summary.total_energy_delivered_dc == pytest.approx(5.0)
        assert summary.total_energy_consumed_ac == pytest.approx(10.0)
        assert summary.efficiency_ratio == pytest.approx(0.5)
        assert summary.health_status == HealthStatus.INSUFFICIENT_DATA

    @pytest.mark.asyncio()
    async def test_window_bounds_inclusive(self, writer, aggregator) -> None:
        """Readings exactly at now - 24h and at now are included."""
        await writer.ingest_vehicle_batch([
            _vehicle("V-1", NOW - WINDOW, kwh="1"),
            _vehicle("V-1", NOW, kwh="2"),
        ])

        summary = await aggregator.get_performance("V-1", now=NOW)

        assert summary.data_points_analyzed == 2
        assert summary.total_energy_delivered_dc == pytest.approx(3.0)

    @pytest.mark.asyncio()
    async def test_other_vehicles_excluded(self, writer, aggregator) -> None:
        await writer.ingest_vehicle_batch([
            _vehicle("V-1", T, kwh="1"),
            _vehicle("V-2", T, kwh="50"),
        ])

        summary = await aggregator.get_performance("V-1", now=NOW)

        assert summary.data_points_analyzed == 1
        assert summary.total_energy_delivered_dc == pytest.approx(1.0)

    @pytest.mark.asyncio()
    async def test_no_meter_data_yields_zero_ratio(self, writer, aggregator) -> None:
        """Without AC readings the ratio is 0, classified CRITICAL."""
        await writer.ingest_vehicle_batch(
            [_vehicle("V-1", T + timedelta(minutes=i)) for i in range(12)]
        )

        summary = await aggregator.get_performance("V-1", now=NOW)

        assert summary.total_energy_consumed_ac == 0.0
        assert summary.efficiency_ratio == 0.0
        assert summary.health_status == HealthStatus.CRITICAL

    @pytest.mark.asyncio()
    async def test_average_temperature_rounded(self, writer, aggregator) -> None:
        await writer.ingest_vehicle_batch([
            _vehicle("V-1", T, temp="-5.00"),
            _vehicle("V-1", T + timedelta(minutes=1), temp="10.00"),
            _vehicle("V-1", T + timedelta(minutes=2), temp="20.00"),
            _vehicle("V-1", T + timedelta(minutes=3), temp="15.00"),
        ])

        summary = await aggregator.get_performance("V-1", now=NOW)

        assert summary.avg_battery_temp == pytest.approx(10.0)

    @pytest.mark.asyncio()
    async def test_naive_now_treated_as_utc(self, writer, aggregator) -> None:
        await writer.ingest_vehicle(_vehicle("V-1", T))

        summary = await aggregator.get_performance("V-1", now=NOW.replace(tzinfo=None))

        assert summary.period_end == NOW
        assert summary.data_points_analyzed == 1

    @pytest.mark.asyncio()
    async def test_defaults_to_current_time(self, writer, aggregator) -> None:
        """Without now, the window ends at the current UTC time."""
        recent = datetime.now(UTC) - timedelta(minutes=5)
        await writer.ingest_vehicle(_vehicle("V-1", recent))

        summary = await aggregator.get_performance("V-1")

        assert summary.data_points_analyzed == 1
        assert summary.period_end - summary.period_start == WINDOW

    @pytest.mark.asyncio()
    async def test_custom_meter_resolver(self, writer, session_factory) -> None:
        """The resolver decides which meter's AC energy is compared."""
        calls = []

        def resolver(vehicle_id: str, start: datetime, end: datetime) -> str:
            calls.append((vehicle_id, start, end))
            return "CHARGER-7"

        await writer.ingest_vehicle(_vehicle("V-1", T, kwh="9"))
        await writer.ingest_meter(_meter("CHARGER-7", T, kwh="10"))
        await writer.ingest_meter(_meter("V-1", T, kwh="1000"))

        aggregator = WindowAggregator(session_factory, meter_resolver=resolver)
        summary = await aggregator.get_performance("V-1", now=NOW)

        assert summary.total_energy_consumed_ac == pytest.approx(10.0)
        assert summary.efficiency_ratio == pytest.approx(0.9)
        assert calls == [("V-1", NOW - WINDOW, NOW)]


class TestGetPerformanceErrors:
    """NotFoundError and PersistenceError."""

    @pytest.mark.asyncio()
    async def test_unknown_vehicle(self, aggregator) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await aggregator.get_performance("GHOST", now=NOW)

        assert exc_info.value.device_id == "GHOST"
        assert "GHOST" in str(exc_info.value)

    @pytest.mark.asyncio()
    async def test_meter_data_alone_is_not_enough(self, writer, aggregator) -> None:
        """No vehicle readings in the window is NotFound even with AC data."""
        await writer.ingest_meter(_meter("V-1", T))
        await writer.ingest_vehicle(_vehicle("V-1", NOW - timedelta(days=2)))

        with pytest.raises(NotFoundError):
            await aggregator.get_performance("V-1", now=NOW)

    @pytest.mark.asyncio()
    async def test_storage_unavailable(self, unavailable_session_factory) -> None:
        aggregator = WindowAggregator(unavailable_session_factory)

        with pytest.raises(PersistenceError):
            await aggregator.get_performance("V-1", now=NOW)
