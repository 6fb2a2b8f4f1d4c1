"""
Pydantic schemas for telemetry records, current-state views and analytics.

Records accept both snake_case field names and the camelCase names sent by
existing device clients (``meterId``, ``kwhConsumedAc``, ``timestamp``...).
Numeric upper bounds are the largest values the NUMERIC columns can store, so
rounding a valid reading to the column scale never overflows its row.

CHANGELOG:
- 2026-10-19: Bound readings by the largest storable column value (STORY-015)
- 2026-10-08: Add MeterStatus / VehicleStatus views (STORY-012)
- 2026-10-01: Initial creation (STORY-003)

TODO:
- None
"""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from energy_analytics.services.health import HealthStatus

# Largest values storable in NUMERIC(10,4) / NUMERIC(8,2) / NUMERIC(5,2).
_MAX_ENERGY = Decimal("999999.9999")
_MAX_VOLTAGE = Decimal("999999.99")
_MAX_TEMP = Decimal("999.99")


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _TelemetryRecord(_CamelModel):
    """Fields shared by every device class."""

    model_config = ConfigDict(frozen=True)

    ts: datetime = Field(alias="timestamp")

    @field_validator("ts")
    @classmethod
    def ts_to_utc(cls, v: datetime) -> datetime:
        """Normalise the observation timestamp to UTC."""
        return as_utc(v)

    @property
    def device_id(self) -> str:
        raise NotImplementedError


class MeterTelemetry(_TelemetryRecord):
    """One reading from a grid meter.

    Attributes:
        meter_id: Identifier of the meter.
        kwh_consumed_ac: AC energy consumed since the previous reading (kWh).
        voltage: Instantaneous voltage (V).
        ts: Observation timestamp (UTC).
    """

    meter_id: str = Field(min_length=1, max_length=50)
    kwh_consumed_ac: Decimal = Field(ge=0, le=_MAX_ENERGY)
    voltage: Decimal = Field(ge=0, le=_MAX_VOLTAGE)

    @field_validator("meter_id")
    @classmethod
    def meter_id_not_blank(cls, v: str) -> str:
        """Reject identifiers made only of whitespace."""
        if not v.strip():
            raise ValueError("meter_id must not be blank")
        return v

    @property
    def device_id(self) -> str:
        return self.meter_id


class VehicleTelemetry(_TelemetryRecord):
    """One reading from a vehicle battery management system.

    Attributes:
        vehicle_id: Identifier of the vehicle.
        soc: Battery state of charge in percent (0-100).
        kwh_delivered_dc: DC energy delivered to the battery (kWh).
        battery_temp: Battery temperature in Celsius, may be negative.
        ts: Observation timestamp (UTC).
    """

    vehicle_id: str = Field(min_length=1, max_length=50)
    soc: Decimal = Field(ge=0, le=100)
    kwh_delivered_dc: Decimal = Field(ge=0, le=_MAX_ENERGY)
    battery_temp: Decimal = Field(ge=-_MAX_TEMP, le=_MAX_TEMP)

    @field_validator("vehicle_id")
    @classmethod
    def vehicle_id_not_blank(cls, v: str) -> str:
        """Reject identifiers made only of whitespace."""
        if not v.strip():
            raise ValueError("vehicle_id must not be blank")
        return v

    @property
    def device_id(self) -> str:
        return self.vehicle_id


class PerformanceSummary(_CamelModel):
    """24-hour charging efficiency summary for one vehicle.

    Attributes:
        vehicle_id: Vehicle the summary is about.
        period_start: Window start (inclusive), ``now - 24h``.
        period_end: Window end (inclusive), ``now``.
        total_energy_consumed_ac: Meter-side AC energy in the window (kWh).
        total_energy_delivered_dc: Vehicle-side DC energy in the window (kWh).
        efficiency_ratio: DC / AC, 4 decimal places; 0 when AC is 0.
        avg_battery_temp: Mean battery temperature, 2 decimal places.
        data_points_analyzed: Number of vehicle readings in the window.
        health_status: Classification of efficiency_ratio.
    """

    vehicle_id: str
    period_start: datetime
    period_end: datetime
    total_energy_consumed_ac: float
    total_energy_delivered_dc: float
    efficiency_ratio: float
    avg_battery_temp: float
    data_points_analyzed: int
    health_status: HealthStatus


class _StatusView(_CamelModel):
    model_config = ConfigDict(from_attributes=True)

    last_updated: datetime
    created_at: datetime

    @field_validator("last_updated", "created_at")
    @classmethod
    def timestamps_to_utc(cls, v: datetime) -> datetime:
        """Drivers without timezone support return naive UTC values."""
        return as_utc(v)


class MeterStatus(_StatusView):
    """Current-state view of a meter."""

    meter_id: str
    kwh_consumed_ac: float
    voltage: float


class VehicleStatus(_StatusView):
    """Current-state view of a vehicle."""

    vehicle_id: str
    soc: float
    kwh_delivered_dc: float
    battery_temp: float
