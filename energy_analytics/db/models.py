"""
SQLAlchemy ORM models for the telemetry database.

Two stores per device class:

- ``*_current_status``: hot operational store, one row per device, replaced
  on every ingest (UPSERT).
- ``*_telemetry_history``: cold analytical store, append-only, one row per
  ingested record, indexed on (device id, ts) for bounded window scans.

CHANGELOG:
- 2026-10-04: Add ts-only history indexes for retention queries (STORY-009)
- 2026-09-29: Initial creation (STORY-002)

TODO:
- None
"""

import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only auto-increments INTEGER PRIMARY KEY columns.
HistoryId = BigInteger().with_variant(Integer, "sqlite")

Energy = Numeric(10, 4)
Voltage = Numeric(8, 2)
Percent = Numeric(5, 2)
Temperature = Numeric(5, 2)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all ORM models."""

    pass


class MeterCurrentStatus(Base):
    """Latest reading of a grid meter (one row per meter).

    Attributes:
        meter_id: Identifier of the meter, primary key.
        kwh_consumed_ac: AC energy consumed since the previous reading (kWh).
        voltage: Instantaneous voltage (V).
        last_updated: Observation timestamp of the latest ingested record.
        created_at: Set by the database on first insert, never updated.
    """

    __tablename__ = "meter_current_status"
    __table_args__ = (
        Index("idx_meter_status_last_updated", "last_updated"),
    )

    meter_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    kwh_consumed_ac: Mapped[Decimal] = mapped_column(Energy, nullable=False)
    voltage: Mapped[Decimal] = mapped_column(Voltage, nullable=False)
    last_updated: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the MeterCurrentStatus."""
        return (
            f"MeterCurrentStatus(meter_id={self.meter_id!r}, "
            f"last_updated={self.last_updated!r})"
        )


class VehicleCurrentStatus(Base):
    """Latest reading of a vehicle (one row per vehicle).

    Attributes:
        vehicle_id: Identifier of the vehicle, primary key.
        soc: Battery state of charge in percent (0-100).
        kwh_delivered_dc: DC energy delivered to the battery (kWh).
        battery_temp: Battery temperature in Celsius.
        last_updated: Observation timestamp of the latest ingested record.
        created_at: Set by the database on first insert, never updated.
    """

    __tablename__ = "vehicle_current_status"
    __table_args__ = (
        CheckConstraint("soc >= 0 AND soc <= 100", name="ck_vehicle_status_soc"),
        Index("idx_vehicle_status_last_updated", "last_updated"),
    )

    vehicle_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    soc: Mapped[Decimal] = mapped_column(Percent, nullable=False)
    kwh_delivered_dc: Mapped[Decimal] = mapped_column(Energy, nullable=False)
    battery_temp: Mapped[Decimal] = mapped_column(Temperature, nullable=False)
    last_updated: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the VehicleCurrentStatus."""
        return (
            f"VehicleCurrentStatus(vehicle_id={self.vehicle_id!r}, "
            f"soc={self.soc!r}, last_updated={self.last_updated!r})"
        )


class MeterTelemetryHistory(Base):
    """Append-only meter reading.

    Attributes:
        id: Monotonically increasing surrogate key.
        meter_id: Identifier of the meter.
        kwh_consumed_ac: AC energy consumed since the previous reading (kWh).
        voltage: Instantaneous voltage (V).
        ts: Observation timestamp in UTC.
        ingested_at: Receipt timestamp assigned by the database.
    """

    __tablename__ = "meter_telemetry_history"
    __table_args__ = (
        Index("idx_meter_history_meter_ts", "meter_id", "ts"),
        Index("idx_meter_history_ts", "ts"),
    )

    id: Mapped[int] = mapped_column(HistoryId, primary_key=True, autoincrement=True)
    meter_id: Mapped[str] = mapped_column(String(50), nullable=False)
    kwh_consumed_ac: Mapped[Decimal] = mapped_column(Energy, nullable=False)
    voltage: Mapped[Decimal] = mapped_column(Voltage, nullable=False)
    ts: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    ingested_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the MeterTelemetryHistory."""
        return (
            f"MeterTelemetryHistory(id={self.id!r}, meter_id={self.meter_id!r}, "
            f"ts={self.ts!r})"
        )


class VehicleTelemetryHistory(Base):
    """Append-only vehicle reading.

    Attributes:
        id: Monotonically increasing surrogate key.
        vehicle_id: Identifier of the vehicle.
        soc: Battery state of charge in percent (0-100).
        kwh_delivered_dc: DC energy delivered to the battery (kWh).
        battery_temp: Battery temperature in Celsius.
        ts: Observation timestamp in UTC.
        ingested_at: Receipt timestamp assigned by the database.
    """

    __tablename__ = "vehicle_telemetry_history"
    __table_args__ = (
        CheckConstraint("soc >= 0 AND soc <= 100", name="ck_vehicle_history_soc"),
        Index("idx_vehicle_history_vehicle_ts", "vehicle_id", "ts"),
        Index("idx_vehicle_history_ts", "ts"),
    )

    id: Mapped[int] = mapped_column(HistoryId, primary_key=True, autoincrement=True)
    vehicle_id: Mapped[str] = mapped_column(String(50), nullable=False)
    soc: Mapped[Decimal] = mapped_column(Percent, nullable=False)
    kwh_delivered_dc: Mapped[Decimal] = mapped_column(Energy, nullable=False)
    battery_temp: Mapped[Decimal] = mapped_column(Temperature, nullable=False)
    ts: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    ingested_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the VehicleTelemetryHistory."""
        return (
            f"VehicleTelemetryHistory(id={self.id!r}, "
            f"vehicle_id={self.vehicle_id!r}, ts={self.ts!r})"
        )
