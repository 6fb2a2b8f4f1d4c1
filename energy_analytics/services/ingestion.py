"""
Dual-path ingestion of meter and vehicle telemetry.

Every ingest call runs in one transaction that

1. UPSERTs the current-status row of each device (hot store, one row per
   device, ``INSERT ... ON CONFLICT DO UPDATE``), and
2. appends one row per record to the history table (cold store, INSERT-only).

Both halves commit together or not at all. Records are validated before a
session is opened, so an invalid record (or an invalid member of a batch)
writes nothing.

Current status follows commit order (last write wins), not the embedded
observation timestamp: a delayed, older record that arrives later replaces
a newer one. History has no dedupe key, so blindly retrying a batch whose
first attempt did commit duplicates its history rows.

CHANGELOG:
- 2026-10-19: Split bulk statements into ROWS_PER_STATEMENT chunks so
  large batches stay under the driver bind-parameter limit (STORY-015)
- 2026-10-07: Collapse per-device status rows inside a batch so one UPSERT
  never touches the same row twice (STORY-010)
- 2026-10-04: Batch ingestion as a single bulk UPSERT + bulk INSERT (STORY-009)
- 2026-10-03: Initial creation (STORY-004)

TODO:
- None
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import pydantic
from sqlalchemy import insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from energy_analytics.db.models import (
    Base,
    MeterCurrentStatus,
    MeterTelemetryHistory,
    VehicleCurrentStatus,
    VehicleTelemetryHistory,
)
from energy_analytics.exceptions import PersistenceError, ValidationError
from energy_analytics.schemas import MeterTelemetry, VehicleTelemetry

logger = logging.getLogger(__name__)

Record = MeterTelemetry | VehicleTelemetry | Mapping[str, Any]

# Rows per multi-VALUES statement. asyncpg accepts at most 32767 bind
# parameters per statement; 1000 rows of the widest table use 5000.
ROWS_PER_STATEMENT = 1000

# Dialects with an INSERT ... ON CONFLICT construct.
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass(frozen=True)
class DeviceClass:
    """Schema and table binding of one device class.

    Attributes:
        name: Label used in log and error messages.
        record_type: Pydantic schema of an incoming record.
        status_model: Current-status table (primary key ``key``).
        history_model: Append-only history table.
        key: Device identifier column name.
        fields: Measurement columns copied from the record.
    """

    name: str
    record_type: type[MeterTelemetry] | type[VehicleTelemetry]
    status_model: type[Base]
    history_model: type[Base]
    key: str
    fields: tuple[str, ...]


METER = DeviceClass(
    name="meter",
    record_type=MeterTelemetry,
    status_model=MeterCurrentStatus,
    history_model=MeterTelemetryHistory,
    key="meter_id",
    fields=("kwh_consumed_ac", "voltage"),
)

VEHICLE = DeviceClass(
    name="vehicle",
    record_type=VehicleTelemetry,
    status_model=VehicleCurrentStatus,
    history_model=VehicleTelemetryHistory,
    key="vehicle_id",
    fields=("soc", "kwh_delivered_dc", "battery_temp"),
)


def validate_record(
    device: DeviceClass,
    record: Record,
    index: int | None = None,
) -> MeterTelemetry | VehicleTelemetry:
    """Coerce *record* into the device class schema.

    Args:
        device: Target device class.
        record: Schema instance or mapping (snake_case or camelCase keys).
        index: Position of the record inside a batch, if any.

    Returns:
        The validated schema instance.

    Raises:
        ValidationError: Naming the first offending field.
    """
    if isinstance(record, device.record_type):
        return record
    try:
        return device.record_type.model_validate(record)
    except pydantic.ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "record"
        if index is not None:
            field = f"records[{index}].{field}"
        raise ValidationError(field, error["msg"]) from exc


def _status_row(device: DeviceClass, record: MeterTelemetry | VehicleTelemetry) -> dict:
    row = {device.key: record.device_id, "last_updated": record.ts}
    row.update({name: getattr(record, name) for name in device.fields})
    return row


def _history_row(device: DeviceClass, record: MeterTelemetry | VehicleTelemetry) -> dict:
    row = {device.key: record.device_id, "ts": record.ts}
    row.update({name: getattr(record, name) for name in device.fields})
    return row


def _chunks(rows: list[dict]) -> Iterator[list[dict]]:
    for start in range(0, len(rows), ROWS_PER_STATEMENT):
        yield rows[start:start + ROWS_PER_STATEMENT]


class IngestionWriter:
    """Writes telemetry to the current-status and history stores atomically.

    Args:
        session_factory: Factory for the sessions that scope each write
            transaction. One session (one pooled connection) is held per
            call and released on every exit path.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def ingest_meter(self, record: Record) -> int:
        """Ingest a single meter reading. Returns 1 on success."""
        return await self._ingest_one(METER, record)

    async def ingest_vehicle(self, record: Record) -> int:
        """Ingest a single vehicle reading. Returns 1 on success."""
        return await self._ingest_one(VEHICLE, record)

    async def ingest_meter_batch(self, records: Iterable[Record]) -> int:
        """Ingest a batch of meter readings all-or-nothing.

        Returns:
            int: Number of records applied.
        """
        return await self._ingest_batch(METER, records)

    async def ingest_vehicle_batch(self, records: Iterable[Record]) -> int:
        """Ingest a batch of vehicle readings all-or-nothing.

        Returns:
            int: Number of records applied.
        """
        return await self._ingest_batch(VEHICLE, records)

    # ------------------------------------------------------------------

    async def _ingest_one(self, device: DeviceClass, record: Record) -> int:
        validated = validate_record(device, record)
        await self._apply(device, [validated])
        logger.debug("%s telemetry ingested: %s", device.name, validated.device_id)
        return 1

    async def _ingest_batch(self, device: DeviceClass, records: Iterable[Record]) -> int:
        validated = [
            validate_record(device, record, index)
            for index, record in enumerate(records)
        ]
        if not validated:
            raise ValidationError("records", "batch must contain at least one record")
        applied = await self._apply(device, validated)
        logger.info(
            "Batch ingested %d %s records",
            applied,
            device.name,
            extra={"device_class": device.name, "records": applied},
        )
        return applied

    async def _apply(
        self,
        device: DeviceClass,
        records: list[MeterTelemetry] | list[VehicleTelemetry],
    ) -> int:
        """Run the status UPSERT and history INSERT in one transaction.

        Raises:
            PersistenceError: If the storage layer fails; nothing is committed.
        """
        # Later records in the batch win, as if applied one after another.
        latest = {record.device_id: _status_row(device, record) for record in records}
        status_rows = list(latest.values())
        history_rows = [_history_row(device, record) for record in records]

        async with self._session_factory() as session:
            try:
                async with session.begin():
                    await self._upsert_status(session, device, status_rows)
                    await self._append_history(session, device, history_rows)
            except (SQLAlchemyError, OSError) as exc:
                logger.error(
                    "Failed to ingest %d %s record(s), transaction rolled back",
                    len(records),
                    device.name,
                    exc_info=True,
                    extra={"device_class": device.name, "records": len(records)},
                )
                raise PersistenceError(
                    f"Failed to persist {len(records)} {device.name} record(s)"
                ) from exc
        return len(records)

    async def _upsert_status(
        self,
        session: AsyncSession,
        device: DeviceClass,
        rows: list[dict],
    ) -> None:
        """Replace-or-insert current-status rows keyed by device id.

        ``created_at`` is left out of the update set so it keeps the value
        from the first insert.
        """
        dialect = session.get_bind().dialect.name
        if dialect not in _UPSERT_INSERTS:
            raise PersistenceError(f"Unsupported database dialect for upsert: {dialect}")

        for chunk in _chunks(rows):
            stmt = _UPSERT_INSERTS[dialect](device.status_model).values(chunk)
            stmt = stmt.on_conflict_do_update(
                index_elements=[device.key],
                set_={
                    name: stmt.excluded[name]
                    for name in (*device.fields, "last_updated")
                },
            )
            await session.execute(stmt)

    async def _append_history(
        self,
        session: AsyncSession,
        device: DeviceClass,
        rows: list[dict],
    ) -> None:
        """Append one immutable history row per record."""
        for chunk in _chunks(rows):
            await session.execute(insert(device.history_model).values(chunk))
