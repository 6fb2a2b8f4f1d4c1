"""
Ingest API endpoints for meter and vehicle telemetry.

Single-record and batch endpoints for both device classes. Each call is one
dual-path write (current status + history) handled by IngestionWriter;
a batch is applied all-or-nothing.

CHANGELOG:
- 2026-10-04: Add batch endpoints with MAX_BATCH_SIZE limit (STORY-009)
- 2026-10-03: Initial creation (STORY-005)

TODO:
- None
"""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from energy_analytics.api.deps import MaxBatchSize, Writer
from energy_analytics.schemas import MeterTelemetry, VehicleTelemetry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/ingest", tags=["ingest"])


# ---------------------------------------------------------------------------
# Pydantic response schemas
# ---------------------------------------------------------------------------


class IngestResponse(BaseModel):
    """Confirmation of a single-record ingest.

    Attributes:
        success: Always True; failures are returned as error responses.
        message: Human readable confirmation.
    """

    success: bool
    message: str


class BatchIngestResponse(IngestResponse):
    """Confirmation of a batch ingest.

    Attributes:
        count: Number of records applied.
    """

    count: int


def _check_batch_size(size: int, limit: int) -> None:
    """Reject batches above MAX_BATCH_SIZE with 413."""
    if size > limit:
        raise HTTPException(
            status_code=413,
            detail=f"Batch size {size} exceeds limit of {limit}. "
            "Split into smaller batches.",
        )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/meter", status_code=201, response_model=IngestResponse)
async def ingest_meter(record: MeterTelemetry, writer: Writer) -> IngestResponse:
    """Ingest one meter reading.

    Args:
        record: Validated meter reading.
        writer: Dual-path ingestion writer.

    Returns:
        IngestResponse: Confirmation message.
    """
    logger.info("Ingesting meter data: %s", record.meter_id)
    await writer.ingest_meter(record)
    return IngestResponse(
        success=True,
        message=f"Meter telemetry for {record.meter_id} ingested successfully",
    )


@router.post("/vehicle", status_code=201, response_model=IngestResponse)
async def ingest_vehicle(record: VehicleTelemetry, writer: Writer) -> IngestResponse:
    """Ingest one vehicle reading.

    Args:
        record: Validated vehicle reading.
        writer: Dual-path ingestion writer.

    Returns:
        IngestResponse: Confirmation message.
    """
    logger.info("Ingesting vehicle data: %s", record.vehicle_id)
    await writer.ingest_vehicle(record)
    return IngestResponse(
        success=True,
        message=f"Vehicle telemetry for {record.vehicle_id} ingested successfully",
    )


@router.post("/meter/batch", status_code=201, response_model=BatchIngestResponse)
async def ingest_meter_batch(
    records: list[MeterTelemetry],
    writer: Writer,
    max_batch_size: MaxBatchSize,
) -> BatchIngestResponse:
    """Ingest a batch of meter readings all-or-nothing.

    Raises:
        HTTPException: 413 if the batch exceeds MAX_BATCH_SIZE.
    """
    _check_batch_size(len(records), max_batch_size)
    logger.info("Batch ingesting %d meter records", len(records))
    count = await writer.ingest_meter_batch(records)
    return BatchIngestResponse(
        success=True,
        message="Meter telemetry batch ingested successfully",
        count=count,
    )


@router.post("/vehicle/batch", status_code=201, response_model=BatchIngestResponse)
async def ingest_vehicle_batch(
    records: list[VehicleTelemetry],
    writer: Writer,
    max_batch_size: MaxBatchSize,
) -> BatchIngestResponse:
    """Ingest a batch of vehicle readings all-or-nothing.

    Raises:
        HTTPException: 413 if the batch exceeds MAX_BATCH_SIZE.
    """
    _check_batch_size(len(records), max_batch_size)
    logger.info("Batch ingesting %d vehicle records", len(records))
    count = await writer.ingest_vehicle_batch(records)
    return BatchIngestResponse(
        success=True,
        message="Vehicle telemetry batch ingested successfully",
        count=count,
    )
