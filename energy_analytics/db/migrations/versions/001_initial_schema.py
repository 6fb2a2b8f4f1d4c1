"""
Initial schema: current-status and telemetry-history tables.

Creates the hot operational store (meter_current_status,
vehicle_current_status; one row per device) and the cold analytical store
(meter_telemetry_history, vehicle_telemetry_history; append-only) with the
composite (device id, ts) indexes that bound the 24h analytics scans.

Revision ID: 001
Revises: None
Create Date: 2026-09-29

CHANGELOG:
- 2026-09-29: Initial creation (STORY-002)

TODO:
- None
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# Revision identifiers used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the four telemetry tables and their indexes."""
    op.create_table(
        "meter_current_status",
        sa.Column("meter_id", sa.String(50), primary_key=True),
        sa.Column("kwh_consumed_ac", sa.Numeric(10, 4), nullable=False),
        sa.Column("voltage", sa.Numeric(8, 2), nullable=False),
        sa.Column(
            "last_updated", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_meter_status_last_updated", "meter_current_status", ["last_updated"],
    )

    op.create_table(
        "vehicle_current_status",
        sa.Column("vehicle_id", sa.String(50), primary_key=True),
        sa.Column("soc", sa.Numeric(5, 2), nullable=False),
        sa.Column("kwh_delivered_dc", sa.Numeric(10, 4), nullable=False),
        sa.Column("battery_temp", sa.Numeric(5, 2), nullable=False),
        sa.Column(
            "last_updated", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
        sa.Column(
            "created_at", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
        sa.CheckConstraint("soc >= 0 AND soc <= 100", name="ck_vehicle_status_soc"),
    )
    op.create_index(
        "idx_vehicle_status_last_updated", "vehicle_current_status", ["last_updated"],
    )

    op.create_table(
        "meter_telemetry_history",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("meter_id", sa.String(50), nullable=False),
        sa.Column("kwh_consumed_ac", sa.Numeric(10, 4), nullable=False),
        sa.Column("voltage", sa.Numeric(8, 2), nullable=False),
        sa.Column("ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "ingested_at", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_meter_history_meter_ts", "meter_telemetry_history", ["meter_id", "ts"],
    )
    op.create_index("idx_meter_history_ts", "meter_telemetry_history", ["ts"])

    op.create_table(
        "vehicle_telemetry_history",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("vehicle_id", sa.String(50), nullable=False),
        sa.Column("soc", sa.Numeric(5, 2), nullable=False),
        sa.Column("kwh_delivered_dc", sa.Numeric(10, 4), nullable=False),
        sa.Column("battery_temp", sa.Numeric(5, 2), nullable=False),
        sa.Column("ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "ingested_at", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
        sa.CheckConstraint("soc >= 0 AND soc <= 100", name="ck_vehicle_history_soc"),
    )
    op.create_index(
        "idx_vehicle_history_vehicle_ts",
        "vehicle_telemetry_history",
        ["vehicle_id", "ts"],
    )
    op.create_index("idx_vehicle_history_ts", "vehicle_telemetry_history", ["ts"])


def downgrade() -> None:
    """Drop all telemetry tables (indexes are dropped with them)."""
    op.drop_table("vehicle_telemetry_history")
    op.drop_table("meter_telemetry_history")
    op.drop_table("vehicle_current_status")
    op.drop_table("meter_current_status")
