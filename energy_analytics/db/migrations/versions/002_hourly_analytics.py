"""
Create hourly analytics materialized views over the history tables.

Creates vehicle_hourly_analytics and meter_hourly_analytics (plain
PostgreSQL materialized views keyed on device id + hour) and the
refresh_analytics_views() helper. The views are not refreshed
automatically; whoever needs them calls the helper.

Revision ID: 002
Revises: 001
Create Date: 2026-10-06

CHANGELOG:
- 2026-10-06: Initial creation (STORY-011)

TODO:
- None
"""

from typing import Sequence, Union

from alembic import op

# Revision identifiers used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create hourly views, their unique indexes and the refresh helper.

    Steps:
        1. Create vehicle_hourly_analytics (SOC, temperature, DC energy).
        2. Create meter_hourly_analytics (voltage, AC energy).
        3. Add unique indexes, required by REFRESH ... CONCURRENTLY.
        4. Create refresh_analytics_views().
    """
    op.execute(
        "CREATE MATERIALIZED VIEW IF NOT EXISTS vehicle_hourly_analytics AS "
        "SELECT "
        "  vehicle_id, "
        "  date_trunc('hour', ts) AS hour, "
        "  AVG(soc) AS avg_soc, "
        "  MAX(soc) AS max_soc, "
        "  MIN(soc) AS min_soc, "
        "  AVG(battery_temp) AS avg_battery_temp, "
        "  SUM(kwh_delivered_dc) AS total_kwh_delivered_dc, "
        "  COUNT(*) AS reading_count "
        "FROM vehicle_telemetry_history "
        "GROUP BY vehicle_id, date_trunc('hour', ts)"
    )

    op.execute(
        "CREATE MATERIALIZED VIEW IF NOT EXISTS meter_hourly_analytics AS "
        "SELECT "
        "  meter_id, "
        "  date_trunc('hour', ts) AS hour, "
        "  AVG(voltage) AS avg_voltage, "
        "  SUM(kwh_consumed_ac) AS total_kwh_consumed_ac, "
        "  COUNT(*) AS reading_count "
        "FROM meter_telemetry_history "
        "GROUP BY meter_id, date_trunc('hour', ts)"
    )

    op.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_vehicle_hourly_analytics_vehicle_hour "
        "ON vehicle_hourly_analytics (vehicle_id, hour DESC)"
    )
    op.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_meter_hourly_analytics_meter_hour "
        "ON meter_hourly_analytics (meter_id, hour DESC)"
    )

    op.execute(
        "CREATE OR REPLACE FUNCTION refresh_analytics_views() "
        "RETURNS void AS $$ "
        "BEGIN "
        "  REFRESH MATERIALIZED VIEW CONCURRENTLY vehicle_hourly_analytics; "
        "  REFRESH MATERIALIZED VIEW CONCURRENTLY meter_hourly_analytics; "
        "END; "
        "$$ LANGUAGE plpgsql"
    )


def downgrade() -> None:
    """Drop the refresh helper and both views."""
    op.execute("DROP FUNCTION IF EXISTS refresh_analytics_views()")
    op.execute("DROP MATERIALIZED VIEW IF EXISTS meter_hourly_analytics")
    op.execute("DROP MATERIALIZED VIEW IF EXISTS vehicle_hourly_analytics")
