"""Meter and vehicle telemetry ingestion with windowed efficiency analytics."""

__version__ = "0.1.0"
