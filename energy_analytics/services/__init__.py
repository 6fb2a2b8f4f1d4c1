"""Core telemetry services: ingestion, window analytics, health, status reads."""
