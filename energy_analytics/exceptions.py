"""Exception hierarchy for the telemetry core."""

from datetime import datetime


class TelemetryError(Exception):
    """Base exception for all telemetry ingestion and analytics errors."""


class ValidationError(TelemetryError):
    """A telemetry record (or batch) failed input validation.

    Raised before any storage resource is touched, so nothing was written.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class PersistenceError(TelemetryError):
    """The storage layer failed to commit or read.

    For writes the transaction has been rolled back in full; the caller may
    retry the identical operation.
    """


class NotFoundError(TelemetryError):
    """No vehicle history exists for the requested window."""

    def __init__(
        self,
        device_id: str,
        window_start: datetime,
        window_end: datetime,
    ) -> None:
        self.device_id = device_id
        self.window_start = window_start
        self.window_end = window_end
        super().__init__(
            f"No data found for vehicle {device_id} between "
            f"{window_start.isoformat()} and {window_end.isoformat()}"
        )
