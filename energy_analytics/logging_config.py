"""
Structured JSON logging for the API process.

Every record becomes one JSON line with ``timestamp``, ``level``, ``logger``
and ``message``. Attributes passed through ``extra=`` (for example
``device_class`` or ``records`` from the ingestion writer) are copied into
the line as top-level keys, and a traceback is added under ``exc_info``
when the record carries one.

CHANGELOG:
- 2026-10-07: Copy ``extra`` attributes into the JSON line (STORY-010)
- 2026-10-02: Include exception tracebacks in the JSON payload (STORY-006)
- 2026-09-28: Initial creation (STORY-001)

TODO:
- None
"""

import json
import logging
from datetime import UTC, datetime

# Attributes every LogRecord has; anything else came in through ``extra``.
_RESERVED = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload.setdefault(key, value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: int | str = logging.INFO) -> None:
    """Send all logging through one JSON handler on stderr.

    Existing root handlers are removed first, so calling this again (for
    example on an app reload) does not duplicate output.

    Args:
        level: Root level as a number or a name such as ``"DEBUG"``.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)
