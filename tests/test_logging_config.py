"""
Tests for the JSON log formatter and root logger setup.

CHANGELOG:
- 2026-10-07: Cover extra attributes (STORY-010)
- 2026-10-02: Cover exc_info serialisation (STORY-006)
- 2026-09-28: Initial creation (STORY-001)

TODO:
- None
"""

import json
import logging
import sys

import pytest

from energy_analytics.logging_config import JSONFormatter, setup_logging


def _record(msg: str = "hello %s", args: tuple = ("world",), exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="energy_analytics.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


class TestJSONFormatter:
    """One JSON object per record."""

    def test_fields(self) -> None:
        entry = json.loads(JSONFormatter().format(_record()))

        assert entry["level"] == "WARNING"
        assert entry["logger"] == "energy_analytics.test"
        assert entry["message"] == "hello world"
        assert entry["timestamp"].endswith("+00:00")
        assert "exc_info" not in entry

    def test_single_line(self) -> None:
        output = JSONFormatter().format(_record(msg="line1\nline2", args=()))
        assert "\n" not in output

    def test_includes_traceback(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())

        entry = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in entry["exc_info"]

    def test_extra_attributes_become_keys(self) -> None:
        record = _record()
        record.device_class = "vehicle"
        record.records = 12

        entry = json.loads(JSONFormatter().format(record))

        assert entry["device_class"] == "vehicle"
        assert entry["records"] == 12
        assert "pathname" not in entry
        assert "args" not in entry


class TestSetupLogging:
    """Root logger replacement."""

    @pytest.fixture(autouse=True)
    def _restore_root(self) -> None:
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_installs_single_json_handler(self) -> None:
        setup_logging("DEBUG")
        setup_logging("DEBUG")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.DEBUG

    def test_accepts_numeric_level(self) -> None:
        setup_logging(logging.ERROR)
        assert logging.getLogger().level == logging.ERROR
