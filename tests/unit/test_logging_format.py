"""Tests for unified logging format.

Target format: 2026-01-06T14:05:52Z [source] LEVEL message
"""

from __future__ import annotations

import io
import logging
import re
from datetime import datetime

from spinfood.logging_config import TRACE, ISO8601Formatter, configure_logging, get_logger, resolve_level


def make_record(msg: str = "Test message", level: int = logging.INFO, args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(name="test", level=level, pathname="", lineno=0, msg=msg, args=args, exc_info=None)


class TestISO8601Formatter:
    """Test the custom ISO8601 formatter produces correct output."""

    def test_format_matches_layout(self):
        """Verify output matches: 2026-01-06T14:05:52Z [source] LEVEL message"""
        output = ISO8601Formatter(source="test").format(make_record())

        pattern = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z \[test\] INFO Test message$"
        assert re.match(pattern, output), f"Output '{output}' doesn't match expected format"

    def test_timestamp_is_utc(self):
        output = ISO8601Formatter(source="cli").format(make_record("Test"))
        timestamp_str = output.split(" ")[0]

        assert timestamp_str.endswith("Z"), f"Timestamp '{timestamp_str}' should end with Z"
        assert datetime.fromisoformat(timestamp_str.replace("Z", "+00:00")) is not None

    def test_different_log_levels(self):
        formatter = ISO8601Formatter(source="test")

        for level, level_name in [
            (TRACE, "TRACE"),
            (logging.DEBUG, "DEBUG"),
            (logging.INFO, "INFO"),
            (logging.WARNING, "WARNING"),
            (logging.ERROR, "ERROR"),
        ]:
            output = formatter.format(make_record("Message", level=level))
            assert f"] {level_name} " in output, f"Level {level_name} not found in output"

    def test_message_formatting_with_args(self):
        output = ISO8601Formatter(source="test").format(make_record("Pair %s cooks %s", args=(4, "main")))

        assert "Pair 4 cooks main" in output


class TestConfigureLogging:
    def test_sets_level_from_debug_flag(self):
        assert configure_logging(source="test", debug=True).level == logging.DEBUG

    def test_default_level_is_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert configure_logging(source="test", debug=False).level == logging.INFO

    def test_trace_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "trace")

        assert resolve_level() == TRACE

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        assert resolve_level(logging.WARNING) == logging.WARNING

    def test_get_logger_returns_named_logger(self):
        assert get_logger("test.module").name == "test.module"

    def test_end_to_end_log_output(self):
        configure_logging(source="integration_test", debug=False)
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(ISO8601Formatter(source="integration_test"))
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)

        get_logger("test").info("Test integration message")

        pattern = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z \[integration_test\] INFO Test integration message\n$"
        assert re.match(pattern, stream.getvalue())
