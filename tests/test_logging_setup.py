"""Tests for nuc_universities.utils.logging_setup module."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

from nuc_universities.utils.logging_setup import JSONFormatter, setup_logging


def _record(msg: str = "hello", level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="nuc_universities",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=None,
        exc_info=exc_info,
    )


@pytest.fixture(autouse=True)
def _restore_loggers():
    """Keep handlers installed by setup_logging from leaking into other tests."""
    saved = {
        name: (logging.getLogger(name).handlers[:], logging.getLogger(name).level)
        for name in ("nuc_universities", "uvicorn")
    }
    yield
    for name, (handlers, level) in saved.items():
        target = logging.getLogger(name)
        for handler in target.handlers:
            if handler not in handlers:
                handler.close()
        target.handlers[:] = handlers
        target.setLevel(level)


class TestJSONFormatter:
    """Test the JSON log formatter."""

    def test_format_produces_valid_json(self) -> None:
        parsed = json.loads(JSONFormatter().format(_record()))
        assert isinstance(parsed, dict)

    def test_required_fields_present(self) -> None:
        parsed = json.loads(
            JSONFormatter().format(_record("warning message", logging.WARNING))
        )
        assert "timestamp" in parsed
        assert parsed["level"] == "WARNING"
        assert parsed["message"] == "warning message"
        assert parsed["logger"] == "nuc_universities"
        assert "module" in parsed

    def test_extra_fields_included(self) -> None:
        record = _record("Source scrape failed")
        record.url = "https://www.nuc.edu.ng/"  # type: ignore[attr-defined]
        record.university_type = "Private"  # type: ignore[attr-defined]

        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["url"] == "https://www.nuc.edu.ng/"
        assert parsed["university_type"] == "Private"

    def test_standard_attributes_excluded(self) -> None:
        parsed = json.loads(JSONFormatter().format(_record()))
        for attr in ("msg", "args", "lineno", "pathname", "threadName"):
            assert attr not in parsed

    def test_non_serializable_extra_stringified(self) -> None:
        record = _record()
        record.path = Path("/tmp/out.json")  # type: ignore[attr-defined]
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["path"] == "/tmp/out.json"

    def test_exception_info_included(self) -> None:
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        parsed = json.loads(
            JSONFormatter().format(_record("error occurred", logging.ERROR, exc_info))
        )
        assert "exception" in parsed
        assert "ValueError" in parsed["exception"]


class TestSetupLogging:
    """Test the logging setup function."""

    def test_returns_project_logger(self) -> None:
        logger = setup_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "nuc_universities"

    def test_default_level_is_info(self) -> None:
        assert setup_logging().level == logging.INFO

    def test_case_insensitive_level(self) -> None:
        assert setup_logging(level="debug").level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert setup_logging(level="chatty").level == logging.INFO

    def test_console_handler_uses_json_formatter(self) -> None:
        logger = setup_logging()
        stream_handlers = [
            h for h in logger.handlers if type(h) is logging.StreamHandler
        ]
        assert len(stream_handlers) == 1
        assert isinstance(stream_handlers[0].formatter, JSONFormatter)

    def test_uvicorn_logger_configured(self) -> None:
        setup_logging(level="WARNING")
        server_logger = logging.getLogger("uvicorn")
        assert server_logger.level == logging.WARNING
        assert all(isinstance(h.formatter, JSONFormatter) for h in server_logger.handlers)

    def test_file_handler_writes_json(self, tmp_path: Path) -> None:
        log_file = tmp_path / "test.log"
        logger = setup_logging(log_file=str(log_file))

        logger.info("test message", extra={"cycle": 3})
        for h in logger.handlers:
            h.flush()

        parsed = json.loads(log_file.read_text().strip())
        assert parsed["message"] == "test message"
        assert parsed["cycle"] == 3

    def test_no_duplicate_handlers_on_repeated_calls(self) -> None:
        logger1 = setup_logging()
        count1 = len(logger1.handlers)
        logger2 = setup_logging()

        assert len(logger2.handlers) == count1
        assert logger1 is logger2

    def test_no_file_handler_when_none(self) -> None:
        logger = setup_logging(log_file=None)
        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)
