"""Structured JSON logging for the scraper and the API server."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

LOGGER_NAME = "nuc_universities"

# uvicorn.error and uvicorn.access propagate to this one
SERVER_LOGGER = "uvicorn"

# Attributes every LogRecord carries; anything else arrived via ``extra=``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
) -> logging.Logger:
    """Configure the project logger (and uvicorn's) for JSON output.

    Args:
        level: Log level name, any case (e.g. "debug", "WARNING").
            Unknown names fall back to INFO.
        log_file: Optional path; adds a file handler next to stderr.

    Returns:
        The ``nuc_universities`` logger.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = JSONFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    for name in (LOGGER_NAME, SERVER_LOGGER):
        target = logging.getLogger(name)
        target.setLevel(numeric_level)
        # Replace, not append, so repeated calls don't duplicate output
        target.handlers[:] = handlers

    return logging.getLogger(LOGGER_NAME)
