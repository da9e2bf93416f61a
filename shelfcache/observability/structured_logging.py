"""
Shelfcache — Structured Logging

JSON log formatting for the ``shelfcache`` logger hierarchy. Every module logs
through ``logging.getLogger(__name__)`` and passes structured context with
``extra={...}``; this formatter lifts those fields into the JSON record.
"""

import json
import logging
from datetime import UTC, datetime

from ..config.schemas import LogFormat, LogLevel

ROOT_LOGGER = "shelfcache"

_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add any extra fields from record.__dict__
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(
    level: LogLevel | str = LogLevel.INFO,
    fmt: LogFormat | str = LogFormat.JSON,
) -> logging.Logger:
    """
    Install a single stream handler on the ``shelfcache`` logger.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Log level name
        fmt: ``json`` for structured output, ``text`` for a plain format

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if LogFormat(fmt) == LogFormat.JSON:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(LogLevel(level).value)
    logger.propagate = False

    return logger
