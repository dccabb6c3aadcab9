"""Logging for the engine: one stderr handler, records tagged with session and component."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "eights"


class SessionFormatter(logging.Formatter):
    """Plain text format with session id and component columns."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)s | session=%(session_id)s | %(component)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        record.session_id = getattr(record, "session_id", "-")
        record.component = getattr(record, "component", "-")
        return super().format(record)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach the stderr handler to the package logger. Safe to call twice."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(SessionFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(component: str, session_id: str | None = None) -> logging.LoggerAdapter:
    """LoggerAdapter under the package logger, tagged with session_id and component."""
    base = logging.getLogger(f"{LOGGER_NAME}.{component}")
    return logging.LoggerAdapter(base, {"session_id": session_id or "-", "component": component})
