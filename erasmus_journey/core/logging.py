"""Erasmus Journey — Structured JSON Logging.

One stdout handler sits on the ``erasmus_journey`` package logger; component
loggers propagate to it and only set their level.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from erasmus_journey.config import settings

ROOT_LOGGER = "erasmus_journey"

# Context passed through ``extra=`` that is copied onto the JSON line
EXTRA_KEYS = ("destination_id", "submission_id", "location", "duration_ms", "job")


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, source, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "source": f"{record.module}:{record.lineno}",
            "message": record.getMessage(),
        }
        entry.update(
            {key: getattr(record, key) for key in EXTRA_KEYS if getattr(record, key, None) is not None}
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _level() -> int:
    return getattr(logging, settings.log_level.upper(), logging.INFO)


def _root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
        root.setLevel(_level())
    return root


def get_logger(name: str) -> logging.Logger:
    """Component logger ``erasmus_journey.<name>`` writing JSON lines."""
    _root()
    logger = logging.getLogger(f"{ROOT_LOGGER}.{name}")
    logger.setLevel(_level())
    return logger
