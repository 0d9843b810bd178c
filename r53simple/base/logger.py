"""
Structured logging for r53simple.

Library modules log through ``logging.getLogger("r53simple")`` and pass
request context (action, request id, zone) as ``extra``.  The command
line tools install :class:`StructuredFormatter` so each record comes out
as a single JSON line.
"""

from __future__ import annotations

import json
import logging
from typing import Any

LOGGER_NAME = "r53simple"

_CONTEXT_KEYS = ("request_id", "service", "action", "zone")


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_KEYS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry)


def setup_logging(level: int = logging.WARNING, structured: bool = True) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Calling it again replaces the handler instead of stacking a second one.

    Args:
        level: Threshold for the ``r53simple`` logger.
        structured: JSON lines when true, plain ``LEVEL message`` otherwise.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_r53simple", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler._r53simple = True  # type: ignore[attr-defined]
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
