"""Logging helpers for the bunq CLI."""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

__all__ = ["setup_logging", "JsonFormatter"]

_HANDLER_NAME = "bunqcli-stderr"


def _json_payload(record: logging.LogRecord) -> str:
    base = {
        "level": record.levelname,
        "logger": record.name,
        "msg": record.getMessage(),
    }
    timestamp = getattr(record, "asctime", None)
    if timestamp:
        base["time"] = timestamp
    if record.exc_info:
        base["exc"] = logging.Formatter().formatException(record.exc_info)
    return json.dumps(base, ensure_ascii=False)


class JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - trivial wrapper
        return _json_payload(record)


def setup_logging(level: Optional[str] = None, *, json_output: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the ``bunqcli`` logger; safe to call repeatedly."""

    resolved_level = (level or "WARNING").upper()
    numeric_level = getattr(logging, resolved_level, logging.WARNING)

    logger = logging.getLogger("bunqcli")
    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(numeric_level)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
