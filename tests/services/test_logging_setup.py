from __future__ import annotations

import json
import logging

from bunqcli.services.logging import JsonFormatter, setup_logging


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if handler.get_name() == "bunqcli-stderr"]


def test_setup_is_idempotent():
    logger = setup_logging("debug")
    setup_logging("info")
    assert len(_own_handlers(logger)) == 1
    assert logger.level == logging.INFO


def test_unknown_level_falls_back_to_warning():
    logger = setup_logging("chatty")
    assert logger.level == logging.WARNING


def test_json_formatter():
    logger = setup_logging("info", json_output=True)
    handler = _own_handlers(logger)[0]
    assert isinstance(handler.formatter, JsonFormatter)
    record = logging.LogRecord("bunqcli.services.auth.handshake", logging.INFO, __file__, 1, "Creating %s", ("session",), None)
    payload = json.loads(handler.formatter.format(record))
    assert payload == {"level": "INFO", "logger": "bunqcli.services.auth.handshake", "msg": "Creating session"}
