from __future__ import annotations

import logging

import structlog

from write_mongo import logging_conf
from write_mongo.logging_conf import LOGGER_NAME, attach_handler, configure_logging


def test_configure_logging_creates_log_files(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(logging_conf, "_LOGGING_INITIALISED", False)
    plugin_logger = logging.getLogger(LOGGER_NAME)
    try:
        logger = configure_logging(log_dir=tmp_path)
        logger.info("logging_ready")

        assert (tmp_path / "write_mongo.log").exists()
        assert (tmp_path / "error.log").exists()
        assert not plugin_logger.propagate
        assert len(plugin_logger.handlers) == 3
        assert configure_logging() is not None
        assert len(plugin_logger.handlers) == 3
    finally:
        for handler in list(plugin_logger.handlers):
            plugin_logger.removeHandler(handler)
            handler.close()
        structlog.reset_defaults()


def test_attach_handler_is_idempotent() -> None:
    handler = logging.NullHandler()
    attach_handler(handler)
    attach_handler(handler)
    plugin_logger = logging.getLogger(LOGGER_NAME)
    assert plugin_logger.handlers.count(handler) == 1
    plugin_logger.removeHandler(handler)
