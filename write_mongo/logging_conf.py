"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path
from typing import Any

import structlog

LOGGER_NAME = "write_mongo"
LOG_DIR_ENV = "WRITE_MONGO_LOG_DIR"

_LOGGING_INITIALISED = False


def _log_dir(log_dir: Path | None) -> Path | None:
    if log_dir is not None:
        return log_dir
    env_dir = os.environ.get(LOG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    return None


def _handlers(level: str, log_dir: Path | None) -> dict[str, dict[str, Any]]:
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "plain",
        },
    }
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["plugin_file"] = {
            "class": "logging.FileHandler",
            "level": "INFO",
            "filename": str(log_dir / "write_mongo.log"),
            "formatter": "plain",
        }
        handlers["error_file"] = {
            "class": "logging.FileHandler",
            "level": "ERROR",
            "filename": str(log_dir / "error.log"),
            "formatter": "plain",
        }
    return handlers


def configure_logging(verbose: bool = False, log_dir: Path | None = None) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return the plugin logger."""

    global _LOGGING_INITIALISED

    if not _LOGGING_INITIALISED:
        level = "DEBUG" if verbose else "INFO"
        handlers = _handlers(level, _log_dir(log_dir))
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "plain": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": handlers,
                "loggers": {
                    LOGGER_NAME: {
                        "handlers": list(handlers),
                        "level": level,
                        "propagate": False,
                    },
                },
            }
        )

        # Forward structlog events to stdlib logging; JSON rendering happens at handler level
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger(LOGGER_NAME)


def get_logger(component: str, **context: Any) -> structlog.BoundLogger:
    """Return the plugin logger bound to a component."""

    return structlog.get_logger(LOGGER_NAME).bind(component=component, **context)


def attach_handler(handler: logging.Handler) -> None:
    """Add ``handler`` to the plugin logger, reusing the JSON formatter."""

    plugin_logger = logging.getLogger(LOGGER_NAME)
    if handler in plugin_logger.handlers:
        return
    if handler.formatter is None and plugin_logger.handlers:
        handler.setFormatter(plugin_logger.handlers[0].formatter)
    plugin_logger.addHandler(handler)


__all__ = ["LOGGER_NAME", "LOG_DIR_ENV", "attach_handler", "configure_logging", "get_logger"]
