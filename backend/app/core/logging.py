"""Logging setup shared by the API process and tests."""
from __future__ import annotations

import logging
from logging.config import dictConfig

from app.core.context import get_request_id

# Chatty third-party loggers kept at WARNING unless debugging.
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "opik")


class RequestIdFilter(logging.Filter):
    """Stamp each record with the active request id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def configure_logging(*, log_level: str = "INFO", debug: bool = False) -> None:
    """Install the console handler once; later calls are ignored."""
    if getattr(configure_logging, "_configured", False):
        return

    quiet_level = log_level if debug else "WARNING"
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s",
                }
            },
            "filters": {
                "request_id": {"()": "app.core.logging.RequestIdFilter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": log_level,
                    "filters": ["request_id"],
                }
            },
            "loggers": {name: {"level": quiet_level} for name in _QUIET_LOGGERS},
            "root": {"handlers": ["console"], "level": log_level},
        }
    )

    logging.getLogger(__name__).debug("Logging configured (level=%s, debug=%s)", log_level, debug)
    setattr(configure_logging, "_configured", True)
