from __future__ import annotations

import logging
from logging.config import dictConfig
from pathlib import Path
from typing import Any

from jsend_client.core.config import settings
from jsend_client.core.request_context import request_id_var

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # Attach the request id when one is bound
        rid = request_id_var.get()
        setattr(record, "request_id", rid or "-")
        return True


def _file_handler() -> dict[str, Any]:
    Path(settings.LOG_FILE_PATH).parent.mkdir(parents=True, exist_ok=True)
    if settings.LOG_ROTATION_POLICY == "time":
        return {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "formatter": "json",
            "filters": ["reqid"],
            "filename": settings.LOG_FILE_PATH,
            "when": settings.LOG_ROTATION_WHEN,
            "interval": settings.LOG_ROTATION_INTERVAL,
            "backupCount": settings.LOG_BACKUP_COUNT,
            "encoding": "utf-8",
        }
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "filters": ["reqid"],
        "filename": settings.LOG_FILE_PATH,
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
    }


def setup_logging(level: str | None = None) -> None:
    """Configure structured logging with optional file rotation and request correlation."""
    level_upper = (level or settings.LOG_LEVEL).upper()

    handlers: dict[str, dict[str, Any]] = {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "filters": ["reqid"],
        }
    }
    if settings.LOG_TO_FILE:
        handlers["file"] = _file_handler()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "reqid": {
                    "()": RequestIdFilter,
                }
            },
            "formatters": {
                "json": {
                    "format": (
                        "{\"ts\":%(asctime)s, \"lvl\":%(levelname)s, "
                        "\"logger\":%(name)s, \"msg\":%(message)s, "
                        "\"req_id\":%(request_id)s}"
                    )
                }
            },
            "handlers": handlers,
            "root": {
                "level": level_upper,
                "handlers": list(handlers.keys()),
            },
        }
    )
    logging.getLogger(__name__).info("logging_configured", extra={"level": level_upper})


def set_log_level(level: str) -> str:
    """Change the root log level at runtime and return the level name in effect."""
    level_upper = level.upper()
    if level_upper not in VALID_LEVELS:
        raise ValueError(f"invalid log level: {level}")
    logging.getLogger().setLevel(level_upper)
    logging.getLogger(__name__).info("log_level_changed", extra={"new_level": level_upper})
    return level_upper


__all__ = ["RequestIdFilter", "VALID_LEVELS", "set_log_level", "setup_logging"]
