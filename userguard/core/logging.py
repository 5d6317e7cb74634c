"""
Logging configuration module.

This module provides structured logging configuration with support for:
- Console logging (development)
- File logging with rotation (production)
- JSON logging (production, for log aggregation)
- Separate error log file

Userguard is a library, so nothing here runs on import. The host (or the
userguard-add-superuser command) calls setup_logging() once at startup.
"""

import logging
import logging.config
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from userguard.core.config import Settings

# Set by hosts per request/job so every userguard log line can be correlated
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def setup_logging(settings: Settings) -> None:
    """
    Configure logging based on settings.

    Configures:
    - Log level from settings
    - Console output (detailed or JSON)
    - Rotating file handlers (if enabled)
    - Separate error log file

    Args:
        settings: Userguard settings
    """
    # Create logs directory if it doesn't exist
    if settings.log_file_enabled:
        log_dir = Path(settings.log_file_path).parent
        log_dir.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(get_logging_config(settings))

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: level={settings.log_level}, "
        f"format={settings.log_format}, "
        f"file_enabled={settings.log_file_enabled}"
    )


def get_logging_config(settings: Settings) -> dict[str, Any]:
    """
    Get logging configuration dictionary.

    Args:
        settings: Userguard settings

    Returns:
        Dictionary compatible with logging.config.dictConfig()
    """
    formatter = "json" if settings.log_format == "json" else "detailed"

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - "
                    "[%(correlation_id)s] - %(funcName)s() - %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": (
                    "%(asctime)s %(name)s %(levelname)s %(correlation_id)s "
                    "%(funcName)s %(message)s"
                ),
            },
        },
        "filters": {
            "correlation_id": {
                "()": CorrelationIdFilter,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.log_level,
                "formatter": formatter,
                "stream": sys.stdout,
                "filters": ["correlation_id"],
            },
        },
        "root": {
            "level": settings.log_level,
            "handlers": ["console"],
        },
        "loggers": {
            "sqlalchemy": {
                "level": "WARNING",  # Set to INFO to see SQL queries
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "userguard": {
                "level": settings.log_level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    if settings.log_file_enabled:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.log_level,
            "formatter": formatter,
            "filename": settings.log_file_path,
            "maxBytes": settings.log_file_max_bytes,
            "backupCount": settings.log_file_backup_count,
            "encoding": "utf-8",
            "filters": ["correlation_id"],
        }

        config["handlers"]["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": formatter,
            "filename": str(Path(settings.log_file_path).parent / "error.log"),
            "maxBytes": settings.log_file_max_bytes,
            "backupCount": settings.log_file_backup_count,
            "encoding": "utf-8",
            "filters": ["correlation_id"],
        }

        config["root"]["handlers"].extend(["file", "error_file"])
        config["loggers"]["userguard"]["handlers"].extend(["file", "error_file"])

    return config


class CorrelationIdFilter(logging.Filter):
    """
    Logging filter to add correlation_id to log records.

    The correlation_id is read from correlation_id_var, which hosts set per
    request or job. If not present, uses 'no-correlation-id'.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = correlation_id_var.get() or "no-correlation-id"

        return True
