"""Camp registration backend - Logging Configuration.

Structured console logging with configurable log levels for development
and production environments.
"""

import logging
import logging.config
import sys
from typing import Any

from campreg.core.config import Settings, get_settings

# Configure logger
logger = logging.getLogger(__name__)

# Track if logging has been configured
_logging_configured = False


def setup_logging(settings: Settings | None = None, *, force: bool = False) -> None:
    """Configure logging for the application based on environment settings.

    Args:
        settings: Settings to read the level from; defaults to ``get_settings()``.
        force: If True, force reconfiguration even if already configured.
    """
    global _logging_configured  # noqa: PLW0603

    if _logging_configured and not force:
        return

    settings = settings or get_settings()
    level = settings.log_level.upper()

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": (
                    "%(asctime)s | %(name)s | %(levelname)s | "
                    "%(filename)s:%(lineno)d | %(funcName)s | %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "simple": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if settings.debug else "simple",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "campreg": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "botocore": {"level": "WARNING"},
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(logging_config)
    _logging_configured = True

    logger.info(
        "Logging configured for %s environment with level %s",
        settings.environment,
        level,
    )


def is_logging_configured() -> bool:
    return _logging_configured
