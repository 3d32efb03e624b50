"""
Logging configuration for the moderation review service.

Every module logs under the ``modreview`` namespace via ``get_logger``.
The httpx, SQLAlchemy engine and uvicorn access loggers are held at WARNING
or above.
"""
import logging
import sys
from typing import Optional

from modreview.core.config import settings

ROOT_LOGGER = "modreview"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers held at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access")


def resolve_level(level: str) -> int:
    """Map a level name such as "debug" to its logging constant."""
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Setup application logging (defaults to settings.log_level)."""
    numeric_level = resolve_level(level or settings.log_level)

    # Configure root logger
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)

    return logger


# Global logger instance
logger = logging.getLogger(ROOT_LOGGER)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logger
