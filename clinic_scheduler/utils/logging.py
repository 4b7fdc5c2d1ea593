"""Logging configuration."""

import logging
import os
import sys

from pydantic import BaseModel

PACKAGE_LOGGER = "clinic_scheduler"


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: LogConfig | None = None) -> None:
    """Set up logging configuration for the application."""
    if config is None:
        config = LogConfig()

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    # Quiet third-party request logging
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger(PACKAGE_LOGGER).setLevel(config.level.upper())


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)
        level: Explicit level, overriding LOG_LEVEL

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    log_level = level if level else os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(log_level.upper())

    return logger
