"""Logging configuration for the application."""

import logging
import os

DEFAULT_LOG_LEVEL = "INFO"


def get_log_level() -> int:
    """Read the log level from CMS_VALIDATOR_LOG_LEVEL, defaulting to INFO."""
    name = os.getenv("CMS_VALIDATOR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Setup basic logging and return the package logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return logging.getLogger("cms_validator")
