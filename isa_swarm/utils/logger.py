"""
Centralized Logging Configuration

Every module logs through ``logging.getLogger(__name__)``; the records propagate
to the package root logger ``isa_swarm``, which owns the console handler set up
here.
"""
import logging
import sys
from typing import Optional

from isa_swarm.core.config import get_settings

ROOT_LOGGER_NAME = "isa_swarm"


def setup_logger(
    name: str,
    level: Optional[str] = None,
    format_str: Optional[str] = None
) -> logging.Logger:
    """
    Setup logger with a console handler

    Args:
        name: Logger name (e.g., "isa_swarm")
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_str: Log format string (optional)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger("isa_swarm", level="DEBUG")
        >>> logger.debug("routing to Alice")
    """
    logger = logging.getLogger(name)
    settings = get_settings()

    # Set log level
    log_level = (level or settings.log_level).upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    # Disable propagation to prevent duplicate logs
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(format_str or settings.log_format))
    logger.addHandler(console_handler)

    return logger


# Create default application logger
app_logger = setup_logger(ROOT_LOGGER_NAME)
