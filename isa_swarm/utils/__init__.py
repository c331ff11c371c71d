"""
Utility modules for isA Swarm
"""

from .logger import setup_logger, app_logger, ROOT_LOGGER_NAME

__all__ = [
    # Logging
    "setup_logger",
    "app_logger",
    "ROOT_LOGGER_NAME",
]
