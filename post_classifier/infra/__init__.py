"""
Infrastructure module - configuration and logging.
"""

from .logging_config import setup_logging, DailyRotatingFileHandler, LOGGER_NAME
from .settings import Settings, load_settings, normalize_redis_url

__all__ = [
    "setup_logging",
    "DailyRotatingFileHandler",
    "LOGGER_NAME",
    "Settings",
    "load_settings",
    "normalize_redis_url",
]
