"""
Logging setup for the marine ops service.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers and levels once at process start.
"""

import logging
import logging.config
from typing import Optional

from .config import config

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

# Chatty third-party loggers
MODULE_LOG_LEVELS = {
    "sqlalchemy.engine": "WARNING",
    "aiosqlite": "WARNING",
    "passlib": "ERROR",
    "uvicorn.access": "WARNING",
}

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging from LOG_LEVEL unless already configured."""
    global _configured
    if _configured:
        return

    log_level = (level or config.log_level).upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {"format": DETAILED_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "detailed",
                "level": log_level,
            },
        },
        "root": {"handlers": ["console"], "level": log_level},
        "loggers": {
            name: {"level": module_level}
            for name, module_level in MODULE_LOG_LEVELS.items()
        },
    })
    _configured = True
    logging.getLogger(__name__).debug(f"Logging configured at {log_level}")
