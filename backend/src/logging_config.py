"""Logging setup shared by the dbsnap commands.

Backup progress and failures are logged to stdout. ``LOG_LEVEL`` picks the
level, and ``dbsnap --verbose`` reconfigures it to DEBUG.
"""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Optional


_CONFIGURED = False


def configure_logging(default_level: Optional[str] = None, *, force: bool = False) -> None:
    """Install the stdout handler once; ``force`` re-applies it with a new level."""

    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    level_name = (default_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    formatter = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": formatter,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                }
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {
                "level": level_name,
                "handlers": ["stdout"],
            },
        }
    )

    _CONFIGURED = True
