"""Logging configuration using loguru.

docdb logs through ``loguru.logger`` but is disabled on import (see
``docdb/__init__.py``) so embedding applications stay quiet unless they opt
in.  ``setup_logging`` is that opt-in: it installs a single sink with the
standard format and enables the ``docdb`` namespace.
"""

from __future__ import annotations

import sys
from typing import Any, TextIO

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(level: str = "INFO", sink: TextIO | Any = None) -> None:
    """Route docdb logs to ``sink`` (stderr by default) at ``level``.

    Replaces any previously configured loguru handlers.  Call once at
    process startup.
    """
    level = level.upper()

    logger.remove()
    logger.add(sink if sink is not None else sys.stderr, level=level, format=LOG_FORMAT)
    logger.enable("docdb")

    logger.debug("Logging initialised (level={})", level)
