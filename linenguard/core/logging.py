"""Logging helpers for LinenGuard."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_LOGGING_INITIALIZED = False


def init_logging(level: str = "INFO") -> None:
    """Install a stderr handler on the ``linenguard`` logger once per process."""

    global _LOGGING_INITIALIZED
    logger = logging.getLogger("linenguard")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if _LOGGING_INITIALIZED:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    _LOGGING_INITIALIZED = True
