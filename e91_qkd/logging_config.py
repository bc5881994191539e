"""
================================================================================
LOGGING SETUP FOR E91 QKD
================================================================================

One-call logging configuration for the command-line entry point. Library
modules only create ``logging.getLogger(__name__)`` loggers and never
configure handlers themselves.

Author: E91 QKD Simulation Team
Date: 2025

================================================================================
"""

from __future__ import annotations

import logging
import sys

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configure the root logger to write timestamped lines to stderr.

    Args:
        level: A logging level number or one of LOG_LEVELS (case-insensitive)

    Raises:
        ValueError: If level is a string that is not a known level name
    """
    if isinstance(level, str):
        name = level.upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {level!r}; choose one of {LOG_LEVELS}")
        level = getattr(logging, name)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


__all__ = ['LOG_LEVELS', 'setup_logging']
