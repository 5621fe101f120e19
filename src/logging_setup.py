"""Logging configuration for the finance tracker analysis tooling.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the
  ``finance_tracker`` root logger. Entry points (the CLI) call it once.
- ``get_logger(name)`` returns a logger and makes sure the root logger has at
  least a ``NullHandler`` so library use stays silent until configured.

Library modules never attach their own handlers; they call
``get_logger("finance_tracker.<module>")``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

ROOT_LOGGER_NAME = "finance_tracker"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    env_val = os.getenv("FINANCE_TRACKER_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the root ``finance_tracker`` logger exactly once.

    ``level`` may be an int or a level name; when ``None`` the
    ``FINANCE_TRACKER_LOG_LEVEL`` environment variable is used, then INFO.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setLevel(_parse_level(level))
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))

    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not _CONFIGURED and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
