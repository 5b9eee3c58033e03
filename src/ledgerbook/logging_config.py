"""Logging setup for ledgerbook.

Library modules only create loggers (``logging.getLogger(__name__)``); the
command-line entry point decides where records go.
"""

import logging
import os
from typing import Optional

LOG_LEVEL_ENV_VAR = "LEDGERBOOK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[str | int] = None) -> logging.Logger:
    """Install a single stderr handler on the ``ledgerbook`` logger.

    Args:
        level: Level name or number. Falls back to LEDGERBOOK_LOG_LEVEL, then WARNING.

    Returns:
        The configured ``ledgerbook`` logger
    """
    global _handler

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger("ledgerbook")
    # Bind to the current sys.stderr on every call
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Remove the handler installed by configure_logging."""
    global _handler

    logger = logging.getLogger("ledgerbook")
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
