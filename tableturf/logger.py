"""
Logging setup for the outer layers (session, api, cli, stdio adapter).

The engine core never logs. Everything else gets a module-level logger
via logging.getLogger(__name__) and relies on setup_logging() having
been called once by the entry point.
"""

from __future__ import annotations
import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_HANDLER_NAME = "tableturf"


def setup_logging(level: str | int = "INFO", stream: TextIO | None = None) -> logging.Logger:
    """
    Configure the `tableturf` logger.

    Safe to call more than once: the handler is installed only once and
    later calls just change the level.
    """
    logger = logging.getLogger("tableturf")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
