"""Logging configuration."""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_console_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> None:
    """Send application logs to stdout at ``level``.

    Safe to call more than once; later calls only adjust the level.
    """
    global _console_handler

    log_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)

    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _console_handler.setLevel(log_level)

    if _console_handler not in root.handlers:
        root.addHandler(_console_handler)
