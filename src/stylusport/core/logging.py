"""Logging configuration for the command line."""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "STYLUSPORT_LOG_LEVEL"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def level_for(verbosity: int = 0, quiet: bool = False) -> int:
    """Map -v / -q flags to a log level; a valid level in the environment wins."""
    env_level = LEVELS.get(os.environ.get(LOG_LEVEL_ENV, "").strip().upper())
    if env_level is not None:
        return env_level
    if quiet:
        return logging.ERROR
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(level: int = logging.WARNING, console: Optional[Console] = None):
    """Send log records to stderr through rich."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=level <= logging.DEBUG,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    root.addHandler(handler)
