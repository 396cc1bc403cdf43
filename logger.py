"""Logging setup for the German tutor.

All modules log through children of the ``german_tutor`` logger. Output goes
through rich so it shares the console with the tutor UI.

Usage:
    from logger import get_logger

    log = get_logger(__name__)
    log.info("Loaded %d levels", len(catalog.levels))
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "german_tutor"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a named child of it."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: str | int = "WARNING", console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the package logger.

    Safe to call more than once; the previous handler is replaced.
    """
    root = get_logger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    root.propagate = False
    return root
