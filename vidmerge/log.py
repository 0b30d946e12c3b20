"""Rich-based logging helpers for vidmerge.

CLIs call :func:`configure` once; stages receive the returned logger
explicitly instead of reaching for a module-level printer.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "vidmerge"


def configure(level: int | str = logging.INFO, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the ``vidmerge`` logger and return it.

    Handlers are only added once, so host applications that already
    configured the logger keep their setup.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_path=False,
        )
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger or one of its children."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
