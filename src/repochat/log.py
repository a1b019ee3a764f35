"""Logging setup for repochat.

Modules obtain a logger with ``get_logger(__name__)``. The CLI calls
``configure_logging()`` once to route records through rich.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_ROOT = "repochat"


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Attach a single RichHandler to the ``repochat`` logger (idempotent).

    Args:
        verbose: Log at DEBUG instead of WARNING.
        console: Console to write to; defaults to stderr.
    """
    logger = logging.getLogger(_ROOT)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger below the ``repochat`` hierarchy."""
    return logging.getLogger(name)
