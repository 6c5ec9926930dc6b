"""Logging setup for the command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    """Route the calpoint loggers through Rich on stderr.

    Args:
        verbose: Show DEBUG messages instead of WARNING and above
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger = logging.getLogger("calpoint")
    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False
