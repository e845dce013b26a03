"""Logging setup for the fairsplit CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False) -> None:
    """Route fairsplit loggers to stderr through rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=verbose)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("fairsplit")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
