"""Logging setup: stdlib :mod:`logging` rendered through rich on stderr."""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Third-party loggers that are chatty at DEBUG.
_NOISY_LOGGERS = ("httpx", "httpcore", "anthropic")


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if verbose else logging.WARNING)
