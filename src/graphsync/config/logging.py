"""Root logger setup for the command line entry point."""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Request-level chatter from these libraries is only shown at DEBUG.
_LIBRARY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "neo4j")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger; ``force`` replaces handlers installed earlier."""

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
