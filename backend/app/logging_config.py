"""Process-wide logging setup."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler once; later calls only adjust the level."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric)
    # httpx logs every request at INFO; our client already logs at DEBUG.
    logging.getLogger("httpx").setLevel(max(numeric, logging.WARNING))
    logging.getLogger(__name__).debug("[logging] configured at %s", level.upper())
