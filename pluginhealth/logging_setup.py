# pluginhealth/logging_setup.py
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | int = "INFO") -> None:
    """Configure the root logger with a single stderr handler."""
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger()
    logger.setLevel(level)

    # Re-running setup (tests, repeated main() calls) must not stack handlers.
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    # SQL echo is opt-in through the engine, keep the library quiet otherwise.
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logger.debug("Logging configured.")
