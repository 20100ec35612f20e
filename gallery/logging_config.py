"""Logging setup for the CLI and the web service.

Only the ``gallery`` namespace logger is configured, so sketch modules that
log through ``logging.getLogger(__name__)`` pick it up and third-party
loggers (uvicorn, PIL) keep their own settings.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

LOGGER_NAME = "gallery"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: str | Path | None = None,
                  stream: TextIO | None = None) -> logging.Logger:
    """Attach a console handler (and optionally a file handler) to ``gallery``.

    Calling it again replaces the previous handlers, so a reloaded server or
    a second CLI run in the same process does not log every line twice.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging initialised at %s", logging.getLevelName(level))
    return logger
