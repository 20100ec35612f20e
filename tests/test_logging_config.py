"""gallery logger setup."""

from __future__ import annotations

import io
import logging

from gallery.logging_config import LOGGER_NAME, setup_logging


def test_repeated_setup_does_not_duplicate_lines() -> None:
    buf = io.StringIO()
    setup_logging(stream=io.StringIO())
    logger = setup_logging(stream=buf)

    logging.getLogger("gallery.sketches.wfc").info("collapsed")

    assert logger.name == LOGGER_NAME
    assert len(logger.handlers) == 1
    assert buf.getvalue().count("collapsed") == 1
    assert " - gallery.sketches.wfc - INFO - collapsed" in buf.getvalue()


def test_level_filters_and_file_handler(tmp_path) -> None:
    buf = io.StringIO()
    log_file = tmp_path / "gallery.log"
    logger = setup_logging(logging.WARNING, log_file=log_file, stream=buf)

    logging.getLogger("gallery.server").info("quiet")
    logging.getLogger("gallery.server").warning("loud")
    for handler in logger.handlers:
        handler.flush()

    assert "quiet" not in buf.getvalue()
    assert "loud" in buf.getvalue()
    assert "loud" in log_file.read_text(encoding="utf-8")
    logger.handlers[1].close()
