"""Shared fixtures."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_gallery_logger():
    """CLI and server entry points attach handlers bound to the captured stdout."""
    yield
    logging.getLogger("gallery").handlers.clear()
