"""
Shared test fixtures.
"""

import logging
import pytest


@pytest.fixture(autouse=True)
def restore_bitso_logger_level():
    """Keep logger level changes made by one test from leaking into others."""
    logger = logging.getLogger("bitso")
    level = logger.level
    yield
    logger.setLevel(level)
