"""
Tests for logging setup.
"""

import logging
import pytest

from bitso.utils.logging_setup import NOISY_LOGGERS, setup_logging_from_config
from config.settings import LoggingConfig


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLoggingFromConfig:
    """Tests for setup_logging_from_config."""

    def test_console_level_from_config(self):
        setup_logging_from_config(LoggingConfig(level="WARNING"))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_verbose_forces_debug(self):
        setup_logging_from_config(LoggingConfig(level="ERROR"), verbose=True)

        assert logging.getLogger().level == logging.DEBUG

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "bitso.log"

        setup_logging_from_config(LoggingConfig(level="INFO", file_path=str(log_file)))
        logging.getLogger("bitso.test").debug("written to file only")

        root = logging.getLogger()
        assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
        for handler in root.handlers:
            handler.flush()
        assert "written to file only" in log_file.read_text()

    def test_noisy_loggers_quieted(self):
        setup_logging_from_config(LoggingConfig(level="DEBUG"))

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
