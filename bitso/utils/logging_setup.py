"""
Logging setup for scripts and applications using the client.

The library itself only creates module loggers; handlers are installed
here, once, by the entry point.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from config.settings import LoggingConfig

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s "
    "(%(filename)s:%(lineno)d): %(message)s"
)

# Third-party loggers that are too chatty below WARNING
NOISY_LOGGERS = ("urllib3", "websockets", "asyncio")


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path; the file always receives DEBUG
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)
        # File handler needs DEBUG records to reach it
        root_logger.setLevel(logging.DEBUG)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_config(config: LoggingConfig, verbose: bool = False) -> None:
    """Configure logging from a LoggingConfig; verbose forces DEBUG on the console."""
    setup_logging("DEBUG" if verbose else config.level, config.file_path)
