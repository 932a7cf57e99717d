"""
Logging configuration for rover simulation applications.

The package itself only creates module loggers; applications call
setup_logging() once at startup to attach handlers.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Apply a unified log format to console and, optionally, file output.

    Args:
        level: Minimum severity level (e.g. logging.DEBUG, logging.INFO)
        log_file: Path of a rotating log file (1 MB, 2 backups); None for console only
    """
    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT)

    handlers = []
    console = logging.StreamHandler()
    console.setFormatter(fmt)
    handlers.append(console)

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=2)
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)

    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
