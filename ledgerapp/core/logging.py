"""
Logging setup shared by the API process and scripts.

Usage:
    from ledgerapp.core.logging import setup_logging
    setup_logging("INFO")
    logger = logging.getLogger(__name__)
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Library loggers that are too chatty at INFO.
NOISY_LOGGERS = [
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
]


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Configure the root logger with a single console handler.

    Calling it again replaces the handler instead of adding another one.

    Args:
        level: log level name or number for the root logger

    Returns:
        The configured root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        if getattr(handler, "_ledgerapp", False):
            root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    console_handler._ledgerapp = True  # type: ignore[attr-defined]
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
