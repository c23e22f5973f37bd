"""
Logging configuration for paypro
"""

import logging
import sys
from typing import TextIO

PACKAGE_LOGGER = "paypro"

LOG_FORMAT = "%(asctime)s - %(levelname)-8s %(name)s %(filename)s:%(lineno)d %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    stream: TextIO | None = None,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Configure a console handler with timestamp, file and line number information

    Args:
        level: Logging level (default: INFO)
        stream: Output stream (default: stdout)
        logger_name: Logger to configure; "" configures the root logger

    Returns:
        The configured logger
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    target = logging.getLogger(logger_name)
    target.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in target.handlers[:]:
        target.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    target.addHandler(console_handler)
    return target


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name (typically __name__)"""
    return logging.getLogger(name)
