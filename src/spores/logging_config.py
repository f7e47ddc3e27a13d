"""Logging configuration for the spores package."""

import logging
import sys

LOGGER_NAME = "spores"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the package.

    Log records go to stderr so that stdout only ever carries the JSON result.

    Args:
        debug: Log at DEBUG instead of WARNING
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers = []

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    level = logging.DEBUG if debug else logging.WARNING
    logger.setLevel(level)
    handler.setLevel(level)

    # Prevent propagation to root logger
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name for the logger, typically __name__

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
