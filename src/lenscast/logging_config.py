"""Logging configuration for lenscast."""

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "WARNING",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Set up logging for the lenscast package.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Stream for the console handler. Defaults to stderr, which
            keeps stdout free for image data.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("lenscast")
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    # Replace handlers from an earlier call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    return logger
