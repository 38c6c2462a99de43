"""Logging setup for the gallery-engine CLI."""

import sys

from loguru import logger

LOG_FORMAT = "{level.icon} {message}"
# Verbose runs add the time and the logging module and line.
VERBOSE_LOG_FORMAT = "{time:HH:mm:ss.SSS} {level.icon} {name}:{line} {message}"


def configure_logging(*, verbose: bool = False) -> int:
    """Send gallery-engine logs to stderr, replacing loguru's default sink.

    Returns:
        The id of the added sink.
    """
    logger.remove()
    if verbose:
        return logger.add(sys.stderr, level="DEBUG", format=VERBOSE_LOG_FORMAT)
    return logger.add(sys.stderr, level="INFO", format=LOG_FORMAT)
