"""Logging setup for the docnoter command line."""

import sys

from loguru import logger

# Per-event engine messages (cache hits, short-circuits, mark rebuilds) only make
# sense with their origin attached.
VERBOSE_FORMAT = "{level.icon} {name}:{line} {message}"
DEFAULT_FORMAT = "{level.icon} {message}"


def configure_logging(*, verbose: bool = False) -> None:
    """Send docnoter logs to stderr.

    Session lifecycle and note-file writes are logged at INFO. ``verbose`` adds
    the DEBUG trace of navigation events and partition recomputation, tagged
    with the emitting module.
    """
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=VERBOSE_FORMAT)
    else:
        logger.add(sys.stderr, level="INFO", format=DEFAULT_FORMAT)
