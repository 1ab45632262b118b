"""
Logging Configuration

The engine only logs at DEBUG (rule decisions) and WARNING (a stage that
failed and was skipped). Scripts call setup_logging() once; library users
configure the "src" logger however they like.
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False, stream: Optional[TextIO] = None) -> None:
    """
    Route engine logs to stderr.

    Args:
        verbose: DEBUG level (shows which rule bound each image)
        quiet: WARNING level (only failed stages)
        stream: Target stream, stderr by default so stdout stays clean for
            JSON output
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("src")
    logger.setLevel(level)

    # Calling twice must not duplicate output
    logger.handlers.clear()
    logger.addHandler(handler)
