"""
Logging helpers for softserve.

Progress text meant for the user is printed directly; logging carries
diagnostics such as the exact commands being spawned. Only the softserve
package logger is configured, so a host application's root logger is
left alone.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "softserve"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


class _CliHandler(logging.StreamHandler):
    """Marks the handler installed by configure_logging."""


def level_for(verbosity: int) -> int:
    """Map a --verbose count onto a logging level."""

    return _LEVELS[max(0, min(verbosity, len(_LEVELS) - 1))]


def configure_logging(verbosity: int) -> logging.Logger:
    """
    Attach a stderr handler to the softserve logger.

    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG

    Calling it again replaces the previous handler instead of stacking a
    second one, so repeated CLI invocations in one process log each
    record once.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, _CliHandler):
            logger.removeHandler(handler)

    handler = _CliHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level_for(verbosity))
    logger.propagate = False
    return logger
