"""Logging setup for the meow CLI.

User-facing output goes through :mod:`meow.display`; logging carries
diagnostics only and always writes to stderr.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"


def level_for_verbosity(verbosity: int) -> int:
    """Map the ``-v`` count to a logging level."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0) -> logging.Logger:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_for_verbosity(verbosity))
    return logging.getLogger("meow")
