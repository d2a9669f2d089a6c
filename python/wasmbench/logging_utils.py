"""Logging setup for the harness."""

import logging
import sys
from typing import Optional, Union

from .core import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Configure the package logger with a single stderr handler.

    Report lines go to stdout, so log output stays on stderr. Calling this
    again only updates the level. An unknown WASMBENCH_LOG_LEVEL falls
    back to WARNING; an unknown explicit level raises ValueError.
    """
    from_env = level is None
    if from_env:
        level = LOG_LEVEL
    invalid = None
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            if not from_env:
                raise ValueError(f"Invalid log level: {name}")
            invalid, level = name, logging.WARNING

    root = logging.getLogger("wasmbench")
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(h)
    if invalid is not None:
        root.warning("Invalid WASMBENCH_LOG_LEVEL %r, using WARNING", invalid)
    return root
