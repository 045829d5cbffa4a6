"""Logging setup for calcline.

Module loggers come from ``logging.getLogger(__name__)``; configure_logging()
routes them through a RichHandler on stderr so they never mix with results.

Level precedence: explicit level (from --verbose) > CALCLINE_LOG_LEVEL > WARNING.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV_VAR = "CALCLINE_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"


def level_from_env() -> int:
    """Log level named by CALCLINE_LOG_LEVEL, or WARNING if unset or unknown."""
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.WARNING)
    return level if isinstance(level, int) else logging.WARNING


def level_from_verbosity(verbose: int) -> Optional[int]:
    """Map -v / -vv to INFO / DEBUG; 0 defers to the environment."""
    if verbose <= 0:
        return None
    return logging.INFO if verbose == 1 else logging.DEBUG


def configure_logging(level: Optional[int] = None, console: Optional[Console] = None) -> None:
    """Install a single RichHandler on the ``calcline`` logger.

    Safe to call more than once; earlier handlers are replaced.
    """
    if level is None:
        level = level_from_env()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger = logging.getLogger("calcline")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
