"""Logging configuration for the binup command line.

Library modules only ever call ``logging.getLogger(__name__)``; this
module installs the single stderr handler that renders their records.
Rich's :class:`~rich.logging.RichHandler` is used when Rich is installed,
a plain :class:`logging.StreamHandler` otherwise.  Repeated calls replace
the handler instead of stacking duplicates.
"""

from __future__ import annotations

import logging
import sys

from binup.cli.console import get_rich_console
from binup.exceptions import EnvironmentError

_HANDLER_TAG = "_binup_logging_handler"
_ROOT_LOGGER = "binup"


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def _build_handler() -> logging.Handler:
    try:
        from rich.logging import RichHandler

        return RichHandler(
            console=get_rich_console(),
            show_time=False,
            show_path=False,
            rich_tracebacks=False,
        )
    except (ModuleNotFoundError, EnvironmentError):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s [%(name)s] %(message)s"))
        return handler


def configure_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """Attach a stderr handler to the ``binup`` logger at *level*.

    Returns the configured package logger.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_TAG, False):
            logger.removeHandler(existing)

    handler = _build_handler()
    setattr(handler, _HANDLER_TAG, True)
    logger.addHandler(handler)
    logger.setLevel(_resolve_level(level))
    return logger
