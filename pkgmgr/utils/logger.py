"""
Logging utilities for pkgmgr.

All pkgmgr modules log under the ``pkgmgr`` namespace through
:func:`get_logger`. Library use stays silent (a ``NullHandler`` is
attached) until the CLI calls :func:`setup_logging`, which installs a
single stderr handler on the namespace root. Interactive terminals get
Rich-rendered records; pipes, CI, and ``NO_COLOR`` get plain text.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from rich.console import Console
from rich.logging import RichHandler

from pkgmgr.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "pkgmgr"

_logging_configured: bool = False
_lock = threading.Lock()


def _is_interactive(stream: IO[str]) -> bool:
    """Return True if ``stream`` is a terminal that accepts styling."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return stream.isatty()
    except (AttributeError, OSError, ValueError):
        return False


def _build_handler(stream: IO[str], verbose: bool) -> logging.Handler:
    if _is_interactive(stream):
        handler: logging.Handler = RichHandler(
            console=Console(file=stream, stderr=stream is sys.stderr),
            show_time=verbose,
            show_path=verbose,
            log_time_format=LOG_DATE_FORMAT,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    handler = logging.StreamHandler(stream)
    fmt = LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT
    handler.setFormatter(logging.Formatter(fmt, datefmt=LOG_DATE_FORMAT))
    return handler


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure logging for pkgmgr.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        level: Logging level (e.g., ``logging.INFO``, ``logging.DEBUG``).
        verbose: Include timestamps and logger names.
        stream: Output stream; defaults to ``sys.stderr``.
    """
    global _logging_configured

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.setLevel(level)

        handler = _build_handler(stream or sys.stderr, verbose)
        handler.setLevel(level)

        root_logger.addHandler(handler)
        root_logger.propagate = False
        _logging_configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the pkgmgr namespace.

    Args:
        name: Short name (``"resolver"``) or a dotted module path already
            under ``pkgmgr``.

    Returns:
        A logger instance under the ``pkgmgr`` hierarchy.
    """
    if not name or name == ROOT_LOGGER_NAME:
        logger = logging.getLogger(ROOT_LOGGER_NAME)
    elif name.startswith(f"{ROOT_LOGGER_NAME}."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger


def is_logging_configured() -> bool:
    """Return True if pkgmgr logging has been configured."""
    return _logging_configured


def disable_logging() -> None:
    """Silence all pkgmgr logging output."""
    global _logging_configured

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(logging.NullHandler())
        root_logger.setLevel(logging.NOTSET)
        _logging_configured = False
