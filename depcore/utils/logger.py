"""
Logging setup for depcore.

Loggers live under the ``depcore`` namespace. Library users see nothing
until they configure logging themselves or call :func:`setup_logging`,
which the CLI does according to the number of ``-v`` flags.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from depcore.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

_ROOT_LOGGER_NAME = "depcore"

_logging_configured: bool = False
_lock = threading.Lock()


class ColoredFormatter(logging.Formatter):
    """Formatter that paints the level name with ANSI colors on a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname) if self.use_color else None
        if color is None or not _stderr_supports_color():
            return super().format(record)

        # The same record reaches every handler, so put the level name back.
        plain = record.levelname
        record.levelname = color + plain + self.RESET
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def _stderr_supports_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stderr.isatty()
    except (AttributeError, OSError):
        return False


def _replace_handlers(handler: logging.Handler, level: int, propagate: bool) -> None:
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = propagate


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Send depcore log records to ``stream`` (stderr by default).

    Calling it again swaps the previous handler out, so the CLI can run
    more than once in a process.

    Args:
        level: Threshold for both the logger and its handler.
        verbose: Use the long format with timestamp and logger name.
        stream: Where to write; ``sys.stderr`` when omitted.
    """
    global _logging_configured

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        ColoredFormatter(
            LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            use_color=not os.environ.get("NO_COLOR"),
        )
    )

    with _lock:
        _replace_handlers(handler, level, propagate=False)
        _logging_configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``depcore.<name>``; ``name`` may already carry the prefix.

    The first call also parks a ``NullHandler`` on the ``depcore`` logger
    so unconfigured applications don't get "no handler" warnings.
    """
    prefix = _ROOT_LOGGER_NAME + "."
    if not name or name == _ROOT_LOGGER_NAME:
        qualified = _ROOT_LOGGER_NAME
    elif name.startswith(prefix):
        qualified = name
    else:
        qualified = prefix + name

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())

    return logging.getLogger(qualified)


def is_logging_configured() -> bool:
    return _logging_configured


def disable_logging() -> None:
    """Undo :func:`setup_logging`, leaving depcore silent and propagating."""
    global _logging_configured

    with _lock:
        _replace_handlers(logging.NullHandler(), logging.NOTSET, propagate=True)
        _logging_configured = False
