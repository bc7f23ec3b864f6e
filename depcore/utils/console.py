"""
Rich-backed terminal output for depcore commands.

Results and status lines meant for the user are printed here. Diagnostics
belong to :mod:`depcore.utils.logger` and never pass through this module.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

DEPCORE_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
    }
)

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Color only for an interactive stdout outside CI and without NO_COLOR."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    global _console

    if _console is not None:
        return _console
    with _console_lock:
        # Another thread may have won the race while we waited.
        if _console is None:
            color = _should_use_color()
            _console = Console(theme=DEPCORE_THEME, no_color=not color, highlight=color)
        return _console


def reconfigure_console() -> None:
    """Forget the shared console; the next print builds a fresh one.

    Call this after changing ``NO_COLOR`` or swapping ``sys.stdout``.
    """
    global _console
    with _console_lock:
        _console = None


def _status(style: str, prefix: str, message: str) -> None:
    _get_console().print(f"{prefix} {message}", style=style)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _status("success", prefix, message)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _status("error", prefix, message)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _status("warning", prefix, message)


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Print ``data`` as a table, one row per mapping.

    Args:
        data: Rows keyed by column name. Nothing is printed when empty.
        headers: Columns to show, in order. Defaults to the first row's keys.
            Cells missing from a row are left blank.
        title: Caption shown above the table.
        column_styles: Column name to Rich column options; ``style``,
            ``justify`` and ``no_wrap`` are honoured.
    """
    if not data:
        return

    columns = list(data[0]) if headers is None else headers
    styles = column_styles or {}

    table = Table(title=title, show_header=True, header_style="bold")
    for name in columns:
        options = styles.get(name, {})
        table.add_column(
            name,
            style=options.get("style"),
            justify=options.get("justify", "default"),
            no_wrap=options.get("no_wrap", False),
        )
    for row in data:
        table.add_row(*[str(row.get(name, "")) for name in columns])

    _get_console().print(table)


def get_raw_console() -> Console:
    """Give commands direct access to the shared console for free-form output."""
    return _get_console()
