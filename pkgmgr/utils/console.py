"""
Console output utilities for pkgmgr using Rich.

User-facing status lines, tables and dependency trees for CLI commands
go through this module. Diagnostics belong in :mod:`pkgmgr.utils.logger`.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any, Dict, List, Optional

from rich.text import Text
from rich.table import Table
from rich.theme import Theme
from rich.console import Console

from pkgmgr.constants import TREE_SEEN_MARKER

PKGMGR_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "package": "cyan",
        "root": "bold green",
    }
)

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return the shared Rich Console, creating it on first use."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=PKGMGR_THEME,
                    no_color=not use_color,
                    highlight=False,
                )
    return _console


def reconfigure_console() -> None:
    """Drop the shared console so the next call picks up a new environment."""
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "✓") -> None:
    """Print a success message."""
    _get_console().print(f"{prefix} {message}", style="success", markup=False)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    _get_console().print(f"{prefix} {message}", style="error", markup=False)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    _get_console().print(f"{prefix} {message}", style="warning", markup=False)


def print_info(message: str) -> None:
    """Print a progress message."""
    _get_console().print(message, style="info", markup=False)


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, str]] = None,
) -> None:
    """Render rows of dictionaries as a Rich table.

    Args:
        data: Row dictionaries; nothing is printed when empty.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        column_styles: Column name → Rich style.
    """
    if not data:
        return

    if headers is None:
        headers = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold")
    column_styles = column_styles or {}
    for header in headers:
        table.add_column(header, style=column_styles.get(header), overflow="fold")

    for row in data:
        table.add_row(*(str(row.get(h, "")) for h in headers))

    _get_console().print(table)


def print_tree(rendered: str) -> None:
    """Print a rendered dependency tree, highlighting top-level entries.

    Args:
        rendered: Output of :meth:`pkgmgr.core.graph.DependencyGraph.render_tree`.
    """
    console = _get_console()
    for line in rendered.splitlines():
        text = Text(line)
        if line.endswith(TREE_SEEN_MARKER):
            text.stylize("package")
            text.stylize("warning", len(line) - len(TREE_SEEN_MARKER))
        elif line.startswith(" "):
            text.stylize("package")
        else:
            text.stylize("root")
        console.print(text)


def colorize_update_type(update_type: str) -> str:
    """Return a Rich-markup colored update type label.

    Args:
        update_type: Classification from
            :func:`pkgmgr.utils.version_utils.get_update_type`.

    Returns:
        Rich markup string.
    """
    color_map = {
        "major": "red",
        "minor": "yellow",
        "patch": "green",
        "new": "cyan",
        "removed": "magenta",
        "downgrade": "red",
    }

    color = color_map.get(update_type.lower())
    return f"[{color}]{update_type}[/{color}]" if color else update_type
