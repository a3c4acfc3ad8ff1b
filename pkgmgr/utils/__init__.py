"""
Utility helpers for pkgmgr.

This package provides reusable utilities used across pkgmgr, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Version change classification

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from pkgmgr.utils.filesystem import (
    remove_file,
    reset_directory,
    safe_read_file,
    safe_write_file,
    validate_path,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from pkgmgr.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from pkgmgr.utils.console import (
    colorize_update_type,
    get_raw_console,
    print_error,
    print_info,
    print_success,
    print_table,
    print_tree,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from pkgmgr.utils.version_utils import diff_versions, get_update_type

__all__ = [
    # Console
    "print_error",
    "print_info",
    "print_table",
    "print_tree",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "remove_file",
    "reset_directory",
    "validate_path",
    # Version utilities
    "get_update_type",
    "diff_versions",
]
