"""
Executable module for pkgmgr.

Running:
    python -m pkgmgr

is equivalent to:
    pkgmgr

This module simply forwards execution to the CLI entrypoint defined in
`pkgmgr.cli`.
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entrypoint when executing `python -m pkgmgr`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from pkgmgr.cli import main as cli_main
    except ImportError as exc:
        sys.stderr.write("pkgmgr CLI could not be loaded.\n")
        sys.stderr.write(f"Python version : {sys.version}\n")
        sys.stderr.write(f"ImportError: {exc}\n")
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
