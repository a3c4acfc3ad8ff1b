"""Update command implementation for pkgmgr.

Discards the existing ``Package.lock`` and resolves the manifest again
from scratch, so every package moves to the newest registry version its
requirements allow. The versions that changed are reported as a table
classified by :func:`~pkgmgr.utils.version_utils.get_update_type`.

Typical usage::

    $ pkgmgr update
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import click

from pkgmgr.commands.install import run_install
from pkgmgr.context import pass_context, PkgMgrContext
from pkgmgr.core import read_lockfile
from pkgmgr.exceptions import CorruptLockfileError, PkgMgrError
from pkgmgr.models import ResolutionResult
from pkgmgr.utils import (
    colorize_update_type,
    diff_versions,
    get_logger,
    print_error,
    print_info,
    print_table,
    print_warning,
    remove_file,
)

logger = get_logger("commands.update")


@click.command()
@pass_context
def update(ctx: PkgMgrContext) -> None:
    """Delete the lock file and re-resolve all dependencies."""
    try:
        _update(ctx)
        sys.exit(0)

    except PkgMgrError as e:
        print_error(f"{e}")
        sys.exit(1)


def _update(ctx: PkgMgrContext) -> None:
    config = ctx.config
    print_info("Updating dependencies...")

    before = _locked_versions(config.lockfile)
    if remove_file(config.lockfile):
        print_warning("Removed old lock file")

    result = run_install(config, reuse_lockfile=False)
    after = {package.name: str(package.version) for package in result}

    rows = [
        {
            "Package": name,
            "Locked": old or "-",
            "Resolved": new or "-",
            "Change": colorize_update_type(update_type),
        }
        for name, old, new, update_type in diff_versions(before, after)
    ]
    if rows:
        print_table(rows, title="Version changes")
    else:
        print_info("No version changes")


def _locked_versions(path: Path) -> Dict[str, str]:
    """Return ``name -> version`` from the current lockfile, if readable."""
    if not path.exists():
        return {}

    try:
        locked: ResolutionResult = read_lockfile(path)
    except CorruptLockfileError as exc:
        logger.info("Ignoring corrupt lockfile while updating: %s", exc)
        return {}

    return {package.name: str(package.version) for package in locked}
