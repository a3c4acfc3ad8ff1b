"""Registry browsing commands for pkgmgr.

Typical usage::

    $ pkgmgr registry list
    $ pkgmgr registry search web
    $ pkgmgr registry info tokio
"""

from __future__ import annotations

import sys

import click

from pkgmgr.core import RegistryIndex, load_registry
from pkgmgr.context import pass_context, PkgMgrContext
from pkgmgr.exceptions import PkgMgrError
from pkgmgr.utils import (
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
)


def _load(ctx: PkgMgrContext) -> RegistryIndex:
    try:
        return load_registry(ctx.config.registry)
    except PkgMgrError as e:
        print_error(f"{e}")
        sys.exit(1)


@click.group()
def registry() -> None:
    """Browse the local package registry."""


@registry.command("list")
@pass_context
def list_packages(ctx: PkgMgrContext) -> None:
    """List all packages and their versions."""
    packages = _load(ctx).list_packages()

    print_table(
        [
            {"Package": name, "Versions": ", ".join(versions)}
            for name, versions in packages.items()
        ],
        title="Available packages",
        column_styles={"Package": "bold"},
    )
    print_success(f"{len(packages)} packages available")


@registry.command()
@click.argument("query")
@pass_context
def search(ctx: PkgMgrContext, query: str) -> None:
    """Search package names and descriptions for QUERY."""
    results = _load(ctx).search(query)
    if not results:
        print_warning(f"No packages match {query!r}")
        return

    print_table(
        [
            {
                "Package": record.name,
                "Latest": str(record.version),
                "Description": record.description or "",
            }
            for record in results
        ],
        column_styles={"Package": "bold"},
    )


@registry.command()
@click.argument("package")
@pass_context
def info(ctx: PkgMgrContext, package: str) -> None:
    """Show details of the newest version of PACKAGE."""
    index = _load(ctx)
    try:
        record = index.info(package)
    except PkgMgrError as e:
        print_error(f"{e}")
        sys.exit(1)

    console = get_raw_console()
    console.print(f"  Name:        {record.name}", markup=False)
    console.print(f"  Version:     {record.version}", markup=False)
    console.print(f"  Versions:    {', '.join(map(str, index.versions(package)))}", markup=False)
    console.print(f"  Authors:     {', '.join(record.authors)}", markup=False)
    if record.description:
        console.print(f"  Description: {record.description}", markup=False)

    if record.dependencies:
        console.print("\n  Dependencies:")
        for name in record.dependency_names():
            console.print(f"    {name} {record.dependencies[name]}", markup=False)
