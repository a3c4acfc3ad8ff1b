"""Init command implementation for pkgmgr.

Creates a fresh ``Package.toml`` with no dependencies.
"""

from __future__ import annotations

import sys

import click

from pkgmgr.core import write_manifest
from pkgmgr.models import ManifestRecord, Version
from pkgmgr.context import pass_context, PkgMgrContext
from pkgmgr.exceptions import PkgMgrError
from pkgmgr.constants import DEFAULT_INIT_AUTHOR, DEFAULT_INIT_VERSION
from pkgmgr.utils import print_error, print_success


@click.command()
@click.argument("name")
@pass_context
def init(ctx: PkgMgrContext, name: str) -> None:
    """Initialize a new package called NAME."""
    path = ctx.config.manifest
    if path.exists():
        print_error(f"{path} already exists")
        sys.exit(1)

    record = ManifestRecord(
        name=name,
        version=Version.parse(DEFAULT_INIT_VERSION),
        authors=(DEFAULT_INIT_AUTHOR,),
        description="A new package",
    )

    try:
        write_manifest(record, path)
    except PkgMgrError as e:
        print_error(f"{e}")
        sys.exit(1)

    print_success(f"Created {path} for {name}")
