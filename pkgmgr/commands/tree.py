"""Tree command implementation for pkgmgr.

Prints the dependency tree recorded in ``Package.lock``. Top-level entries
are packages nothing else depends on; a package that was already expanded
higher up is shown again with a ``(*)`` marker instead of repeating its
subtree.
"""

from __future__ import annotations

import sys

import click

from pkgmgr.core import DependencyGraph, read_lockfile
from pkgmgr.context import pass_context, PkgMgrContext
from pkgmgr.exceptions import PkgMgrError
from pkgmgr.utils import (
    get_logger,
    print_error,
    print_info,
    print_success,
    print_tree,
)

logger = get_logger("commands.tree")


@click.command()
@pass_context
def tree(ctx: PkgMgrContext) -> None:
    """Display the locked dependency tree."""
    try:
        locked = read_lockfile(ctx.config.lockfile)
    except PkgMgrError as e:
        print_error(f"{e}")
        sys.exit(1)

    graph = DependencyGraph.from_result(locked)
    logger.debug("Rendering %r", graph)

    print_info("Dependency tree:")
    print_tree(graph.render_tree())
    print_success(f"{len(locked)} total packages")
