"""Install command implementation for pkgmgr.

Reads the manifest and registry, reuses an existing ``Package.lock`` when it
is still valid, otherwise resolves from scratch, then installs every
package and writes the lockfile.

A lockfile is reused only when:

1. it decodes cleanly (a corrupt lockfile is discarded with a warning),
2. every manifest dependency is locked at a version its requirement
   accepts, and nothing unreachable from the manifest is locked, and
3. every locked checksum still matches its registry record.

Typical usage::

    $ pkgmgr install
    $ pkgmgr -v install
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from pkgmgr.config import PkgMgrConfig
from pkgmgr.context import pass_context, PkgMgrContext
from pkgmgr.exceptions import CorruptLockfileError, FileOperationError, PkgMgrError
from pkgmgr.models import ManifestRecord, ResolutionResult
from pkgmgr.core import (
    RegistryIndex,
    find_drift,
    install_packages,
    load_manifest,
    load_registry,
    read_lockfile,
    resolve,
    unmet_requirements,
    unused_packages,
    verify_installation,
    verify_lockfile,
    write_lockfile,
)
from pkgmgr.utils import (
    get_logger,
    print_error,
    print_info,
    print_success,
    print_warning,
)

logger = get_logger("commands.install")


@click.command()
@pass_context
def install(ctx: PkgMgrContext) -> None:
    """Resolve, install and lock the manifest's dependencies.

    \b
    Exits:
        0 on success, 1 if resolution or installation failed.
    """
    try:
        run_install(ctx.config)
        sys.exit(0)

    except PkgMgrError as e:
        print_error(f"{e}")
        sys.exit(1)


def run_install(config: PkgMgrConfig, *, reuse_lockfile: bool = True) -> ResolutionResult:
    """Shared implementation of ``install`` and ``update``.

    Args:
        config: Paths to the manifest, lockfile, registry and install dir.
        reuse_lockfile: Consider an existing lockfile before resolving.

    Returns:
        The installed resolution.

    Raises:
        PkgMgrError: Any failure while loading, resolving or installing.
            The lockfile is left untouched in that case.
        FileOperationError: The install directory does not hold the
            resolved versions after installing.
        CorruptLockfileError: The lockfile read back after writing does
            not pin the resolved versions.
    """
    print_info("Reading manifest...")
    manifest = load_manifest(config.manifest)
    registry = load_registry(config.registry)

    result: Optional[ResolutionResult] = None
    if reuse_lockfile:
        result = _reusable_lockfile(config.lockfile, manifest, registry)

    if result is None:
        print_info("Resolving dependencies...")
        result = resolve(manifest, registry)

    print_success(f"{len(result)} packages to install")

    print_info("Installing packages...")
    install_packages(result, config.install_dir)
    if not verify_installation(result, config.install_dir):
        raise FileOperationError(
            "Installed packages do not match the resolution",
            file_path=str(config.install_dir),
            operation="verify",
        )

    print_info("Generating lock file...")
    write_lockfile(result, config.lockfile)
    if not verify_lockfile(result, read_lockfile(config.lockfile)):
        raise CorruptLockfileError(
            "written lockfile does not match the resolution",
            file_path=str(config.lockfile),
        )

    print_success("Installation complete!")
    return result


def _reusable_lockfile(
    path: Path,
    manifest: ManifestRecord,
    registry: RegistryIndex,
) -> Optional[ResolutionResult]:
    """Return the existing lockfile if it can be installed as-is."""
    if not path.exists():
        return None

    try:
        locked = read_lockfile(path)
    except CorruptLockfileError as exc:
        # Recoverable: discard the lockfile and resolve from the manifest.
        print_warning(f"{exc}; regenerating lock file")
        logger.info("Discarding corrupt lockfile %s", path)
        return None

    unmet = unmet_requirements(locked, manifest)
    if unmet:
        logger.info("Lockfile out of date for: %s", ", ".join(unmet))
        return None

    unused = unused_packages(locked, manifest)
    if unused:
        logger.info("Lockfile pins packages no longer needed: %s", ", ".join(unused))
        return None

    drift = find_drift(locked, registry)
    if drift:
        for entry in drift:
            print_warning(entry.to_display_string())
        return None

    print_info(f"Using {path.name}")
    return locked
