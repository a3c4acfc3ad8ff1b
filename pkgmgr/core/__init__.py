"""
Core functionality exports for pkgmgr.

This module provides convenient access to the core subsystems of pkgmgr.
Importing from here keeps user-facing imports clean and stable:

    from pkgmgr.core import RegistryIndex, resolve, encode
"""

from __future__ import annotations

from pkgmgr.core.graph import DependencyGraph
from pkgmgr.core.registry import RegistryIndex
from pkgmgr.core.resolver import DependencyRequest, resolve
from pkgmgr.core.loader import load_manifest, load_registry, write_manifest
from pkgmgr.core.installer import install_packages, verify_installation
from pkgmgr.core.lockfile import (
    LockDrift,
    checksum,
    decode,
    encode,
    find_drift,
    read_lockfile,
    unmet_requirements,
    unused_packages,
    verify_lockfile,
    write_lockfile,
)
from pkgmgr.models import ResolutionResult

__all__ = [
    "DependencyGraph",
    "DependencyRequest",
    "LockDrift",
    "RegistryIndex",
    "ResolutionResult",
    "checksum",
    "decode",
    "encode",
    "find_drift",
    "install_packages",
    "load_manifest",
    "load_registry",
    "read_lockfile",
    "resolve",
    "unmet_requirements",
    "unused_packages",
    "verify_installation",
    "verify_lockfile",
    "write_lockfile",
    "write_manifest",
]
