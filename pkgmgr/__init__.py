"""
pkgmgr: a small, local package manager

pkgmgr reads a ``Package.toml`` manifest, resolves its dependencies against
a local registry of package records, and persists the result as a
reproducible ``Package.lock`` lockfile.

Features include:
    • Semantic version requirements (exact, caret, tilde, >=, wildcard)
    • Deterministic breadth-first dependency resolution
    • Cycle and version-conflict detection
    • Lockfiles with SHA-256 integrity checksums
    • Dependency tree rendering
"""

from __future__ import annotations

from pkgmgr.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "pkgmgr Contributors"
__license__ = "Apache-2.0"
__description__ = "Local package manager with deterministic dependency resolution."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from pkgmgr.core import (
    DependencyGraph,
    RegistryIndex,
    ResolutionResult,
    decode,
    encode,
    resolve,
)
from pkgmgr.models import ManifestRecord, ResolvedPackage, Version, VersionRequirement

__all__ = [
    "__version__",
    "DependencyGraph",
    "ManifestRecord",
    "RegistryIndex",
    "ResolutionResult",
    "ResolvedPackage",
    "Version",
    "VersionRequirement",
    "decode",
    "encode",
    "resolve",
]
