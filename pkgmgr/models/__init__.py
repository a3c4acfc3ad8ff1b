"""
Unified data model exports for pkgmgr.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``pkgmgr.models`` instead of individual submodules.

Example:
    >>> from pkgmgr.models import Version, VersionRequirement, ManifestRecord
"""

from __future__ import annotations

from pkgmgr.models.version import Version
from pkgmgr.models.manifest import ManifestRecord
from pkgmgr.models.requirement import RequirementKind, VersionRequirement, matches
from pkgmgr.models.resolution import ResolutionResult, ResolvedPackage

__all__ = [
    "Version",
    "RequirementKind",
    "VersionRequirement",
    "matches",
    "ManifestRecord",
    "ResolvedPackage",
    "ResolutionResult",
]
