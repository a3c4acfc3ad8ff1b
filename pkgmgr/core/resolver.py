"""Dependency resolution for pkgmgr.

:func:`resolve` computes the transitive dependency closure of a root
manifest against a :class:`~pkgmgr.core.registry.RegistryIndex` snapshot:

1. **Breadth-first discovery.** Direct dependencies are requested first,
   then their dependencies, level by level. Each request carries the name
   of the package that made it, for diagnostics.
2. **First choice is binding.** The first request for a name picks the
   newest registry version satisfying it. Later requests for that name
   only add an edge when the chosen version satisfies them; otherwise the
   whole resolution fails with :class:`~pkgmgr.exceptions.VersionConflictError`.
   There is no backtracking and no intersection of ranges.
3. **Cycle rejection.** The edges collected during discovery are checked
   with :meth:`~pkgmgr.core.graph.DependencyGraph.detect_cycle` before a
   result is returned.

Every name is visited at most once, so the work is linear in the size of
the closure. Each call owns its own queue, visited map and graph; nothing
is shared between calls.

Typical usage::

    from pkgmgr.core.loader import load_manifest, load_registry
    from pkgmgr.core.resolver import resolve

    manifest = load_manifest("Package.toml")
    registry = load_registry("registry-data")
    result   = resolve(manifest, registry)

    for package in result:
        print(package.name, package.version)
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List

from pkgmgr.core.graph import DependencyGraph
from pkgmgr.core.lockfile import checksum
from pkgmgr.core.registry import RegistryIndex
from pkgmgr.utils.logger import get_logger
from pkgmgr.exceptions import CircularDependencyError, VersionConflictError
from pkgmgr.models import (
    ManifestRecord,
    ResolutionResult,
    ResolvedPackage,
    VersionRequirement,
)

logger = get_logger("resolver")

# Public API
__all__ = ["DependencyRequest", "resolve"]


@dataclass(frozen=True)
class DependencyRequest:
    """A pending request for a package, as queued by the resolver.

    Attributes:
        name: Requested package name.
        requirement: Version predicate the requester declared.
        parent: Name of the requesting package (the root for direct deps).
    """

    name: str
    requirement: VersionRequirement
    parent: str

    def to_display_string(self) -> str:
        """Return a human-readable description of the request."""
        return f"{self.parent} requires {self.name} {self.requirement}"


def _requests_for(record: ManifestRecord) -> List[DependencyRequest]:
    """Return ``record``'s dependency requests in sorted name order."""
    return [
        DependencyRequest(name, record.dependencies[name], record.name)
        for name in record.dependency_names()
    ]


def _path_to_root(root: str, parent: str, requested_by: Dict[str, str]) -> List[str]:
    """Walk first-requester links from ``parent`` back up to ``root``."""
    path = [parent]
    while path[-1] != root and path[-1] in requested_by:
        path.append(requested_by[path[-1]])
    path.reverse()
    return path


def resolve(manifest: ManifestRecord, registry: RegistryIndex) -> ResolutionResult:
    """Resolve the full dependency closure of ``manifest``.

    Args:
        manifest: Root manifest whose dependencies should be resolved.
        registry: Immutable registry snapshot to choose versions from.

    Returns:
        Resolved packages in breadth-first discovery order.

    Raises:
        PackageNotFoundError: A request matches no registry record.
        VersionConflictError: A request is incompatible with the version
            already chosen for that name.
        CircularDependencyError: The resolved packages depend on each other
            in a cycle, or a package depends on the root manifest.
    """
    logger.debug(
        "Resolving %s with %d direct dependenc(ies)",
        manifest,
        len(manifest.dependencies),
    )

    queue: Deque[DependencyRequest] = deque(_requests_for(manifest))
    visited: Dict[str, ResolvedPackage] = {}
    requesters: Dict[str, List[str]] = {}
    requested_by: Dict[str, str] = {}
    resolved: List[ResolvedPackage] = []

    while queue:
        request = queue.popleft()
        name = request.name
        requesters.setdefault(name, []).append(request.parent)

        if name == manifest.name:
            path = _path_to_root(manifest.name, request.parent, requested_by)
            raise CircularDependencyError(path + [name])

        chosen = visited.get(name)
        if chosen is not None:
            if not request.requirement.matches(chosen.version):
                raise VersionConflictError(
                    name,
                    request.requirement,
                    chosen.version,
                    requesters[name],
                )
            logger.debug(
                "%s already resolved to %s; satisfies %s",
                name,
                chosen.version,
                request.to_display_string(),
            )
            continue

        record = registry.lookup(name, request.requirement)
        package = ResolvedPackage(
            name=record.name,
            version=record.version,
            dependencies=tuple(record.dependency_names()),
            checksum=checksum(record),
        )
        visited[name] = package
        requested_by[name] = request.parent
        resolved.append(package)
        logger.debug("Selected %s for %s", package, request.to_display_string())

        queue.extend(_requests_for(record))

    result = ResolutionResult(tuple(resolved))

    cycle = DependencyGraph.from_result(result).detect_cycle()
    if cycle:
        raise CircularDependencyError(cycle)

    logger.info("Resolved %d package(s)", len(result))
    return result
