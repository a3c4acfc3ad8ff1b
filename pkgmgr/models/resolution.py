"""
Resolution data models for pkgmgr.

This module defines the output of dependency resolution: one
:class:`ResolvedPackage` per package name, collected into an ordered
:class:`ResolutionResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from pkgmgr.models.version import Version


@dataclass(frozen=True)
class ResolvedPackage:
    """A package chosen by the resolver.

    Args:
        name: Package name.
        version: Selected version.
        dependencies: Names of direct dependencies, in declaration order.
        checksum: Hex SHA-256 of the originating record.
    """

    name: str
    version: Version
    dependencies: Tuple[str, ...] = ()
    checksum: str = ""

    def sort_key(self) -> Tuple[str, Version]:
        """Return the key used to order packages in a lockfile."""
        return (self.name, self.version)

    def to_display_string(self) -> str:
        """Return ``name vX.Y.Z`` as shown in trees and reports."""
        return f"{self.name} v{self.version}"

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(eq=False)
class ResolutionResult:
    """Ordered, duplicate-free set of resolved packages.

    Packages are kept in the order the resolver discovered them. Equality
    ignores that order, since the lockfile stores packages sorted by name
    and version and a decoded lockfile must compare equal to the result it
    was written from.

    Attributes:
        packages: Resolved packages in discovery order.
    """

    packages: Tuple[ResolvedPackage, ...] = ()
    _index: Dict[str, ResolvedPackage] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.packages = tuple(self.packages)
        for package in self.packages:
            if package.name in self._index:
                raise ValueError(f"duplicate package in resolution: {package.name}")
            self._index[package.name] = package

    def names(self) -> List[str]:
        """Return package names in discovery order."""
        return [package.name for package in self.packages]

    def get(self, name: str) -> Optional[ResolvedPackage]:
        """Return the package resolved for ``name``, if any."""
        return self._index.get(name)

    def sorted_packages(self) -> List[ResolvedPackage]:
        """Return packages sorted by ``(name, version)``."""
        return sorted(self.packages, key=ResolvedPackage.sort_key)

    def edges(self) -> List[Tuple[str, str]]:
        """Return ``(dependent, dependency)`` pairs in discovery order."""
        return [
            (package.name, dependency)
            for package in self.packages
            for dependency in package.dependencies
        ]

    def missing_dependencies(self) -> List[str]:
        """Return dependency names that have no resolved package."""
        missing: List[str] = []
        for _, dependency in self.edges():
            if dependency not in self._index and dependency not in missing:
                missing.append(dependency)
        return missing

    def __len__(self) -> int:
        return len(self.packages)

    def __iter__(self) -> Iterator[ResolvedPackage]:
        return iter(self.packages)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolutionResult):
            return NotImplemented
        return self.sorted_packages() == other.sorted_packages()

    __hash__ = None  # type: ignore[assignment]
