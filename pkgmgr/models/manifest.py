"""
Manifest data model for pkgmgr.

A :class:`ManifestRecord` describes one package at one version: its
identity, authorship and the requirements it places on its direct
dependencies. The root ``Package.toml`` and every registry entry share
this shape.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pkgmgr.models.version import Version
from pkgmgr.models.requirement import VersionRequirement


@dataclass(frozen=True)
class ManifestRecord:
    """
    One package declaration.

    Attributes:
        name: Package name.
        version: Package version.
        authors: Author strings, in declaration order.
        description: Optional one-line description.
        dependencies: Dependency name → requirement.
    """

    name: str
    version: Version
    authors: Tuple[str, ...] = ()
    description: Optional[str] = None
    dependencies: Mapping[str, VersionRequirement] = field(default_factory=dict)

    @property
    def key(self) -> Tuple[str, Version]:
        """Registry identity of this record."""
        return (self.name, self.version)

    def dependency_names(self) -> List[str]:
        """Return dependency names in sorted order."""
        return sorted(self.dependencies)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON/TOML-serializable representation.

        Optional fields are omitted when unset and dependencies are
        written in sorted order with canonical requirement text.
        """
        package: Dict[str, Any] = {
            "name": self.name,
            "version": str(self.version),
            "authors": list(self.authors),
        }
        if self.description is not None:
            package["description"] = self.description

        return {
            "package": package,
            "dependencies": {
                name: str(self.dependencies[name]) for name in self.dependency_names()
            },
        }

    def canonical_json(self) -> str:
        """Return the canonical serialization used for checksums."""
        return json.dumps(
            self.to_dict(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"
