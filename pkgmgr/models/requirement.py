"""
Version requirement data model for pkgmgr.

This module defines a structured representation of a single version
requirement as declared in a manifest's ``[dependencies]`` table, along
with the matching rules used by the registry and the resolver.

Supported forms::

    *          any version
    ^1.2.3     >=1.2.3, <2.0.0   (leftmost nonzero component is bumped)
    1.2.3      same as ^1.2.3
    ~1.2.3     >=1.2.3, <1.3.0
    >=1.2.3    >=1.2.3
    =1.2.3     exactly 1.2.3

A requirement may leave out trailing components. The lower bound fills
them with zero, while the upper bound only looks at what was written::

    ^0         >=0.0.0, <1.0.0
    ^0.0       >=0.0.0, <0.1.0
    ~1         >=1.0.0, <2.0.0
    =1.2       >=1.2.0, <1.3.0
"""

from __future__ import annotations

import re
from enum import Enum
from dataclasses import dataclass
from typing import Optional

from pkgmgr.models.version import Version
from pkgmgr.exceptions import InvalidRequirementError

_PARTIAL_VERSION = re.compile(r"^([0-9]+)(?:\.([0-9]+))?(?:\.([0-9]+))?$")


class RequirementKind(Enum):
    """Variants of a version requirement."""

    EXACT = "="
    CARET = "^"
    TILDE = "~"
    GREATER_EQ = ">="
    WILDCARD = "*"


# Checked longest first so ">=" wins over "=".
_PREFIXES = (
    (">=", RequirementKind.GREATER_EQ),
    ("^", RequirementKind.CARET),
    ("~", RequirementKind.TILDE),
    ("=", RequirementKind.EXACT),
)


@dataclass(frozen=True)
class VersionRequirement:
    """
    A parsed, immutable predicate over versions.

    Attributes:
        kind: Which matching rule applies.
        version: Lower bound or exact version; ``None`` for wildcards.
        precision: Number of components written (1 to 3); decides the
            upper bound of caret, tilde and partial exact requirements.
    """

    kind: RequirementKind
    version: Optional[Version] = None
    precision: int = 3

    def __post_init__(self) -> None:
        if (self.kind is RequirementKind.WILDCARD) != (self.version is None):
            raise ValueError(
                f"{self.kind.name} requirement "
                f"{'takes no' if self.kind is RequirementKind.WILDCARD else 'needs a'} "
                "version"
            )
        if self.precision not in (1, 2, 3):
            raise ValueError(f"precision must be 1, 2 or 3, got {self.precision}")

    @classmethod
    def parse(cls, text: str) -> "VersionRequirement":
        """
        Parse a requirement expression.

        Args:
            text: Requirement text such as ``"^1.0"`` or ``"*"``.

        Returns:
            Parsed requirement. Text without an operator is a caret
            requirement.

        Raises:
            InvalidRequirementError: Empty text, unknown prefix, or
                non-numeric version components.

        Examples:
            >>> VersionRequirement.parse("~1").matches(Version(1, 4, 0))
            True
        """
        if not isinstance(text, str):
            raise InvalidRequirementError(repr(text))

        stripped = text.strip()
        if stripped == "*":
            return cls(RequirementKind.WILDCARD)

        kind = RequirementKind.CARET
        body = stripped
        for prefix, prefix_kind in _PREFIXES:
            if stripped.startswith(prefix):
                kind = prefix_kind
                body = stripped[len(prefix) :].strip()
                break

        match = _PARTIAL_VERSION.match(body)
        if not match:
            raise InvalidRequirementError(text)

        major, minor, patch = match.groups()
        precision = 3 if patch is not None else 2 if minor is not None else 1
        version = Version(int(major), int(minor or 0), int(patch or 0))
        return cls(kind, version, precision)

    @classmethod
    def exact(cls, version: Version) -> "VersionRequirement":
        """Return a requirement matching exactly ``version``."""
        return cls(RequirementKind.EXACT, version)

    @classmethod
    def wildcard(cls) -> "VersionRequirement":
        """Return the wildcard requirement."""
        return cls(RequirementKind.WILDCARD)

    def upper_bound(self) -> Optional[Version]:
        """Return the exclusive upper bound, or ``None`` when unbounded.

        A full exact requirement has no range; it returns ``None`` as well
        and is matched by equality.
        """
        bound = self.version
        if bound is None or self.kind is RequirementKind.GREATER_EQ:
            return None

        if self.kind is RequirementKind.CARET:
            if self.precision == 3:
                return bound.next_breaking()
            if self.precision == 1 or bound.major > 0:
                return Version(bound.major + 1, 0, 0)
            return bound.next_minor()

        if self.kind is RequirementKind.EXACT and self.precision == 3:
            return None

        # Tilde, and exact with missing components.
        if self.precision == 1:
            return Version(bound.major + 1, 0, 0)
        return bound.next_minor()

    def matches(self, version: Version) -> bool:
        """
        Return True if ``version`` satisfies this requirement.

        Args:
            version: Candidate version.

        Returns:
            Whether the candidate is accepted.
        """
        if self.kind is RequirementKind.WILDCARD:
            return True

        bound = self.version
        if self.kind is RequirementKind.EXACT and self.precision == 3:
            return version == bound
        if version < bound:
            return False

        upper = self.upper_bound()
        return upper is None or version < upper

    def __str__(self) -> str:
        """Return the canonical requirement text.

        Only the components that were written are printed, so the text
        parses back to an equal requirement.
        """
        if self.kind is RequirementKind.WILDCARD:
            return "*"
        written = ".".join(str(part) for part in self.version.as_tuple()[: self.precision])
        return f"{self.kind.value}{written}"


def matches(requirement: VersionRequirement, version: Version) -> bool:
    """Return True if ``version`` satisfies ``requirement``."""
    return requirement.matches(version)
