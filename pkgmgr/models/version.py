"""
Version data model for pkgmgr.

Versions are plain ``MAJOR.MINOR.PATCH`` triples of non-negative integers.
Ordering is lexicographic over the triple, so two versions are equal
whenever their components are equal, regardless of how they were written.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from pkgmgr.exceptions import InvalidVersionError

_VERSION_PATTERN = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)$")


@dataclass(frozen=True, order=True)
class Version:
    """
    A semantic version triple.

    Attributes:
        major: Incremented for incompatible changes.
        minor: Incremented for backwards-compatible features.
        patch: Incremented for backwards-compatible fixes.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for component in (self.major, self.minor, self.patch):
            if isinstance(component, bool) or not isinstance(component, int):
                raise InvalidVersionError(str(component))
            if component < 0:
                raise InvalidVersionError(str(component))

    @classmethod
    def parse(cls, text: str) -> "Version":
        """
        Parse a ``MAJOR.MINOR.PATCH`` string.

        Args:
            text: Version text; surrounding whitespace is ignored.

        Returns:
            Parsed version.

        Raises:
            InvalidVersionError: If the text is not a numeric triple.

        Examples:
            >>> Version.parse("1.35.1")
            Version(major=1, minor=35, patch=1)
        """
        if not isinstance(text, str):
            raise InvalidVersionError(repr(text))

        match = _VERSION_PATTERN.match(text.strip())
        if not match:
            raise InvalidVersionError(text)

        major, minor, patch = match.groups()
        return cls(int(major), int(minor), int(patch))

    def as_tuple(self) -> Tuple[int, int, int]:
        """Return the ``(major, minor, patch)`` triple."""
        return (self.major, self.minor, self.patch)

    def next_breaking(self) -> "Version":
        """
        Return the first version considered incompatible with this one.

        The leftmost nonzero component is incremented and every component
        to its right is zeroed. An all-zero version bumps the patch.
        """
        if self.major > 0:
            return Version(self.major + 1, 0, 0)
        if self.minor > 0:
            return Version(0, self.minor + 1, 0)
        return Version(0, 0, self.patch + 1)

    def next_minor(self) -> "Version":
        """Return ``major.(minor + 1).0``."""
        return Version(self.major, self.minor + 1, 0)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
