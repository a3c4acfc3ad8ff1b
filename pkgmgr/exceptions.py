"""
Custom exception hierarchy for pkgmgr.

This module defines structured exception types used across pkgmgr.
All exceptions inherit from :class:`PkgMgrError` and carry structured
metadata via the ``details`` attribute, so that the CLI can render
messages uniformly and callers can inspect the fields that caused a
failure instead of parsing free-form strings.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional, Sequence, Tuple


class PkgMgrError(Exception):
    """Base exception for all pkgmgr errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Version and requirement parsing
# ---------------------------------------------------------------------------


class InvalidVersionError(PkgMgrError):
    """Raised when a version string is not a ``MAJOR.MINOR.PATCH`` triple.

    Args:
        text: The offending version text.
    """

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid version: {_truncate(text)!r}")
        self.text = text


class InvalidRequirementError(PkgMgrError):
    """Raised when a version requirement expression cannot be parsed.

    Args:
        text: The offending requirement text.
        package_name: Dependency the requirement was declared for, if known.
    """

    __slots__ = ("text", "package_name")

    def __init__(self, text: str, *, package_name: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "package", package_name)
        super().__init__(f"Invalid version requirement: {_truncate(text)!r}", details)
        self.text = text
        self.package_name = package_name


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class PackageNotFoundError(PkgMgrError):
    """Raised when the registry has no record satisfying a request.

    Args:
        name: Requested package name.
        requirement: Requirement that could not be satisfied, or ``None``
            when any version would do.
    """

    __slots__ = ("name", "requirement")

    def __init__(self, name: str, requirement: Optional[Any] = None) -> None:
        if requirement is None:
            message = f"Package not found: {name}"
        else:
            message = f"No matching version found for {name} {requirement}"
        super().__init__(message)
        self.name = name
        self.requirement = requirement


class VersionConflictError(PkgMgrError):
    """Raised when a later request is incompatible with an earlier choice.

    The first version chosen for a name is binding; a later requirement
    that the chosen version does not satisfy aborts the resolution.

    Args:
        name: Package name in conflict.
        requirement: Requirement that was not satisfied.
        chosen: Version already chosen for ``name``.
        parents: Packages that requested ``name``, in discovery order.
    """

    __slots__ = ("name", "requirement", "chosen", "parents")

    def __init__(
        self,
        name: str,
        requirement: Any,
        chosen: Any,
        parents: Sequence[str] = (),
    ) -> None:
        self.parents: Tuple[str, ...] = tuple(parents)
        details: MutableMapping[str, Any] = {}
        if self.parents:
            details["requested_by"] = " -> ".join(self.parents)
        super().__init__(
            f"Version conflict for {name}: {requirement} does not match "
            f"already selected {chosen}",
            details,
        )
        self.name = name
        self.requirement = requirement
        self.chosen = chosen


class CircularDependencyError(PkgMgrError):
    """Raised when the resolved dependency graph contains a cycle.

    Args:
        path: Package names along the cycle; first and last are equal.
    """

    __slots__ = ("path",)

    def __init__(self, path: Sequence[str]) -> None:
        self.path: Tuple[str, ...] = tuple(path)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.path)}")


# ---------------------------------------------------------------------------
# Persistent inputs and outputs
# ---------------------------------------------------------------------------


class CorruptLockfileError(PkgMgrError):
    """Raised when a lockfile cannot be decoded or fails validation.

    Args:
        reason: What was wrong with the lockfile.
        file_path: Path of the lockfile, if read from disk.
    """

    __slots__ = ("reason", "file_path")

    def __init__(self, reason: str, *, file_path: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "file", file_path)
        super().__init__(f"Corrupt lockfile: {reason}", details)
        self.reason = reason
        self.file_path = file_path


class ManifestError(PkgMgrError):
    """Raised when a manifest or registry record is malformed.

    Args:
        message: Error description.
        file_path: Path to the file being parsed.
        field_name: Offending field, if known.
    """

    __slots__ = ("file_path", "field_name")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "field", field_name)
        _add_if(details, "file", file_path)

        super().__init__(message, details)

        self.file_path = file_path
        self.field_name = field_name


class ConfigError(PkgMgrError):
    """Raised when the pkgmgr configuration is invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Offending option name, if known.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class FileOperationError(PkgMgrError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/delete).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
