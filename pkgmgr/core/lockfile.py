"""Lockfile codec for pkgmgr.

The lockfile (``Package.lock``) is a TOML document::

    # This file is generated by pkgmgr. Do not edit.
    version = "1"

    [[package]]
    name = "serde"
    version = "1.0.195"
    dependencies = []
    checksum = "9f2c..."

Packages are written sorted by ``(name, version)`` so the bytes depend
only on *what* was resolved, never on the order the resolver happened to
discover it. Each checksum is the SHA-256 of the canonical JSON form of
the registry record the package came from, which lets a later install
detect registry drift without re-running resolution.

Typical usage::

    text = encode(result)
    assert decode(text) == result
"""

from __future__ import annotations

import re
import hashlib
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, List, Union

import tomli as tomllib
import tomli_w

from pkgmgr.models import (
    ManifestRecord,
    ResolutionResult,
    ResolvedPackage,
    Version,
    VersionRequirement,
)
from pkgmgr.core.registry import RegistryIndex
from pkgmgr.utils.logger import get_logger
from pkgmgr.utils.filesystem import safe_read_file, safe_write_file
from pkgmgr.constants import (
    CHECKSUM_HEX_LENGTH,
    LOCKFILE_SCHEMA_VERSION,
    PACKAGE_NAME_PATTERN,
)
from pkgmgr.exceptions import (
    CorruptLockfileError,
    InvalidVersionError,
    PackageNotFoundError,
)

logger = get_logger("lockfile")

# Public API
__all__ = [
    "LockDrift",
    "checksum",
    "decode",
    "encode",
    "find_drift",
    "read_lockfile",
    "unmet_requirements",
    "unused_packages",
    "verify_lockfile",
    "write_lockfile",
]

_HEADER = "# This file is generated by pkgmgr. Do not edit.\n"
_CHECKSUM_PATTERN = re.compile(rf"[0-9a-f]{{{CHECKSUM_HEX_LENGTH}}}")
_NAME_PATTERN = re.compile(PACKAGE_NAME_PATTERN)


# ---------------------------------------------------------------------------
# Checksums
# ---------------------------------------------------------------------------


def checksum(record: ManifestRecord) -> str:
    """Return the hex SHA-256 of ``record``'s canonical serialization."""
    return hashlib.sha256(record.canonical_json().encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode(result: ResolutionResult) -> str:
    """Serialize ``result`` to canonical lockfile text.

    Args:
        result: Resolution to persist.

    Returns:
        TOML text; identical results always produce identical bytes.
    """
    document: Dict[str, Any] = {
        "version": LOCKFILE_SCHEMA_VERSION,
        "package": [
            {
                "name": package.name,
                "version": str(package.version),
                "dependencies": list(package.dependencies),
                "checksum": package.checksum,
            }
            for package in result.sorted_packages()
        ],
    }
    return _HEADER + tomli_w.dumps(document)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode(text: str) -> ResolutionResult:
    """Parse and validate lockfile text.

    Args:
        text: Lockfile contents.

    Returns:
        The locked resolution, in file order.

    Raises:
        CorruptLockfileError: Invalid TOML, wrong or missing schema
            version, missing or mistyped fields, duplicate packages, or a
            dependency that is not itself locked.
    """
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise CorruptLockfileError(f"invalid TOML: {exc}") from exc

    if "version" not in document:
        raise CorruptLockfileError("missing schema version")
    if document["version"] != LOCKFILE_SCHEMA_VERSION:
        raise CorruptLockfileError(
            f"unsupported schema version {document['version']!r} "
            f"(expected {LOCKFILE_SCHEMA_VERSION!r})"
        )

    entries = document.get("package", [])
    if not isinstance(entries, list):
        raise CorruptLockfileError("'package' must be an array of tables")

    packages: List[ResolvedPackage] = []
    seen = set()
    for position, entry in enumerate(entries, start=1):
        package = _decode_package(entry, position)
        if package.name in seen:
            raise CorruptLockfileError(f"package {package.name!r} is locked twice")
        seen.add(package.name)
        packages.append(package)

    for package in packages:
        for dependency in package.dependencies:
            if dependency not in seen:
                raise CorruptLockfileError(
                    f"dependency {dependency!r} of {package.name!r} is not locked"
                )

    return ResolutionResult(tuple(packages))


def _decode_package(entry: Any, position: int) -> ResolvedPackage:
    """Validate one ``[[package]]`` table."""
    if not isinstance(entry, dict):
        raise CorruptLockfileError(f"package #{position} is not a table")

    for field_name in ("name", "version", "dependencies", "checksum"):
        if field_name not in entry:
            raise CorruptLockfileError(
                f"package #{position} is missing field {field_name!r}"
            )

    name = entry["name"]
    if not isinstance(name, str) or not _NAME_PATTERN.fullmatch(name):
        raise CorruptLockfileError(f"package #{position} has an invalid name")

    raw_version = entry["version"]
    if not isinstance(raw_version, str):
        raise CorruptLockfileError(f"package {name!r} has a non-string version")
    try:
        version = Version.parse(raw_version)
    except InvalidVersionError as exc:
        raise CorruptLockfileError(
            f"package {name!r} has an invalid version {raw_version!r}"
        ) from exc

    dependencies = entry["dependencies"]
    if not isinstance(dependencies, list) or not all(
        isinstance(dep, str) for dep in dependencies
    ):
        raise CorruptLockfileError(
            f"package {name!r} dependencies must be a list of names"
        )

    digest = entry["checksum"]
    if not isinstance(digest, str) or not _CHECKSUM_PATTERN.fullmatch(digest):
        raise CorruptLockfileError(f"package {name!r} has an invalid checksum")

    return ResolvedPackage(
        name=name,
        version=version,
        dependencies=tuple(dependencies),
        checksum=digest,
    )


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def read_lockfile(path: Union[str, Path]) -> ResolutionResult:
    """Read and decode the lockfile at ``path``.

    Raises:
        FileOperationError: The file cannot be read.
        CorruptLockfileError: The contents are invalid.
    """
    text = safe_read_file(path)
    try:
        return decode(text)
    except CorruptLockfileError as exc:
        exc.file_path = str(path)
        exc.details["file"] = str(path)
        raise


def write_lockfile(result: ResolutionResult, path: Union[str, Path]) -> Path:
    """Encode ``result`` and atomically write it to ``path``."""
    written = safe_write_file(path, encode(result))
    logger.info("Wrote lockfile with %d package(s) to %s", len(result), written)
    return written


# ---------------------------------------------------------------------------
# Validation against a fresh resolution, a manifest, or the registry
# ---------------------------------------------------------------------------


def verify_lockfile(result: ResolutionResult, locked: ResolutionResult) -> bool:
    """Return True if ``locked`` pins exactly the packages in ``result``."""
    if len(result) != len(locked):
        return False

    for package in result:
        locked_package = locked.get(package.name)
        if locked_package is None or locked_package.version != package.version:
            return False

    return True


def unmet_requirements(locked: ResolutionResult, manifest: ManifestRecord) -> List[str]:
    """Return manifest dependencies that ``locked`` does not satisfy.

    A dependency is unmet when it is not locked at all, or when the locked
    version does not match the manifest's current requirement.
    """
    unmet: List[str] = []
    for name in manifest.dependency_names():
        package = locked.get(name)
        if package is None or not manifest.dependencies[name].matches(package.version):
            unmet.append(name)
    return unmet


def unused_packages(locked: ResolutionResult, manifest: ManifestRecord) -> List[str]:
    """Return locked packages not reachable from ``manifest``'s dependencies."""
    reachable = set()
    pending = [name for name in manifest.dependency_names() if name in locked]
    while pending:
        name = pending.pop()
        if name in reachable:
            continue
        reachable.add(name)
        pending.extend(locked.get(name).dependencies)

    return sorted(name for name in locked.names() if name not in reachable)


@dataclass(frozen=True)
class LockDrift:
    """A locked package whose registry record no longer matches.

    Attributes:
        name: Package name.
        version: Locked version.
        reason: ``"missing"`` or ``"checksum"``.
    """

    name: str
    version: Version
    reason: str

    def to_display_string(self) -> str:
        """Return a human-readable description of the drift."""
        if self.reason == "missing":
            return f"{self.name}@{self.version} is no longer in the registry"
        return f"{self.name}@{self.version} changed in the registry (checksum mismatch)"


def find_drift(locked: ResolutionResult, registry: RegistryIndex) -> List[LockDrift]:
    """Compare locked checksums against the current registry records.

    Returns:
        One :class:`LockDrift` per package whose record disappeared or whose
        checksum changed, sorted by name.
    """
    drift: List[LockDrift] = []

    for package in locked.sorted_packages():
        try:
            record = registry.lookup(
                package.name, VersionRequirement.exact(package.version)
            )
        except PackageNotFoundError:
            drift.append(LockDrift(package.name, package.version, "missing"))
            continue

        if checksum(record) != package.checksum:
            drift.append(LockDrift(package.name, package.version, "checksum"))

    if drift:
        logger.debug("Lockfile drift: %s", [d.to_display_string() for d in drift])
    return drift
