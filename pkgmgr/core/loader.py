"""Manifest and registry loading for pkgmgr.

Manifests (``Package.toml``) and registry records share one TOML shape::

    [package]
    name = "tokio"
    version = "1.35.1"
    authors = ["Tokio Contributors"]
    description = "An event-driven, non-blocking I/O platform"

    [dependencies]
    bytes = "^1.0"

A registry is a directory holding one such file per ``(name, version)``
pair. Loading turns these files into :class:`~pkgmgr.models.ManifestRecord`
objects; the resolver itself never touches the filesystem.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import tomli as tomllib
import tomli_w

from pkgmgr.core.registry import RegistryIndex
from pkgmgr.utils.logger import get_logger
from pkgmgr.utils.filesystem import safe_read_file, safe_write_file
from pkgmgr.constants import PACKAGE_NAME_PATTERN
from pkgmgr.models import ManifestRecord, Version, VersionRequirement
from pkgmgr.exceptions import (
    FileOperationError,
    InvalidRequirementError,
    InvalidVersionError,
    ManifestError,
)

logger = get_logger("loader")

PathLike = Union[str, Path]

_NAME_RE = re.compile(PACKAGE_NAME_PATTERN)

# Public API
__all__ = [
    "load_manifest",
    "load_registry",
    "manifest_from_mapping",
    "write_manifest",
]


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        FileOperationError: The file cannot be read.
        ManifestError: The file is not valid TOML.
    """
    text = safe_read_file(path)
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(
            f"Invalid TOML in {path.name}: {exc}",
            file_path=str(path),
        ) from exc


def manifest_from_mapping(
    data: Mapping[str, Any],
    *,
    source: Optional[str] = None,
) -> ManifestRecord:
    """Build a :class:`ManifestRecord` from decoded TOML.

    Args:
        data: Top-level TOML mapping with ``package`` and optional
            ``dependencies`` tables.
        source: File the data came from, for error messages.

    Returns:
        The parsed record.

    Raises:
        ManifestError: Missing or mistyped fields, or an invalid version.
        InvalidRequirementError: A dependency requirement cannot be parsed.
    """
    package = data.get("package")
    if not isinstance(package, dict):
        raise ManifestError(
            "Missing [package] table", file_path=source, field_name="package"
        )

    name = package.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ManifestError(
            "Package name must be a non-empty string",
            file_path=source,
            field_name="package.name",
        )
    if not _NAME_RE.fullmatch(name):
        raise ManifestError(
            f"Invalid package name: {name!r}",
            file_path=source,
            field_name="package.name",
        )

    raw_version = package.get("version")
    if not isinstance(raw_version, str):
        raise ManifestError(
            f"Package {name} has no version string",
            file_path=source,
            field_name="package.version",
        )
    try:
        version = Version.parse(raw_version)
    except InvalidVersionError as exc:
        raise ManifestError(
            f"Package {name} has an invalid version: {raw_version!r}",
            file_path=source,
            field_name="package.version",
        ) from exc

    authors = package.get("authors", [])
    if not isinstance(authors, list) or not all(isinstance(a, str) for a in authors):
        raise ManifestError(
            "authors must be a list of strings",
            file_path=source,
            field_name="package.authors",
        )

    description = package.get("description")
    if description is not None and not isinstance(description, str):
        raise ManifestError(
            "description must be a string",
            file_path=source,
            field_name="package.description",
        )

    raw_dependencies = data.get("dependencies", {})
    if not isinstance(raw_dependencies, dict):
        raise ManifestError(
            "[dependencies] must be a table",
            file_path=source,
            field_name="dependencies",
        )

    dependencies: Dict[str, VersionRequirement] = {}
    for dep_name, requirement_text in raw_dependencies.items():
        if not _NAME_RE.fullmatch(dep_name):
            raise ManifestError(
                f"Invalid dependency name: {dep_name!r}",
                file_path=source,
                field_name=f"dependencies.{dep_name}",
            )
        if not isinstance(requirement_text, str):
            raise ManifestError(
                f"Requirement for {dep_name} must be a string",
                file_path=source,
                field_name=f"dependencies.{dep_name}",
            )
        try:
            dependencies[dep_name] = VersionRequirement.parse(requirement_text)
        except InvalidRequirementError as exc:
            raise InvalidRequirementError(
                requirement_text, package_name=dep_name
            ) from exc

    return ManifestRecord(
        name=name.strip(),
        version=version,
        authors=tuple(authors),
        description=description,
        dependencies=dependencies,
    )


def load_manifest(path: PathLike) -> ManifestRecord:
    """Load a ``Package.toml`` manifest.

    Raises:
        FileOperationError: The file is missing or unreadable.
        ManifestError: The manifest is malformed.
        InvalidRequirementError: A requirement cannot be parsed.
    """
    manifest_path = Path(path)
    record = manifest_from_mapping(_read_toml(manifest_path), source=str(manifest_path))
    logger.debug(
        "Loaded manifest %s with %d dependenc(ies)", record, len(record.dependencies)
    )
    return record


def load_registry(directory: PathLike) -> RegistryIndex:
    """Load every ``*.toml`` record in ``directory`` into a registry index.

    Files are read in sorted filename order. A missing directory yields an
    empty registry.

    Raises:
        FileOperationError: ``directory`` exists but is not a directory.
        ManifestError: A record is malformed.
        InvalidRequirementError: A record declares an unparseable requirement.
    """
    root = Path(directory)
    if not root.exists():
        logger.debug("Registry directory %s does not exist; using empty registry", root)
        return RegistryIndex()
    if not root.is_dir():
        raise FileOperationError(
            f"Registry path is not a directory: {root}",
            file_path=str(root),
            operation="read",
        )

    records: List[ManifestRecord] = []
    for path in sorted(root.glob("*.toml")):
        if path.is_file():
            records.append(manifest_from_mapping(_read_toml(path), source=str(path)))

    logger.debug("Loaded %d registry record(s) from %s", len(records), root)
    return RegistryIndex(records)


def write_manifest(record: ManifestRecord, path: PathLike) -> Path:
    """Write ``record`` as a ``Package.toml`` manifest."""
    return safe_write_file(path, tomli_w.dumps(record.to_dict()))
