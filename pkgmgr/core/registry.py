"""In-memory registry index for pkgmgr.

A :class:`RegistryIndex` is an immutable snapshot of every package record
the resolver may choose from. It is built once from already-parsed
:class:`~pkgmgr.models.ManifestRecord` objects (see
:mod:`pkgmgr.core.loader` for reading them from disk) and passed
explicitly into :func:`~pkgmgr.core.resolver.resolve`, so each resolution
sees one consistent view of the registry.

Typical usage::

    from pkgmgr.core.registry import RegistryIndex
    from pkgmgr.models import VersionRequirement

    registry = RegistryIndex(records)
    record = registry.lookup("serde", VersionRequirement.parse("^1.0"))
    print(record.version)  # highest 1.x.y in the registry
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from pkgmgr.models import ManifestRecord, Version, VersionRequirement
from pkgmgr.utils.logger import get_logger
from pkgmgr.exceptions import PackageNotFoundError

logger = get_logger("registry")

# Public API
__all__ = ["RegistryIndex"]


class RegistryIndex:
    """Lookup of package records by name.

    Records are keyed uniquely by ``(name, version)``; when the same pair
    appears twice the later record wins and a warning is logged. Versions
    for each name are kept sorted newest first.

    Args:
        records: Package records in any order.

    Example::

        >>> index = RegistryIndex([serde_1_0_195, tokio_1_35_1])
        >>> "serde" in index
        True
        >>> [str(v) for v in index.versions("serde")]
        ['1.0.195']
    """

    def __init__(self, records: Iterable[ManifestRecord] = ()) -> None:
        by_name: Dict[str, Dict[Version, ManifestRecord]] = {}

        for record in records:
            versions = by_name.setdefault(record.name, {})
            if record.version in versions:
                logger.warning(
                    "Duplicate registry record %s@%s; keeping the later one",
                    record.name,
                    record.version,
                )
            versions[record.version] = record

        self._packages: Dict[str, List[ManifestRecord]] = {
            name: sorted(versions.values(), key=lambda r: r.version, reverse=True)
            for name, versions in by_name.items()
        }
        logger.debug(
            "Registry index built: %d package(s), %d record(s)",
            len(self._packages),
            sum(len(v) for v in self._packages.values()),
        )

    # ------------------------------------------------------------------
    # Resolution queries
    # ------------------------------------------------------------------

    def lookup(self, name: str, requirement: VersionRequirement) -> ManifestRecord:
        """Return the newest record for ``name`` satisfying ``requirement``.

        Args:
            name: Package name.
            requirement: Version predicate.

        Returns:
            The matching record with the highest version.

        Raises:
            PackageNotFoundError: No record for ``name``, or none matches.
        """
        candidates = self._packages.get(name)
        if not candidates:
            raise PackageNotFoundError(name, requirement)

        # Newest first, so the first match is the maximum.
        for record in candidates:
            if requirement.matches(record.version):
                return record

        raise PackageNotFoundError(name, requirement)

    def versions(self, name: str) -> List[Version]:
        """Return every known version of ``name``, newest first."""
        return [record.version for record in self._packages.get(name, [])]

    # ------------------------------------------------------------------
    # Browsing (``pkgmgr registry ...``)
    # ------------------------------------------------------------------

    def latest(self, name: str) -> Optional[ManifestRecord]:
        """Return the newest record for ``name``, or ``None``."""
        records = self._packages.get(name)
        return records[0] if records else None

    def info(self, name: str) -> ManifestRecord:
        """Return the newest record for ``name``.

        Raises:
            PackageNotFoundError: ``name`` is not in the registry.
        """
        record = self.latest(name)
        if record is None:
            raise PackageNotFoundError(name)
        return record

    def list_packages(self) -> Dict[str, List[str]]:
        """Return ``name -> version strings`` (newest first), sorted by name."""
        return {
            name: [str(record.version) for record in self._packages[name]]
            for name in sorted(self._packages)
        }

    def search(self, query: str) -> List[ManifestRecord]:
        """Find packages whose name or latest description contains ``query``.

        Matching is case-insensitive. Only the newest record of each
        matching package is returned, sorted by name.
        """
        needle = query.lower()
        results: List[ManifestRecord] = []

        for name in sorted(self._packages):
            latest = self._packages[name][0]
            description = (latest.description or "").lower()
            if needle in name.lower() or needle in description:
                results.append(latest)

        return results

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __len__(self) -> int:
        return len(self._packages)

    def __iter__(self) -> Iterator[ManifestRecord]:
        for name in sorted(self._packages):
            yield from self._packages[name]

    def __repr__(self) -> str:
        return f"RegistryIndex(packages={len(self._packages)})"
