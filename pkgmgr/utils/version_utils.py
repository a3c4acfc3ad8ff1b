"""
Version change helpers for pkgmgr.

Used by ``pkgmgr update`` to describe how each package moved between the
previous lockfile and the fresh resolution.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from packaging.version import InvalidVersion, Version, parse


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Classify the change from ``current_version`` to ``target_version``.

    Args:
        current_version: Previously locked version, or ``None`` if the
            package was not locked before.
        target_version: Newly resolved version, or ``None`` if the package
            dropped out of the resolution.

    Returns:
        One of ``"new"``, ``"removed"``, ``"same"``, ``"downgrade"``,
        ``"major"``, ``"minor"``, ``"patch"`` or ``"unknown"``.

    Examples:
        >>> get_update_type("1.0.0", "2.0.0")
        'major'
        >>> get_update_type(None, "1.0.0")
        'new'
    """
    if current_version is None and target_version is None:
        return "unknown"
    if current_version is None:
        return "new"
    if target_version is None:
        return "removed"

    try:
        current = _release(current_version)
        target = _release(target_version)
    except InvalidVersion:
        return "unknown"

    if target == current:
        return "same"
    if target < current:
        return "downgrade"
    if target[0] != current[0]:
        return "major"
    if target[1] != current[1]:
        return "minor"
    return "patch"


def _release(value: str) -> Tuple[int, int, int]:
    """Parse ``value`` and pad its release segment to three components."""
    parsed = parse(value)
    if not isinstance(parsed, Version):
        raise InvalidVersion(value)
    release = tuple(parsed.release) + (0, 0, 0)
    return release[0], release[1], release[2]


def diff_versions(
    before: Dict[str, str],
    after: Dict[str, str],
) -> List[Tuple[str, Optional[str], Optional[str], str]]:
    """Compare two ``name -> version`` maps.

    Returns:
        ``(name, old, new, update_type)`` rows for every name whose version
        changed, appeared or disappeared, sorted by name.
    """
    rows: List[Tuple[str, Optional[str], Optional[str], str]] = []
    for name in sorted(set(before) | set(after)):
        old = before.get(name)
        new = after.get(name)
        update_type = get_update_type(old, new)
        if update_type != "same":
            rows.append((name, old, new, update_type))
    return rows
