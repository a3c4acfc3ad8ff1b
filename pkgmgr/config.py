"""Configuration file loader for pkgmgr.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``pkgmgr.toml``: settings under ``[pkgmgr]`` table
- ``pyproject.toml``: settings under ``[tool.pkgmgr]`` table

Discovery order:

1. Explicit path from ``--config`` or ``PKGMGR_CONFIG``
2. ``pkgmgr.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.pkgmgr]`` section

Example (``pkgmgr.toml``)::

    [pkgmgr]
    manifest = "Package.toml"
    lockfile = "Package.lock"
    registry = "registry-data"
    install_dir = "pkg_modules"
"""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import tomli as tomllib

from pkgmgr.exceptions import ConfigError
from pkgmgr.utils.logger import get_logger
from pkgmgr.constants import (
    DEFAULT_INSTALL_DIR,
    DEFAULT_LOCKFILE,
    DEFAULT_MANIFEST_FILE,
    DEFAULT_REGISTRY_DIR,
)

logger = get_logger("config")

_PATH_OPTIONS = ("manifest", "lockfile", "registry", "install_dir")


@dataclass
class PkgMgrConfig:
    """Parsed and validated pkgmgr configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        manifest: Manifest read by ``install`` and written by ``init``.
        lockfile: Lockfile written by ``install`` and read by ``tree``.
        registry: Directory of registry records.
        install_dir: Directory packages are installed into.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    manifest: Path = Path(DEFAULT_MANIFEST_FILE)
    lockfile: Path = Path(DEFAULT_LOCKFILE)
    registry: Path = Path(DEFAULT_REGISTRY_DIR)
    install_dir: Path = Path(DEFAULT_INSTALL_DIR)

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {name: str(getattr(self, name)) for name in _PATH_OPTIONS}


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    pkgmgr_toml = cwd / "pkgmgr.toml"
    if pkgmgr_toml.is_file():
        logger.debug("Found pkgmgr.toml: %s", pkgmgr_toml)
        return pkgmgr_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_pkgmgr_section(pyproject_toml):
        logger.debug("Found [tool.pkgmgr] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_pkgmgr_section(path: Path) -> bool:
    """Return True if ``path`` parses and contains ``[tool.pkgmgr]``.

    An unreadable or invalid ``pyproject.toml`` simply does not count as a
    pkgmgr config file.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring %s: %s", path, exc)
        return False
    return "pkgmgr" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> PkgMgrConfig:
    """Load and validate pkgmgr configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`PkgMgrConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return PkgMgrConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("pkgmgr", {})
    else:
        section = raw.get("pkgmgr", {})

    if not section:
        logger.debug("Config file found but no pkgmgr section, using defaults")
        return PkgMgrConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> PkgMgrConfig:
    """Validate a ``[pkgmgr]`` / ``[tool.pkgmgr]`` table.

    Raises:
        ConfigError: Unknown keys, or a value that is not a non-empty string.
    """
    unknown = set(section) - set(_PATH_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = PkgMgrConfig()
    for option in _PATH_OPTIONS:
        if option not in section:
            continue
        value = section[option]
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(
                f"{option} must be a non-empty string, got {type(value).__name__}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, Path(value))

    return config
