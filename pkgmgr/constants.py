"""
Centralized constants for pkgmgr.

This module defines immutable configuration values used across pkgmgr,
including default file locations, lockfile schema details, and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Default file locations
# ---------------------------------------------------------------------------

#: Manifest file read by ``install`` and written by ``init``.
DEFAULT_MANIFEST_FILE: Final[str] = "Package.toml"

#: Lockfile written next to the manifest.
DEFAULT_LOCKFILE: Final[str] = "Package.lock"

#: Directory holding one TOML record per (name, version) pair.
DEFAULT_REGISTRY_DIR: Final[str] = "registry-data"

#: Directory that resolved packages are installed into.
DEFAULT_INSTALL_DIR: Final[str] = "pkg_modules"

#: Version assigned to manifests created by ``init``.
DEFAULT_INIT_VERSION: Final[str] = "0.1.0"

#: Author placeholder written by ``init``.
DEFAULT_INIT_AUTHOR: Final[str] = "Your Name <you@example.com>"

# ---------------------------------------------------------------------------
# Lockfile format
# ---------------------------------------------------------------------------

#: Schema version tag written to, and required in, every lockfile.
LOCKFILE_SCHEMA_VERSION: Final[str] = "1"

#: Length of a hex-encoded SHA-256 digest.
CHECKSUM_HEX_LENGTH: Final[int] = 64

# ---------------------------------------------------------------------------
# Tree rendering
# ---------------------------------------------------------------------------

#: Prefix of every rendered tree line.
TREE_BRANCH: Final[str] = "├─ "

#: Indentation added per tree depth level.
TREE_INDENT: Final[str] = "  "

#: Suffix marking a node that was already expanded earlier in the tree.
TREE_SEEN_MARKER: Final[str] = " (*)"

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading manifests or lockfiles.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

#: Valid package names. Names become directory names under the install dir,
#: so path separators and names made only of dots are excluded.
PACKAGE_NAME_PATTERN: Final[str] = r"[A-Za-z0-9][A-Za-z0-9._-]*"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
