"""
Filesystem utilities for pkgmgr.

This module provides safe helpers for reading manifests and lockfiles,
writing them atomically, and preparing install directories. All
filesystem errors are normalized to ``FileOperationError``.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from pkgmgr.constants import MAX_FILE_SIZE
from pkgmgr.utils.logger import get_logger
from pkgmgr.exceptions import FileOperationError

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Resolve a path that must point to an existing regular file."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def _atomic_write(target: Path, content: str) -> None:
    """Write text to a temporary sibling file, then rename it over ``target``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="\n",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)

    except OSError as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file, refusing files larger than ``max_size`` bytes.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.

    Raises:
        FileOperationError: Missing file, oversized file, or read failure.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(file_path: PathLike, content: str) -> Path:
    """Atomically replace ``file_path`` with ``content``.

    Readers never observe a partially written file: either the previous
    contents or the new contents are on disk.

    Returns:
        The path written.
    """
    path = Path(file_path)
    _atomic_write(path, content)
    logger.debug("Wrote %d bytes to %s", len(content), path)
    return path


def remove_file(file_path: PathLike) -> bool:
    """Delete a file if it exists.

    Returns:
        ``True`` if a file was removed, ``False`` if there was none.
    """
    path = Path(file_path)
    if not path.exists():
        return False

    try:
        path.unlink()
    except OSError as exc:
        raise FileOperationError(
            f"Failed to delete file: {exc}",
            file_path=str(path),
            operation="delete",
            original_error=exc,
        ) from exc

    logger.debug("Removed %s", path)
    return True


def reset_directory(dir_path: PathLike) -> Path:
    """Remove ``dir_path`` if present and recreate it empty."""
    path = Path(dir_path)
    try:
        if path.exists():
            shutil.rmtree(path)
        path.mkdir(parents=True)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to prepare directory: {exc}",
            file_path=str(path),
            operation="mkdir",
            original_error=exc,
        ) from exc
    return path


def validate_path(
    path: PathLike,
    *,
    base_dir: Optional[PathLike] = None,
) -> Path:
    """Resolve a path and, if ``base_dir`` is given, require it to lie inside.

    Raises:
        FileOperationError: The resolved path escapes ``base_dir``.
    """
    resolved = Path(path).expanduser().resolve(strict=False)

    if base_dir:
        base = Path(base_dir).resolve(strict=False)
        try:
            resolved.relative_to(base)
        except ValueError:
            raise FileOperationError(
                f"Path outside allowed base directory: {resolved}",
                file_path=str(path),
                operation="validate",
            )

    return resolved
