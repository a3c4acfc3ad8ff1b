from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from pkgmgr.exceptions import FileOperationError
from pkgmgr.utils.filesystem import (
    _atomic_write,
    _validated_file,
    remove_file,
    reset_directory,
    safe_read_file,
    safe_write_file,
    validate_path,
)


@pytest.fixture
def temp_file(tmp_path: Path) -> Path:
    """Create a temporary file with sample content."""
    path = tmp_path / "Package.lock"
    path.write_text('version = "1"\n', encoding="utf-8")
    return path


@pytest.mark.unit
class TestValidatedFile:
    """Tests for _validated_file."""

    def test_existing_file(self, temp_file: Path) -> None:
        assert _validated_file(temp_file) == temp_file.resolve()

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="File not found") as exc_info:
            _validated_file(tmp_path / "absent")
        assert exc_info.value.operation == "read"

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="Not a file"):
            _validated_file(tmp_path)


@pytest.mark.unit
class TestSafeReadFile:
    """Tests for safe_read_file."""

    def test_reads_text(self, temp_file: Path) -> None:
        assert safe_read_file(temp_file) == 'version = "1"\n'

    def test_accepts_str_path(self, temp_file: Path) -> None:
        assert safe_read_file(str(temp_file)).startswith("version")

    def test_size_limit(self, temp_file: Path) -> None:
        with pytest.raises(FileOperationError, match="File too large"):
            safe_read_file(temp_file, max_size=3)

    def test_no_size_limit(self, temp_file: Path) -> None:
        assert safe_read_file(temp_file, max_size=None)

    def test_decode_error(self, tmp_path: Path) -> None:
        path = tmp_path / "binary"
        path.write_bytes(b"\xff\xfe\x00\x81")
        with pytest.raises(FileOperationError, match="Failed to read file") as exc_info:
            safe_read_file(path)
        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)


@pytest.mark.unit
class TestSafeWriteFile:
    """Tests for safe_write_file and _atomic_write."""

    def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "dir" / "Package.lock"
        assert safe_write_file(target, "content") == target
        assert target.read_text(encoding="utf-8") == "content"

    def test_overwrites(self, temp_file: Path) -> None:
        safe_write_file(temp_file, "new")
        assert temp_file.read_text(encoding="utf-8") == "new"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        safe_write_file(tmp_path / "out.toml", "x")
        assert [p.name for p in tmp_path.iterdir()] == ["out.toml"]

    def test_unix_newlines(self, tmp_path: Path) -> None:
        target = tmp_path / "out.toml"
        safe_write_file(target, "a\nb\n")
        assert target.read_bytes() == b"a\nb\n"

    def test_failure_keeps_original_and_cleans_up(self, temp_file: Path) -> None:
        """Test a failed replace leaves the old file and no temp file."""
        original = temp_file.read_text(encoding="utf-8")
        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with pytest.raises(FileOperationError, match="Atomic write failed") as exc_info:
                _atomic_write(temp_file, "new content")

        assert exc_info.value.operation == "write"
        assert temp_file.read_text(encoding="utf-8") == original
        assert sorted(p.name for p in temp_file.parent.iterdir()) == [temp_file.name]


@pytest.mark.unit
class TestRemoveFile:
    def test_removes_existing(self, temp_file: Path) -> None:
        assert remove_file(temp_file) is True
        assert not temp_file.exists()

    def test_missing_is_false(self, tmp_path: Path) -> None:
        assert remove_file(tmp_path / "absent") is False

    def test_failure(self, temp_file: Path) -> None:
        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            with pytest.raises(FileOperationError) as exc_info:
                remove_file(temp_file)
        assert exc_info.value.operation == "delete"


@pytest.mark.unit
class TestResetDirectory:
    def test_creates(self, tmp_path: Path) -> None:
        target = reset_directory(tmp_path / "pkg_modules" / "serde")
        assert target.is_dir()

    def test_clears_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "serde"
        (target / "sub").mkdir(parents=True)
        (target / "sub" / "file").write_text("x", encoding="utf-8")

        reset_directory(target)

        assert target.is_dir()
        assert list(target.iterdir()) == []

    def test_failure(self, tmp_path: Path) -> None:
        with patch("pkgmgr.utils.filesystem.shutil.rmtree", side_effect=OSError("busy")):
            (tmp_path / "busy").mkdir()
            with pytest.raises(FileOperationError, match="Failed to prepare directory"):
                reset_directory(tmp_path / "busy")


@pytest.mark.unit
class TestValidatePath:
    """Tests for validate_path."""

    def test_resolves(self, tmp_path: Path) -> None:
        assert validate_path(tmp_path / "a" / ".." / "b") == (tmp_path / "b").resolve()

    def test_inside_base(self, tmp_path: Path) -> None:
        assert validate_path(tmp_path / "serde", base_dir=tmp_path) == (
            tmp_path / "serde"
        ).resolve()

    def test_outside_base(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="outside allowed base"):
            validate_path(tmp_path / ".." / "escape", base_dir=tmp_path)

    def test_expands_user(self) -> None:
        assert validate_path("~") == Path(os.path.expanduser("~")).resolve()
