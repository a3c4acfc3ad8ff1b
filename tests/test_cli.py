"""Integration tests for the pkgmgr command line.

Each test runs real commands through Click's ``CliRunner`` inside a
temporary project holding a manifest and a small on-disk registry.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
import tomli
from click.testing import CliRunner

from pkgmgr.cli import cli, main
from pkgmgr.core import read_lockfile
from pkgmgr.exceptions import PkgMgrError
from pkgmgr.models import Version


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def add_record(project: Path, write_toml, name: str, version: str, deps=None, description="") -> None:
    write_toml(
        project / "registry-data" / f"{name}-{version}.toml",
        {
            "package": {
                "name": name,
                "version": version,
                "authors": ["Registry"],
                "description": description,
            },
            "dependencies": deps or {},
        },
    )


@pytest.mark.integration
class TestInit:
    """Tests for ``pkgmgr init``."""

    def test_creates_manifest(self, runner: CliRunner, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["init", "my-package"])

        assert result.exit_code == 0, result.output
        assert "Created Package.toml for my-package" in result.output
        data = tomli.loads((tmp_path / "Package.toml").read_text(encoding="utf-8"))
        assert data["package"]["name"] == "my-package"
        assert data["package"]["version"] == "0.1.0"
        assert data["dependencies"] == {}

    def test_refuses_to_overwrite(self, runner: CliRunner, project_dir: Path) -> None:
        before = (project_dir / "Package.toml").read_text(encoding="utf-8")

        result = runner.invoke(cli, ["init", "other"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert (project_dir / "Package.toml").read_text(encoding="utf-8") == before


@pytest.mark.integration
class TestInstall:
    """Tests for ``pkgmgr install``."""

    def test_fresh_install(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 0, result.output
        assert "3 packages to install" in result.output
        assert "Installation complete!" in result.output

        locked = read_lockfile(project_dir / "Package.lock")
        assert {p.name: str(p.version) for p in locked} == {
            "serde": "1.0.195",
            "tokio": "1.35.1",
            "web": "2.1.0",
        }
        for name in ("serde", "tokio", "web"):
            assert (project_dir / "pkg_modules" / name / "VERSION").is_file()

    def test_reuses_valid_lockfile(self, runner: CliRunner, project_dir: Path, write_toml) -> None:
        """Test a newer registry version is ignored while the lockfile is valid."""
        runner.invoke(cli, ["install"])
        first = (project_dir / "Package.lock").read_bytes()
        add_record(project_dir, write_toml, "serde", "1.0.200")

        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 0, result.output
        assert "Using Package.lock" in result.output
        assert (project_dir / "Package.lock").read_bytes() == first

    def test_corrupt_lockfile_is_regenerated(self, runner: CliRunner, project_dir: Path) -> None:
        (project_dir / "Package.lock").write_text("not = = toml", encoding="utf-8")

        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 0, result.output
        assert "Corrupt lockfile" in result.output
        assert len(read_lockfile(project_dir / "Package.lock")) == 3

    def test_registry_drift_triggers_resolve(
        self, runner: CliRunner, project_dir: Path, write_toml
    ) -> None:
        runner.invoke(cli, ["install"])
        add_record(project_dir, write_toml, "tokio", "1.35.1", description="Edited")
        add_record(project_dir, write_toml, "tokio", "1.35.9")

        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 0, result.output
        assert "checksum mismatch" in result.output
        locked = read_lockfile(project_dir / "Package.lock")
        assert locked.get("tokio").version == Version(1, 35, 9)

    def test_manifest_change_triggers_resolve(
        self, runner: CliRunner, project_dir: Path, write_toml
    ) -> None:
        runner.invoke(cli, ["install"])
        write_toml(
            project_dir / "Package.toml",
            {"package": {"name": "app", "version": "0.1.0"}, "dependencies": {"tokio": "^1.36"}},
        )

        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 0, result.output
        assert "Using Package.lock" not in result.output
        locked = read_lockfile(project_dir / "Package.lock")
        assert locked.names() == ["tokio"]
        assert locked.get("tokio").version == Version(1, 36, 0)

    def test_conflict_leaves_lockfile_untouched(
        self, runner: CliRunner, project_dir: Path, write_toml
    ) -> None:
        write_toml(
            project_dir / "Package.toml",
            {
                "package": {"name": "app", "version": "0.1.0"},
                "dependencies": {"tokio": "~1.36", "web": "^2"},
            },
        )

        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 1
        assert "Version conflict for tokio" in result.output
        assert not (project_dir / "Package.lock").exists()

    def test_missing_package(self, runner: CliRunner, project_dir: Path, write_toml) -> None:
        write_toml(
            project_dir / "Package.toml",
            {"package": {"name": "app", "version": "0.1.0"}, "dependencies": {"nonexistent": "*"}},
        )

        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 1
        assert "nonexistent" in result.output

    def test_missing_manifest(self, runner: CliRunner, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["install"])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_dependency_name(
        self, runner: CliRunner, project_dir: Path, write_toml
    ) -> None:
        """Test a dependency named ``.`` is rejected before anything is installed."""
        assert runner.invoke(cli, ["install"]).exit_code == 0
        write_toml(
            project_dir / "Package.toml",
            {"package": {"name": "app", "version": "0.1.0"}, "dependencies": {".": "*"}},
        )

        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 1
        assert "Invalid dependency name" in result.output
        assert (project_dir / "pkg_modules" / "web" / "VERSION").is_file()

    def test_installation_mismatch_fails(self, runner: CliRunner, project_dir: Path) -> None:
        with patch("pkgmgr.commands.install.verify_installation", return_value=False):
            result = runner.invoke(cli, ["install"])

        assert result.exit_code == 1
        assert "Installed packages do not match the resolution" in result.output
        assert not (project_dir / "Package.lock").exists()

    def test_lockfile_mismatch_fails(self, runner: CliRunner, project_dir: Path) -> None:
        with patch("pkgmgr.commands.install.verify_lockfile", return_value=False):
            result = runner.invoke(cli, ["install"])

        assert result.exit_code == 1
        assert "written lockfile does not match the resolution" in result.output

    def test_custom_paths_from_config(
        self, runner: CliRunner, project_dir: Path
    ) -> None:
        (project_dir / "pkgmgr.toml").write_text(
            '[pkgmgr]\nlockfile = "locks/app.lock"\ninstall_dir = "vendor"\n',
            encoding="utf-8",
        )

        result = runner.invoke(cli, ["install"])

        assert result.exit_code == 0, result.output
        assert (project_dir / "locks" / "app.lock").is_file()
        assert (project_dir / "vendor" / "web" / "VERSION").is_file()
        assert not (project_dir / "Package.lock").exists()


@pytest.mark.integration
class TestUpdate:
    """Tests for ``pkgmgr update``."""

    def test_moves_to_newest(self, runner: CliRunner, project_dir: Path, write_toml) -> None:
        runner.invoke(cli, ["install"])
        add_record(project_dir, write_toml, "serde", "1.0.200")

        result = runner.invoke(cli, ["update"])

        assert result.exit_code == 0, result.output
        assert "Removed old lock file" in result.output
        assert "Version changes" in result.output
        assert "1.0.200" in result.output
        locked = read_lockfile(project_dir / "Package.lock")
        assert locked.get("serde").version == Version(1, 0, 200)

    def test_no_changes(self, runner: CliRunner, project_dir: Path) -> None:
        runner.invoke(cli, ["install"])
        result = runner.invoke(cli, ["update"])
        assert result.exit_code == 0, result.output
        assert "No version changes" in result.output

    def test_without_lockfile(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["update"])
        assert result.exit_code == 0, result.output
        assert "Removed old lock file" not in result.output
        assert (project_dir / "Package.lock").is_file()


@pytest.mark.integration
class TestTree:
    """Tests for ``pkgmgr tree``."""

    def test_renders_locked_tree(self, runner: CliRunner, project_dir: Path) -> None:
        runner.invoke(cli, ["install"])

        result = runner.invoke(cli, ["tree"])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "Dependency tree:" in lines
        assert "├─ web v2.1.0" in lines
        assert "  ├─ serde v1.0.195" in lines
        assert "  ├─ tokio v1.35.1" in lines
        assert "3 total packages" in result.output

    def test_empty_lockfile(self, runner: CliRunner, project_dir: Path, write_toml) -> None:
        write_toml(project_dir / "Package.toml", {"package": {"name": "app", "version": "0.1.0"}})
        runner.invoke(cli, ["install"])

        result = runner.invoke(cli, ["tree"])

        assert result.exit_code == 0, result.output
        assert "No dependencies" in result.output
        assert "0 total packages" in result.output

    def test_without_lockfile(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["tree"])
        assert result.exit_code == 1
        assert "[ERROR]" in result.output

    def test_corrupt_lockfile(self, runner: CliRunner, project_dir: Path) -> None:
        (project_dir / "Package.lock").write_text('version = "7"\n', encoding="utf-8")
        result = runner.invoke(cli, ["tree"])
        assert result.exit_code == 1
        assert "Corrupt lockfile" in result.output


@pytest.mark.integration
class TestRegistryCommands:
    """Tests for ``pkgmgr registry``."""

    def test_list(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["registry", "list"])
        assert result.exit_code == 0, result.output
        assert "serde" in result.output
        assert "3 packages available" in result.output

    def test_search(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["registry", "search", "async"])
        assert result.exit_code == 0, result.output
        assert "tokio" in result.output
        assert "serde" not in result.output

    def test_search_no_results(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["registry", "search", "zzz"])
        assert result.exit_code == 0
        assert "No packages match 'zzz'" in result.output

    def test_info(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["registry", "info", "web"])
        assert result.exit_code == 0, result.output
        assert "Name:        web" in result.output
        assert "Version:     2.1.0" in result.output
        assert "serde ^1.0" in result.output
        assert "tokio ~1.35" in result.output

    def test_info_unknown(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["registry", "info", "ghost"])
        assert result.exit_code == 1
        assert "Package not found: ghost" in result.output


@pytest.mark.integration
class TestGlobalOptions:
    """Tests for options handled by the ``cli`` group."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("pkgmgr ")

    def test_invalid_config(self, runner: CliRunner, project_dir: Path) -> None:
        (project_dir / "pkgmgr.toml").write_text('[pkgmgr]\nbogus = "x"\n', encoding="utf-8")
        result = runner.invoke(cli, ["registry", "list"])
        assert result.exit_code == 1
        assert "Unknown configuration keys" in result.output

    def test_explicit_config(self, runner: CliRunner, project_dir: Path) -> None:
        config = project_dir / "alt.toml"
        config.write_text('[pkgmgr]\nregistry = "nowhere"\n', encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config), "registry", "list"])
        assert result.exit_code == 0, result.output
        assert "0 packages available" in result.output

    def test_verbose_logs(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["-vv", "install"])
        assert result.exit_code == 0, result.output
        assert "Resolved 3 package(s)" in result.output


@pytest.mark.unit
class TestMainExitCodes:
    """Tests for exit code mapping in pkgmgr.cli.main."""

    def test_success(self, project_dir: Path) -> None:
        with patch("sys.argv", ["pkgmgr", "registry", "list"]):
            assert main() == 0

    def test_command_failure(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        with patch("sys.argv", ["pkgmgr", "install"]):
            assert main() == 1

    def test_usage_error(self) -> None:
        with patch("sys.argv", ["pkgmgr", "no-such-command"]):
            assert main() == 2

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (KeyboardInterrupt(), 130),
            (PkgMgrError("boom"), 1),
            (RuntimeError("unexpected"), 1),
        ],
    )
    def test_exception_mapping(self, error: BaseException, code: int) -> None:
        with patch("pkgmgr.cli.cli", side_effect=error):
            assert main() == code
