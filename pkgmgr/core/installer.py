"""Simulated package installation for pkgmgr.

There is no artifact to download, so installing a package means laying
out ``<install_dir>/<name>/`` with three files:

- ``VERSION``: the installed version
- ``README.md``: a short description listing dependencies
- ``Package.toml``: a manifest whose dependencies are all ``"*"``
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

import tomli_w

from pkgmgr.utils.logger import get_logger
from pkgmgr.exceptions import FileOperationError
from pkgmgr.models import ResolutionResult, ResolvedPackage
from pkgmgr.utils.filesystem import reset_directory, safe_write_file, validate_path

logger = get_logger("installer")

PathLike = Union[str, Path]

VERSION_FILE = "VERSION"


def _package_dir(package: ResolvedPackage, target_dir: Path) -> Path:
    # Each package gets its own direct child of target_dir, never target_dir
    # itself or a nested path.
    package_dir = validate_path(target_dir / package.name, base_dir=target_dir)
    if package_dir.parent != target_dir.resolve():
        raise FileOperationError(
            f"Invalid package directory for {package.name!r}",
            file_path=str(package_dir),
            operation="validate",
        )
    return package_dir


def _readme(package: ResolvedPackage) -> str:
    if package.dependencies:
        deps = "\n".join(f"- {name}" for name in package.dependencies)
    else:
        deps = "No dependencies"
    return (
        f"# {package.name} v{package.version}\n\n"
        "This is a simulated package installation.\n\n"
        "## Dependencies\n\n"
        f"{deps}\n\n"
        "Installed by: pkgmgr\n"
    )


def _manifest(package: ResolvedPackage) -> str:
    return tomli_w.dumps(
        {
            "package": {"name": package.name, "version": str(package.version)},
            "dependencies": {name: "*" for name in package.dependencies},
        }
    )


def install_package(package: ResolvedPackage, target_dir: PathLike) -> Path:
    """Install one package, replacing any previous installation of it.

    Returns:
        The package directory.
    """
    package_dir = reset_directory(_package_dir(package, Path(target_dir)))

    safe_write_file(package_dir / VERSION_FILE, f"{package.version}\n")
    safe_write_file(package_dir / "README.md", _readme(package))
    safe_write_file(package_dir / "Package.toml", _manifest(package))

    logger.debug("Installed %s into %s", package, package_dir)
    return package_dir


def install_packages(result: ResolutionResult, target_dir: PathLike) -> List[Path]:
    """Install every package in ``result`` under ``target_dir``.

    Packages are installed in discovery order.

    Returns:
        Installed package directories.
    """
    root = Path(target_dir)
    root.mkdir(parents=True, exist_ok=True)
    installed = [install_package(package, root) for package in result]
    logger.info("Installed %d package(s) into %s", len(installed), root)
    return installed


def verify_installation(result: ResolutionResult, target_dir: PathLike) -> bool:
    """Return True if every package in ``result`` is installed at its version."""
    root = Path(target_dir)
    if not root.is_dir():
        return False

    for package in result:
        version_file = _package_dir(package, root) / VERSION_FILE
        if not version_file.is_file():
            return False
        if version_file.read_text(encoding="utf-8").strip() != str(package.version):
            return False

    return True
