"""Shared fixtures for the pkgmgr test suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

import pytest
import tomli_w

from pkgmgr.core.registry import RegistryIndex
from pkgmgr.models import ManifestRecord, Version, VersionRequirement
from pkgmgr.utils.console import reconfigure_console
from pkgmgr.utils.logger import ROOT_LOGGER_NAME

RecordFactory = Callable[..., ManifestRecord]


def _make_record(
    name: str,
    version: str,
    deps: Optional[Dict[str, str]] = None,
    *,
    description: Optional[str] = None,
    authors: Iterable[str] = ("Test Author",),
) -> ManifestRecord:
    return ManifestRecord(
        name=name,
        version=Version.parse(version),
        authors=tuple(authors),
        description=description,
        dependencies={
            dep: VersionRequirement.parse(req) for dep, req in (deps or {}).items()
        },
    )


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory building a ManifestRecord from plain strings."""
    return _make_record


@pytest.fixture
def root_manifest() -> Callable[[Dict[str, str]], ManifestRecord]:
    """Factory for a root manifest named ``app`` with the given deps."""

    def factory(deps: Dict[str, str]) -> ManifestRecord:
        return _make_record("app", "0.1.0", deps)

    return factory


@pytest.fixture
def serde_tokio_registry() -> RegistryIndex:
    """Registry holding serde 1.0.195 and tokio 1.35.1."""
    return RegistryIndex(
        [
            _make_record(
                "serde",
                "1.0.195",
                description="A generic serialization/deserialization framework",
            ),
            _make_record(
                "tokio",
                "1.35.1",
                description="An event-driven, non-blocking I/O platform",
            ),
        ]
    )


@pytest.fixture
def write_toml() -> Callable[[Path, dict], Path]:
    """Write a mapping as TOML to ``path`` and return the path."""

    def writer(path: Path, data: dict) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(tomli_w.dumps(data), encoding="utf-8")
        return path

    return writer


@pytest.fixture
def project_dir(tmp_path: Path, write_toml, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A working directory with a manifest and a small registry.

    ``app`` depends on ``web ^2.0`` and ``serde ^1.0``; ``web`` depends on
    ``serde ^1.0`` and ``tokio ~1.35``.
    """
    write_toml(
        tmp_path / "Package.toml",
        {
            "package": {"name": "app", "version": "0.1.0", "authors": ["Me"]},
            "dependencies": {"web": "^2.0", "serde": "^1.0"},
        },
    )
    registry = tmp_path / "registry-data"
    for name, version, deps, description in (
        ("serde", "1.0.190", {}, "Serialization framework"),
        ("serde", "1.0.195", {}, "Serialization framework"),
        ("tokio", "1.35.1", {}, "Async runtime"),
        ("tokio", "1.36.0", {}, "Async runtime"),
        ("web", "2.1.0", {"serde": "^1.0", "tokio": "~1.35"}, "Web framework"),
    ):
        write_toml(
            registry / f"{name}-{version}.toml",
            {
                "package": {
                    "name": name,
                    "version": version,
                    "authors": ["Registry"],
                    "description": description,
                },
                "dependencies": deps,
            },
        )

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch: pytest.MonkeyPatch):
    """Undo environment, console and logging changes made by CLI runs."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("PKGMGR_CONFIG", raising=False)
    monkeypatch.delenv("PKGMGR_COLOR", raising=False)
    reconfigure_console()

    yield

    reconfigure_console()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
