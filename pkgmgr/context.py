"""
Shared context object for pkgmgr CLI commands.

This module defines the Click context object used to share configuration
and runtime options across CLI subcommands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from pkgmgr.config import PkgMgrConfig


class PkgMgrContext:
    """Per-invocation state shared by pkgmgr commands.

    Attributes:
        config_path: Path to the pkgmgr configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration; defaults when no file was found.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: PkgMgrConfig = PkgMgrConfig()


#: Click decorator for injecting :class:`PkgMgrContext` into commands.
pass_context = click.make_pass_decorator(PkgMgrContext, ensure=True)
