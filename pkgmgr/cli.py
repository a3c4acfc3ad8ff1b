"""
Command-line interface for pkgmgr.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from pkgmgr.config import load_config
from pkgmgr.__version__ import __version__
from pkgmgr.context import PkgMgrContext
from pkgmgr.exceptions import ConfigError, PkgMgrError
from pkgmgr.utils.logger import get_logger, setup_logging
from pkgmgr.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="PKGMGR_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="PKGMGR_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="pkgmgr",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """pkgmgr: a Cargo-like package manager.

    \b
    Available commands:
      pkgmgr init NAME             Create a new Package.toml
      pkgmgr install               Resolve, install and lock dependencies
      pkgmgr update                Re-resolve from scratch
      pkgmgr tree                  Show the locked dependency tree
      pkgmgr registry list         List registry packages

    Use ``pkgmgr COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    pkgmgr_ctx = PkgMgrContext()
    pkgmgr_ctx.config_path = config or loaded_config.source_path
    pkgmgr_ctx.color = color
    pkgmgr_ctx.verbose = verbose
    pkgmgr_ctx.config = loaded_config
    ctx.obj = pkgmgr_ctx

    logger.debug("pkgmgr v%s", __version__)
    logger.debug("Config path: %s", pkgmgr_ctx.config_path)
    logger.debug("Configuration: %s", loaded_config.to_log_dict())


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from pkgmgr.commands.init import init  # noqa: E402
from pkgmgr.commands.install import install  # noqa: E402
from pkgmgr.commands.registry import registry  # noqa: E402
from pkgmgr.commands.tree import tree  # noqa: E402
from pkgmgr.commands.update import update  # noqa: E402

cli.add_command(init)
cli.add_command(install)
cli.add_command(update)
cli.add_command(tree)
cli.add_command(registry)


def main() -> int:
    """Main entry point for the pkgmgr CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except PkgMgrError as exc:
        print_error(str(exc))
        logger.debug(
            "PkgMgrError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
