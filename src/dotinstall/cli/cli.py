import logging
import os
from pathlib import Path

import click
from rich.console import Console

from dotinstall import __version__
from dotinstall.cli.output import format_provision_summary
from dotinstall.context import DotInstallContext, create_context
from dotinstall.core.provision import provision
from dotinstall.core.results import any_failed
from dotinstall.error_boundary import cli_error_boundary

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_ENV_VAR = "DOTINSTALL_DEBUG"


def _enable_debug_logging() -> None:
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


def _existing_dir(value: Path | None, option: str) -> Path | None:
    if value is None:
        return None
    if not value.is_dir():
        raise FileNotFoundError(f"{option} directory not found: {value}")
    return value


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option(
    "--source-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Dotfiles checkout to install from (default: current directory).",
)
@click.option(
    "--home",
    "home_directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Home directory to provision (default: the invoking user's home).",
)
@click.option(
    "--claude-target",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Destination of the .claude copy (default: <home>/.claude).",
)
@click.option("--no-chsh", is_flag=True, help="Do not change the login shell.")
@click.option(
    "--skip-existing",
    is_flag=True,
    help="Do not append to files that already contain the provenance marker.",
)
@click.option("-q", "--quiet", is_flag=True, help="Only show errors and the final summary.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
@cli_error_boundary
def cli(
    ctx: click.Context,
    source_root: Path | None,
    home_directory: Path | None,
    claude_target: Path | None,
    no_chsh: bool,
    skip_existing: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """Install dotfiles into your home directory.

    Changes the login shell to zsh, appends .zshrc, .bashrc and .gitconfig
    from the source root onto the files of the same name in your home
    directory, and copies the .claude folder into ~/.claude.
    """
    debug = debug or bool(os.getenv(DEBUG_ENV_VAR))
    if debug:
        _enable_debug_logging()

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(
            source_root=_existing_dir(source_root, "Source root"),
            home_directory=_existing_dir(home_directory, "Home"),
            claude_target_dir=claude_target,
            change_shell=False if no_chsh else None,
            skip_if_marker_present=True if skip_existing else None,
            quiet=quiet,
            debug=debug,
        )
    dot_ctx: DotInstallContext = ctx.obj

    results = provision(dot_ctx)

    Console().print(format_provision_summary(results))

    if any_failed(results):
        raise SystemExit(1)


def main() -> None:
    """CLI entry point used by the `dotinstall` console script."""
    cli()
