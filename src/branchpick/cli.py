"""CLI entry point: pick a git branch with fuzzy search."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from branchpick import __version__
from branchpick.config import PickerConfig
from branchpick.exceptions import BranchpickError
from branchpick.git import checkout_branch, load_branches
from branchpick.tui import PickerApp, PickerState

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def _configure_logging(config: PickerConfig) -> None:
    # The picker owns the terminal, so verbose output goes to a file.
    level = logging.DEBUG if config.verbose else logging.WARNING
    kwargs: dict = {}
    if config.verbose:
        try:
            config.log_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BranchpickError(
                f"Couldn't create log directory {config.log_file.parent}: {exc}"
            ) from exc
        kwargs["filename"] = str(config.log_file)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        **kwargs,
    )


def _current_directory() -> Path:
    try:
        return Path.cwd()
    except OSError as exc:
        raise BranchpickError(
            "Couldn't determine current working directory. "
            f"Do you have permissions, or was the directory deleted? ({exc})"
        ) from exc


@click.command()
@click.version_option(version=__version__, prog_name="branchpick")
@click.option(
    "--remote/--local",
    "-r/-l",
    default=None,
    help="Search remote or local branches. Overrides the configured default.",
)
@click.option(
    "--checkout",
    "-c",
    is_flag=True,
    help="Check out the selected branch instead of printing its name.",
)
@click.option("--verbose", "-v", is_flag=True, help="Write debug logs to the log file.")
@click.argument("query", required=False, default="")
def main(remote: bool | None, checkout: bool, verbose: bool, query: str) -> None:
    """Branchpick: a tool for checking out git branches using fuzzy search.

    The selected branch is printed to stdout, so it composes with
    ``git checkout "$(branchpick)"``.
    """
    try:
        config = PickerConfig.load()
        if remote is not None:
            config.remote = remote
        config.verbose = verbose
        _configure_logging(config)

        result = _pick(config, query)
        if result is None:
            return
        if checkout:
            checkout_branch(
                _current_directory(),
                result,
                remote=config.remote,
                timeout=config.git_timeout,
            )
            console.print(f"Switched to [cyan]{escape(result)}[/cyan]")
        else:
            click.echo(result)
    except BranchpickError as exc:
        logger.debug("Fatal error", exc_info=True)
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _pick(config: PickerConfig, query: str) -> str | None:
    cwd = _current_directory()
    state = PickerState(input=query, match_limit=config.match_limit)

    def load_entries() -> list[str]:
        return load_branches(cwd, remote=config.remote, timeout=config.git_timeout)

    app = PickerApp(state=state, load_entries=load_entries)
    return app.run()
