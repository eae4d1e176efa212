"""plastic-auto CLI — the main entry point for workspace automation."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from plastic_auto import __version__
from plastic_auto.errors import DecodeError, PlasticAutoError, ToolInvocationError

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """plastic-auto — automate Plastic SCM workspaces.

    Undo pending changes until a workspace is clean, and update it to the
    latest revision while re-downloading corrupted files.
    """


def _workspace_options(func):
    """Options shared by every workspace command."""
    func = click.option(
        "--config", "-c", "config_path", default=None,
        type=click.Path(exists=True, dir_okay=False),
        help="YAML config file (default: <working-dir>/.plastic-auto.yaml)",
    )(func)
    func = click.option("--log", "-l", is_flag=True, help="Print raw cm output")(func)
    func = click.option("--verbose", "-v", is_flag=True, help="Print progress")(func)
    func = click.option(
        "--working-dir", "-w", default=None,
        type=click.Path(exists=True, file_okay=False),
        help="Workspace directory (default: current directory)",
    )(func)
    return func


_max_iterations_option = click.option(
    "--max-iterations",
    type=click.IntRange(min=1),
    default=None,
    help="Give up after this many status queries (default: no limit)",
)


def _configure_logging(verbose: bool, log: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if log:
        level = logging.DEBUG
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False, markup=False)],
        force=True,
    )
    logging.getLogger("plastic_auto").setLevel(level)


def _prepare(working_dir: str | None, verbose: bool, log: bool,
             config_path: str | None, max_iterations: int | None):
    from plastic_auto.config import load_config

    _configure_logging(verbose, log)
    workspace = Path(working_dir) if working_dir else Path.cwd()
    config = load_config(config_path, working_dir=workspace)
    if max_iterations is not None:
        config.max_iterations = max_iterations
    return workspace, config


def _fail(error: PlasticAutoError) -> NoReturn:
    console.print(f"[red]Error:[/] {escape(str(error))}", highlight=False)
    if isinstance(error, ToolInvocationError) and error.stderr:
        console.print(f"  stderr: {error.stderr}", markup=False)
    if isinstance(error, DecodeError):
        console.print("  Raw output:", markup=False)
        console.print(f"  `{error.raw}`", markup=False)
    sys.exit(1)


# ── Ensure ───────────────────────────────────────────────────────────


@main.command()
@_workspace_options
@_max_iterations_option
def ensure(working_dir: str | None, verbose: bool, log: bool,
           config_path: str | None, max_iterations: int | None):
    """Ensure the workspace has no pending changes (undo if any)."""
    from plastic_auto.sync.orchestrator import Reconciler

    try:
        workspace, config = _prepare(working_dir, verbose, log, config_path, max_iterations)
        result = Reconciler.from_config(config).ensure(workspace)
    except PlasticAutoError as e:
        _fail(e)

    if verbose:
        console.print(Panel(result.summary(), title="Ensure"))
        console.print("[green]Done![/]")


# ── Update ───────────────────────────────────────────────────────────


@main.command()
@_workspace_options
@_max_iterations_option
def update(working_dir: str | None, verbose: bool, log: bool,
           config_path: str | None, max_iterations: int | None):
    """Update to latest and redownload corrupted files.

    Pending changes are undone before the update, and any changes left
    behind by the update are undone afterwards.
    """
    from plastic_auto.sync.orchestrator import Reconciler

    try:
        workspace, config = _prepare(working_dir, verbose, log, config_path, max_iterations)
        result = Reconciler.from_config(config).update(workspace)
    except PlasticAutoError as e:
        _fail(e)

    if verbose:
        console.print(Panel(result.summary(), title="Update"))
        console.print("[green]Done![/]")


# ── Status ───────────────────────────────────────────────────────────


@main.command()
@_workspace_options
def status(working_dir: str | None, verbose: bool, log: bool, config_path: str | None):
    """List pending changes without modifying the workspace."""
    from plastic_auto.cm.runner import CommandRunner
    from plastic_auto.cm.status import StatusReader

    try:
        workspace, config = _prepare(working_dir, verbose, log, config_path, None)
        runner = CommandRunner(binary=config.cm_binary, check=config.strict_exit_codes)
        snapshot = StatusReader(runner).read(workspace)
    except PlasticAutoError as e:
        _fail(e)

    if snapshot.is_clean:
        console.print("[green]Workspace is clean.[/]")
        return

    table = Table(title=f"Pending Changes ({len(snapshot)} found)")
    table.add_column("Path", style="cyan")
    table.add_column("Size", justify="right")
    for change in snapshot:
        table.add_row(change.path, change.size)
    console.print(table)


if __name__ == "__main__":
    main()
