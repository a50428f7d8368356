"""Command line interface for rebed.

Usage:
    rebed tree    SOURCE [--dest DIR]     # Directories only
    rebed touch   SOURCE [--dest DIR]     # Empty files where missing
    rebed create  SOURCE [--dest DIR]     # Write every file (overwrite)
    rebed patch   SOURCE [--dest DIR]     # Write missing files only
    rebed patch   SOURCE --empty          # Missing files created empty

SOURCE is a directory or ``package[:sub/dir]`` naming bundled package
data.  It falls back to the REBED_SOURCE environment variable; the
destination falls back to REBED_DEST, then the current directory.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from rebed import __version__
from rebed.config import get_destination_root, resolve_source
from rebed.errors import RebedError
from rebed.reconcile import ReconcileMode, ReconcileReport, materialize

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="rebed",
    help="Materialize bundled read-only file trees as editable files on disk",
    add_completion=False,
    no_args_is_help=True,
)

SOURCE_HELP = "Source directory or package[:sub/dir] (default: $REBED_SOURCE)"
DEST_HELP = "Destination root (default: $REBED_DEST, then current directory)"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"rebed {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Materialize bundled read-only file trees as editable files on disk."""


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


def _print_report(report: ReconcileReport, verbose: bool) -> None:
    table = Table(title=f"rebed {report.mode.value} -> {escape(str(report.root))}")
    table.add_column("Action", style="cyan")
    table.add_column("Count", justify="right")
    for action, count in report.summary().items():
        table.add_row(action, str(count))
    console.print(table)

    if verbose:
        for path in report.directories:
            console.print(f"    [dim]directory: {escape(str(path))}[/dim]", soft_wrap=True)
        for path in report.created:
            console.print(f"    [green]created: {escape(str(path))}[/green]", soft_wrap=True)
        for path in report.overwritten:
            console.print(f"    [yellow]overwritten: {escape(str(path))}[/yellow]", soft_wrap=True)
        for path in report.skipped:
            console.print(f"    [blue]skipped: {escape(str(path))}[/blue]", soft_wrap=True)


def _run(
    mode: ReconcileMode,
    source: Optional[str],
    dest: Optional[str],
    verbose: bool,
    fill_content: bool = True,
) -> None:
    _configure_logging(verbose)
    try:
        tree = resolve_source(source)
        report = materialize(tree, mode, get_destination_root(dest), fill_content=fill_content)
    except RebedError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        if e.__cause__ is not None:
            console.print(f"[dim]{escape(str(e.__cause__))}[/dim]", soft_wrap=True)
        raise typer.Exit(1)
    _print_report(report, verbose)


@app.command("tree")
def tree_cmd(
    source: Optional[str] = typer.Argument(None, help=SOURCE_HELP),
    dest: Optional[str] = typer.Option(None, "--dest", "-d", help=DEST_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show path-by-path detail"),
) -> None:
    """Create the directory structure of SOURCE, without files."""
    _run(ReconcileMode.TREE, source, dest, verbose)


@app.command("touch")
def touch_cmd(
    source: Optional[str] = typer.Argument(None, help=SOURCE_HELP),
    dest: Optional[str] = typer.Option(None, "--dest", "-d", help=DEST_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show path-by-path detail"),
) -> None:
    """Create directories and empty files; existing files are left untouched."""
    _run(ReconcileMode.TOUCH, source, dest, verbose)


@app.command("create")
def create_cmd(
    source: Optional[str] = typer.Argument(None, help=SOURCE_HELP),
    dest: Optional[str] = typer.Option(None, "--dest", "-d", help=DEST_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show path-by-path detail"),
) -> None:
    """Write every file of SOURCE, overwriting files of the same path."""
    _run(ReconcileMode.CREATE, source, dest, verbose)


@app.command("patch")
def patch_cmd(
    source: Optional[str] = typer.Argument(None, help=SOURCE_HELP),
    dest: Optional[str] = typer.Option(None, "--dest", "-d", help=DEST_HELP),
    empty: bool = typer.Option(False, "--empty", help="Create missing files empty instead of copying content"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show path-by-path detail"),
) -> None:
    """Write the files of SOURCE that are missing; existing files are left untouched."""
    _run(ReconcileMode.PATCH, source, dest, verbose, fill_content=not empty)


def main() -> None:
    app()
