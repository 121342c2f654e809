"""The sync command: bring vendor/ in line with the project's imports."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..factory import create_session
from ..logging_setup import has_json_logging
from ..logging_setup import init_json_logging
from ..session import SyncReport
from ..settings import SettingsManager


def _print_report(report: SyncReport) -> None:
    if not (report.changed or report.unused):
        console.print(f"[green]✓ vendor/ is up to date[/green] [dim]({report.visited} directories checked)[/dim]")
        return

    table = Table(title="Submodules", show_header=True, header_style="bold cyan")
    table.add_column("Path", style="green")
    table.add_column("Status")

    for path in report.added:
        table.add_row(path, "added")
    for path in report.updated:
        table.add_row(path, "updated")
    for path in report.unused:
        table.add_row(path, "removed" if path in report.removed else "[yellow]unused[/yellow]")

    console.print(table)
    console.print(f"[dim]{report.visited} directories checked[/dim]")


@click.command("sync")
@click.argument(
    "project_dir",
    required=False,
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "-n",
    "--name",
    "names",
    multiple=True,
    help="Base package name of the project, e.g. github.com/user/proj (repeatable)",
)
@click.option("-u", "--update", is_flag=True, help="Update dependency submodules from their remote repos")
@click.option("-p", "--prune", is_flag=True, help="Prune unused dependency submodules")
@click.option(
    "--probe-remote",
    is_flag=True,
    help="Ask unknown hosting sites for go-import metadata",
)
@click.option(
    "--strict-import-comments",
    is_flag=True,
    help="Fail when a package declares a different canonical import path",
)
def sync_cmd(
    project_dir: Path,
    names: tuple[str, ...],
    update: bool,
    prune: bool,
    probe_remote: bool,
    strict_import_comments: bool,
):
    """Vendor the dependencies of the project in PROJECT_DIR as git submodules.

    Missing dependencies are added under vendor/, vendored ones are marked
    used (and refreshed with --update), and unused ones are reported (and
    removed with --prune).

    Examples:

        \b
        vendetta sync
        vendetta sync -n github.com/user/proj --update ~/src/proj
    """
    settings = SettingsManager(project_dir).load()
    if settings.logging.path and not has_json_logging():
        init_json_logging(settings.logging.path, settings.logging.level)

    # Flags only switch behaviour on; when absent the settings decide
    session = create_session(
        project_dir,
        settings,
        names=list(names),
        update=update or None,
        prune=prune or None,
        probe_remote=probe_remote or None,
        strict_import_comments=strict_import_comments or None,
    )

    report = session.run()
    _print_report(report)
