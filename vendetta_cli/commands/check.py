"""The check command: verify submodules are checked out before a sync."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..errors import MissingWorkingTree
from ..fs import LocalFilesystem
from ..git import GitSubmodules


@click.command("check")
@click.argument(
    "project_dir",
    required=False,
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
def check_cmd(project_dir: Path):
    """Check that every registered submodule of PROJECT_DIR is checked out.

    Lists the submodules, nested ones included, and fails if any has an
    empty working directory.
    """
    git = GitSubmodules(project_dir)
    fs = LocalFilesystem(project_dir)

    paths = git.status(recursive=True)
    if not paths:
        console.print("[dim]No submodules registered[/dim]")
        return

    table = Table(title="Submodules", show_header=True, header_style="bold cyan")
    table.add_column("Path", style="green")
    table.add_column("Working tree")

    missing = []
    for path in paths:
        if fs.is_empty(path):
            missing.append(path)
            table.add_row(path, "[red]missing[/red]")
        else:
            table.add_row(path, "present")

    console.print(table)

    if missing:
        raise MissingWorkingTree(missing[0])
