"""Hosting table commands.

Shows the hosting sites vendetta knows how to fetch from, and manages the
extra sites declared in settings (user, project or local scope).
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..resolution.hosting import HOSTING_SITES
from ..resolution.hosting import describe_rule
from ..settings import ScopeType
from ..settings import SettingsManager

_scope_options = [
    click.option(
        "--local", "scope_flag", flag_value="local", help="Store in local settings (.vendetta/settings.local.yaml)"
    ),
    click.option(
        "--project", "scope_flag", flag_value="project", help="Store in project settings (.vendetta/settings.yaml)"
    ),
    click.option("--global", "scope_flag", flag_value="global", help="Store in user settings (~/.vendetta/settings.yaml)"),
]


def scope_options(func):
    for option in reversed(_scope_options):
        func = option(func)
    return func


@click.group(invoke_without_command=True)
@click.option(
    "-C",
    "--project-dir",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Project whose settings to use",
)
@click.pass_context
def hosts(ctx: click.Context, project_dir: Path):
    """Show and manage hosting sites for missing dependencies.

    Examples:

        \b
        # Show built-in and configured hosting sites
        vendetta hosts list

        \b
        # golang.org/x/exp is fetched from go.googlesource.com
        vendetta hosts add golang.org exp https://go.googlesource.com/exp --segments 3
    """
    ctx.obj = SettingsManager(project_dir)
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@hosts.command("list")
@click.pass_obj
def hosts_list(manager: SettingsManager):
    """List built-in and configured hosting sites."""
    table = Table(title="Hosting Sites", show_header=True, header_style="bold cyan")
    table.add_column("Domain", style="green")
    table.add_column("Rule")
    table.add_column("Source", style="dim")

    configured = manager.get_hosting_entries()

    # Configured repositories extend the built-in rule of the same site
    for domain, rule in HOSTING_SITES.items():
        table.add_row(domain, describe_rule(rule), "built-in")

    for domain, entry in sorted(configured.items()):
        repos = ", ".join(f"{name} → {url}" for name, url in sorted(entry.repos.items()))
        table.add_row(domain, f"{entry.segments} segments: {repos or '(none)'}", "settings")

    console.print(table)


@hosts.command("add")
@click.argument("domain")
@click.argument("name")
@click.argument("url")
@click.option("--segments", type=click.IntRange(min=1), required=True, help="Segments forming the repository root")
@scope_options
@click.pass_obj
def hosts_add(manager: SettingsManager, domain: str, name: str, url: str, segments: int, scope_flag: str | None):
    """Fetch DOMAIN/.../NAME from repository URL.

    NAME is the segment at position --segments of the import path.
    """
    scope: ScopeType = scope_flag or "project"  # type: ignore[assignment]
    manager.add_hosting_repo(domain, name, url, segments, scope=scope)
    console.print(f"[green]✓ Added {domain} {name}[/green] → {url} [dim]({scope})[/dim]")


@hosts.command("remove")
@click.argument("domain")
@click.argument("name")
@scope_options
@click.pass_obj
def hosts_remove(manager: SettingsManager, domain: str, name: str, scope_flag: str | None):
    """Remove a configured hosting repository."""
    scope: ScopeType = scope_flag or "project"  # type: ignore[assignment]
    if manager.remove_hosting_repo(domain, name, scope=scope):
        console.print(f"[green]✓ Removed {domain} {name}[/green] [dim]({scope})[/dim]")
    else:
        console.print(f"[yellow]No {scope} hosting entry for {domain} {name}[/yellow]")
