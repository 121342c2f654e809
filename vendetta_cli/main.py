"""Vendetta CLI - vendor Go dependencies as git submodules."""

import logging
from pathlib import Path

import click

from . import __version__
from .commands.check import check_cmd
from .commands.hosts import hosts as hosts_group
from .commands.sync import sync_cmd
from .console import err_console
from .errors import VendettaError
from .logging_setup import init_console_logging
from .logging_setup import init_json_logging
from .utils.error_format import escape_markup
from .utils.error_format import format_error_details
from .utils.error_format import format_error_message

logger = logging.getLogger(__name__)


class VendettaGroup(click.Group):
    """Click group that turns vendetta errors into a message and exit status 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except VendettaError as e:
            logger.debug("Run failed", exc_info=True)
            err_console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
            for line in format_error_details(e):
                err_console.print(f"[dim]{escape_markup(line)}[/dim]")
            ctx.exit(1)


@click.group(cls=VendettaGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="vendetta")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write JSONL logs to this file (or set VENDETTA_LOG_PATH)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_file: Path | None):
    """Vendetta - vendor Go dependencies as git submodules under vendor/."""
    init_console_logging(verbose)
    init_json_logging(str(log_file) if log_file else None, "DEBUG" if verbose else None)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(sync_cmd)
cli.add_command(check_cmd)
cli.add_command(hosts_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
