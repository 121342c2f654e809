"""Shared Rich console instances for CLI output."""

from rich.console import Console

# Results go to stdout; progress and diagnostics to stderr
console = Console()
err_console = Console(stderr=True)

__all__ = ["console", "err_console"]
