"""CLI commands for vendetta-cli."""

__all__ = [
    "check",
    "hosts",
    "sync",
]
