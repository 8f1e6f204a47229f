"""Shared Rich consoles for CLI output."""

from rich.console import Console

console = Console()
# Reports go to stderr so stdout stays clean for JSON output.
err_console = Console(stderr=True)

__all__ = ["console", "err_console"]
