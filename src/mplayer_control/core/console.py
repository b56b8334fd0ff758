"""Shared Rich consoles for CLI output.

Status lines go to stdout; errors go to a separate stderr console so that
piping the status output stays clean.
"""

from rich.console import Console

_console: Console | None = None
_error_console: Console | None = None


def get_console(stderr: bool = False) -> Console:
    """Get the stdout console, or the stderr one when ``stderr`` is set."""
    global _console, _error_console
    if stderr:
        if _error_console is None:
            _error_console = Console(stderr=True)
        return _error_console

    if _console is None:
        _console = Console()
    return _console


def safe_print(message: str, style: str | None = None) -> None:
    """Print a status line, optionally styled (e.g. "bold red", "green")."""
    get_console().print(message, style=style, highlight=False)


def print_error(message: str) -> None:
    get_console(stderr=True).print(f"Error: {message}", style="bold red", highlight=False)
