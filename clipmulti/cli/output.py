"""Rich-based output utilities for the clipmulti CLI.

Clipboard content is printed verbatim: no markup, no emoji codes, no
highlighting, no wrapping.
"""

from rich.console import Console
from rich.markup import escape

# Shared console instances
console = Console(highlight=False, emoji=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)


def print_content(text: str) -> None:
    """Print user content exactly as stored.

    Rich expands tabs while rendering, so content bypasses rendering and is
    written to the console's stream directly.
    """
    stream = console.file
    stream.write(text + "\n")
    stream.flush()


def print_success(message: str) -> None:
    console.print(message, markup=False)


def print_failure(message: str) -> None:
    """Print the result line of a command that did not succeed.

    Goes to stdout like print_success(); the exit code marks the failure
    and details, if any, were already sent through print_error().
    """
    console.print(message, markup=False)


def print_error(message: str) -> None:
    """Print an error message in red to stderr.

    Args:
        message: The error message to display.
    """
    err_console.print("[bold red]Error:[/bold red] ", end="")
    err_console.print(message, markup=False)


def print_info(message: str) -> None:
    """Print an informational message.

    Args:
        message: The info message to display.
    """
    console.print(f"[dim]{escape(message)}[/dim]")
