"""Console output utilities.

Human-facing messages go to stderr through rich so that stdout stays
reserved for Alfred's JSON.

Usage:
    from flow_cli.console import console, print_success, print_error

    print_success("Linked workflow")
    print_error("Workflow directory not found")
"""

import typer
from rich.console import Console

from flow_alfred.alfred import Output

console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message (green checkmark)."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message (red X)."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message (yellow warning sign)."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message (blue info sign)."""
    console.print(f"[blue]ℹ[/blue] {message}")


def emit(output: Output) -> None:
    """Write Script Filter JSON to stdout, unstyled."""
    typer.echo(output.to_json())


__all__ = [
    "console",
    "emit",
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
]
