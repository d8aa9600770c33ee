"""flow-alfred CLI entry point."""

import logging
from typing import Optional

import typer

from flow_alfred.config import ConfigurationError, get_log_level, load_config

from . import __version__
from .console import console, print_error
from .search import code_command, repos_command
from .workflow import (
    install_command,
    link_command,
    pack_command,
    reload_command,
    unlink_command,
)

app = typer.Typer(
    name="flow-alfred",
    help="Alfred workflow tools",
    no_args_is_help=True,
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"flow-alfred version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output to stderr",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to config file (default: ~/.config/flow-alfred/config.yaml)",
    ),
) -> None:
    """flow-alfred - repository search and workflow tools for Alfred."""
    try:
        config = load_config(config_path)
        level = logging.DEBUG if verbose else get_log_level(config)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    # stdout carries Alfred JSON, so logs go to stderr (basicConfig default)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    ctx.obj = config


# Search commands (Script Filters)
app.command(name="code")(code_command)
app.command(name="repos")(repos_command)

# Workflow management
app.command(name="link")(link_command)
app.command(name="unlink")(unlink_command)
app.command(name="reload")(reload_command)
app.command(name="pack")(pack_command)
app.command(name="install")(install_command)


if __name__ == "__main__":
    app()
