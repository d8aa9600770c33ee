"""Workflow management commands: link, unlink, reload, pack, install."""

from pathlib import Path
from typing import Optional

import typer

from flow_alfred.config import get_workflow_config
from flow_alfred.workflows import (
    WorkflowError,
    install_workflow,
    link_workflow,
    pack_workflow,
    reload_workflow,
    unlink_workflow,
)

from .console import print_error, print_info, print_success


def _settings(ctx: typer.Context) -> dict[str, str]:
    return get_workflow_config(ctx.obj or {})


def link_command(
    ctx: typer.Context,
    workflow_dir: Optional[str] = typer.Argument(
        None, help="Path to workflow directory (default: workflow.dir from config)"
    ),
    bundle_id: Optional[str] = typer.Option(None, "--bundle-id", help="Bundle ID"),
) -> None:
    """Link workflow to Alfred (for development)."""
    settings = _settings(ctx)
    workflow_dir = workflow_dir or settings["dir"]
    bundle_id = bundle_id or settings["bundle_id"]

    workflow_path = Path(workflow_dir).absolute()
    if not workflow_path.exists():
        print_error(f"Workflow directory not found: {workflow_path}")
        raise typer.Exit(1)
    workflow_path = workflow_path.resolve()

    try:
        dest = link_workflow(workflow_path, bundle_id)
    except WorkflowError as e:
        print_error(f"Failed to link: {e}")
        raise typer.Exit(1)

    print_success(f"Linked {workflow_path} -> {dest}")


def unlink_command(
    ctx: typer.Context,
    bundle_id: Optional[str] = typer.Option(None, "--bundle-id", help="Bundle ID"),
) -> None:
    """Unlink workflow from Alfred."""
    bundle_id = bundle_id or _settings(ctx)["bundle_id"]

    try:
        unlink_workflow(bundle_id)
    except WorkflowError as e:
        print_error(f"Failed to unlink: {e}")
        raise typer.Exit(1)

    print_success(f"Unlinked {bundle_id}")


def reload_command(
    ctx: typer.Context,
    bundle_id: Optional[str] = typer.Option(None, "--bundle-id", help="Bundle ID"),
) -> None:
    """Reload workflow in Alfred without restarting it."""
    bundle_id = bundle_id or _settings(ctx)["bundle_id"]

    try:
        reload_workflow(bundle_id)
    except WorkflowError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Reloaded {bundle_id}")


def pack_command(
    ctx: typer.Context,
    workflow_dir: Optional[str] = typer.Argument(
        None, help="Path to workflow directory (default: workflow.dir from config)"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output file path"
    ),
) -> None:
    """Pack workflow into .alfredworkflow file."""
    settings = _settings(ctx)
    workflow_path = Path(workflow_dir or settings["dir"])
    output_path = Path(output or settings["package"])

    if not workflow_path.exists():
        print_error(f"Workflow directory not found: {workflow_path}")
        raise typer.Exit(1)

    try:
        pack_workflow(workflow_path, output_path)
    except WorkflowError as e:
        print_error(f"Failed to pack: {e}")
        raise typer.Exit(1)

    print_success(f"Created {output_path}")


def install_command(
    workflow_file: str = typer.Argument(..., help="Path to .alfredworkflow file"),
) -> None:
    """Install workflow (open .alfredworkflow file)."""
    path = Path(workflow_file)
    if not path.exists():
        print_error(f"Workflow file not found: {path}")
        raise typer.Exit(1)

    try:
        install_workflow(path)
    except WorkflowError as e:
        print_error(f"Failed to install: {e}")
        raise typer.Exit(1)

    print_info(f"Opening {path} for installation...")
