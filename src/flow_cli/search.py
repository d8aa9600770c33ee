"""Repository search commands for Alfred Script Filters."""

from collections.abc import Callable
from pathlib import Path
from typing import Optional

import typer

from flow_alfred.alfred import (
    Output,
    missing_root_item,
    no_repositories_item,
    repository_items,
)
from flow_alfred.config import expand_path, get_code_root, get_repos_root
from flow_alfred.discovery import RepositoryEntry, discover, discover_structured

from .console import emit


def run_search(
    query: str,
    root: str,
    setting: str,
    discover_fn: Callable[[Path], list[RepositoryEntry]],
    as_file: bool,
) -> Output:
    """Discover repositories under root and build the ranked Script Filter output.

    Args:
        query: Search query, may be empty
        root: Root as written by the user (may start with "~/")
        setting: Name of the workflow setting for the root, used in messages
        discover_fn: discover or discover_structured
        as_file: Mark result items as files
    """
    root_path = expand_path(root)
    if not root_path.exists():
        return Output([missing_root_item(root, setting)])

    repos = discover_fn(root_path)
    if not repos:
        return Output([no_repositories_item(root)])

    return Output(repository_items(repos, query, root, as_file=as_file))


def code_command(
    ctx: typer.Context,
    query: str = typer.Argument("", help="Search query"),
    root: Optional[str] = typer.Option(
        None,
        "--root",
        help="Root directory to scan (default: code.root from config, ~/code)",
    ),
) -> None:
    """Search git repositories under ~/code."""
    root = root or get_code_root(ctx.obj or {})
    emit(run_search(query, root, "code_root", discover, as_file=True))


def repos_command(
    ctx: typer.Context,
    query: str = typer.Argument("", help="Search query"),
    root: Optional[str] = typer.Option(
        None,
        "--root",
        help="Root directory to scan (default: repos.root from config, ~/repos)",
    ),
) -> None:
    """Search git repositories under ~/repos (owner/repo structure)."""
    root = root or get_repos_root(ctx.obj or {})
    emit(run_search(query, root, "repos_root", discover_structured, as_file=False))
