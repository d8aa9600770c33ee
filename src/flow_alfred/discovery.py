"""
Repository Discovery - Filesystem scanning for git repositories

Two traversal strategies are provided:
- discover(): unbounded search under a root (e.g. ~/code), pruning noise
  directories such as node_modules or build output
- discover_structured(): fixed owner/repo layout (e.g. ~/repos/acme/widgets)

Both return RepositoryEntry lists sorted by display name. Unreadable
directories are skipped; a partial scan is still a valid result.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


# Directory basenames that are never descended into during unbounded discovery.
# Anything starting with "." is pruned as well (see should_skip_dir).
SKIP_DIRS = frozenset(
    {
        "node_modules",
        "target",
        "dist",
        "build",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        "venv",
        ".venv",
        "vendor",
        "Pods",
        ".cargo",
        ".rustup",
        ".next",
        ".turbo",
        ".cache",
    }
)

GIT_MARKER = ".git"


@dataclass(frozen=True)
class RepositoryEntry:
    """A discovered repository root."""

    display: str  # Relative to scan root, or "<owner>/<repo>"
    path: Path  # Absolute path to the repository


def should_skip_dir(name: str) -> bool:
    """Return True if a directory with this basename must not be traversed."""
    return name.startswith(".") or name in SKIP_DIRS


def is_repository(path: Path) -> bool:
    """Check for a .git directory or a .git pointer file (worktrees, submodules)."""
    marker = path / GIT_MARKER
    return marker.is_dir() or marker.is_file()


def _subdirectories(directory: Path, follow_symlinks: bool = True) -> list[os.DirEntry]:
    """List the directory entries of a directory.

    Args:
        directory: Directory to list
        follow_symlinks: Count symlinks to directories as directories

    Raises:
        OSError: If the directory itself cannot be listed
    """
    subdirs = []
    with os.scandir(directory) as it:
        for entry in it:
            try:
                if entry.is_dir(follow_symlinks=follow_symlinks):
                    subdirs.append(entry)
            except OSError:
                # Broken entry (e.g. vanished mid-scan); ignore it
                continue
    return subdirs


def _display_name(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def discover(root: Path | str) -> list[RepositoryEntry]:
    """
    Discover git repositories anywhere below root.

    Uses an explicit stack rather than recursion so arbitrarily deep trees
    cannot exhaust the call stack. A directory holding a .git marker is a
    leaf: it is recorded and not descended into. The root itself is never
    classified as a repository, only its descendants are.

    Symlinks to directories below root are neither followed nor reported,
    so each repository appears under its real path whatever order the
    filesystem lists entries in. A symlinked root is still scanned.

    Args:
        root: Directory to scan

    Returns:
        Entries sorted by display name (path relative to root)
    """
    root = Path(root).absolute()
    repos: list[RepositoryEntry] = []
    seen: set[str] = set()
    stack: list[Path] = [root]

    while stack:
        directory = stack.pop()
        try:
            subdirs = _subdirectories(directory, follow_symlinks=False)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {directory}: {e}")
            continue

        for entry in subdirs:
            if should_skip_dir(entry.name):
                continue

            path = Path(entry.path)
            if is_repository(path):
                key = os.path.realpath(path)
                if key not in seen:
                    seen.add(key)
                    repos.append(
                        RepositoryEntry(display=_display_name(path, root), path=path)
                    )
                continue

            stack.append(path)

    repos.sort(key=lambda entry: entry.display)
    logger.debug(f"Discovered {len(repos)} repositories under {root}")
    return repos


def discover_structured(root: Path | str) -> list[RepositoryEntry]:
    """
    Discover git repositories laid out as root/<owner>/<repo>.

    Exactly two levels are listed. Hidden owner and repo directories are
    skipped, but the SKIP_DIRS noise list does not apply: the layout is
    assumed to be curated.

    Args:
        root: Directory containing owner directories

    Returns:
        Entries with display "<owner>/<repo>", sorted by display name
    """
    root = Path(root).absolute()
    repos: list[RepositoryEntry] = []

    try:
        owners = _subdirectories(root)
    except OSError as e:
        logger.debug(f"Cannot list repos root {root}: {e}")
        return repos

    for owner in owners:
        if owner.name.startswith("."):
            continue

        try:
            repo_dirs = _subdirectories(Path(owner.path))
        except OSError as e:
            logger.debug(f"Skipping unreadable owner directory {owner.path}: {e}")
            continue

        for repo in repo_dirs:
            if repo.name.startswith("."):
                continue

            path = Path(repo.path)
            if (path / GIT_MARKER).exists():
                repos.append(
                    RepositoryEntry(display=f"{owner.name}/{repo.name}", path=path)
                )

    repos.sort(key=lambda entry: entry.display)
    logger.debug(f"Discovered {len(repos)} owner/repo entries under {root}")
    return repos
