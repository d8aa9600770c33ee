"""Shared pytest fixtures for flow-alfred tests.

Provides helpers for building throwaway directory trees with git markers,
and isolates tests from the user's real config and Alfred environment.
"""

from collections.abc import Callable
from pathlib import Path

import pytest


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Point HOME at a temp directory and clear config-related variables."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "FLOW_ALFRED_CONFIG_PATH",
        "FLOW_ALFRED_LOG_LEVEL",
        "code_root",
        "repos_root",
        "alfred_version",
        "alfred_workflow_bundleid",
        "alfred_workflow_data",
        "alfred_workflow_cache",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


# =============================================================================
# Repository Tree Fixtures
# =============================================================================


def _make_repo(path: Path, marker: str = "dir") -> Path:
    """Create a directory with a .git marker.

    Args:
        path: Repository directory to create
        marker: "dir" for a .git directory, "file" for a .git pointer file
    """
    path.mkdir(parents=True, exist_ok=True)
    if marker == "file":
        (path / ".git").write_text("gitdir: /elsewhere/.git/worktrees/x\n")
    else:
        (path / ".git").mkdir()
    return path


@pytest.fixture
def make_repo() -> Callable[..., Path]:
    """Factory fixture creating a repository directory with a .git marker."""
    return _make_repo


@pytest.fixture
def code_root(tmp_path: Path) -> Path:
    """Create an unbounded code tree with repositories at several depths.

    Layout:
        code/
            flow/              (repo)
            tools/cli/         (repo, .git file)
            tools/alfred/      (repo)
            work/a/b/deep/     (repo)
            node_modules/pkg/  (repo, must be pruned)
            .hidden/secret/    (repo, must be pruned)
            notes/             (plain directory)
    """
    root = tmp_path / "code"
    root.mkdir()
    _make_repo(root / "flow")
    _make_repo(root / "tools" / "cli", marker="file")
    _make_repo(root / "tools" / "alfred")
    _make_repo(root / "work" / "a" / "b" / "deep")
    _make_repo(root / "node_modules" / "pkg")
    _make_repo(root / ".hidden" / "secret")
    (root / "notes").mkdir()
    (root / "README.md").write_text("not a directory\n")
    return root


@pytest.fixture
def repos_root(tmp_path: Path) -> Path:
    """Create an owner/repo tree.

    Layout:
        repos/
            acme/widgets/      (repo, .git file)
            acme/gadgets/      (repo)
            acme/plain/        (not a repo)
            zeta/alpha/        (repo)
            .private/hidden/   (repo, hidden owner)
            acme/.shadow/      (repo, hidden repo)
    """
    root = tmp_path / "repos"
    root.mkdir()
    _make_repo(root / "acme" / "widgets", marker="file")
    _make_repo(root / "acme" / "gadgets")
    (root / "acme" / "plain").mkdir()
    _make_repo(root / "zeta" / "alpha")
    _make_repo(root / ".private" / "hidden")
    _make_repo(root / "acme" / ".shadow")
    return root
