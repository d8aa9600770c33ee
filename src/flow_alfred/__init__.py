"""flow-alfred - Repository search and workflow tooling for Alfred

Usage:
    from flow_alfred import discover, filter_and_rank

    repos = discover("/Users/me/code")
    for entry in filter_and_rank(repos, "fc", key=lambda e: e.display):
        print(entry.display, entry.path)
"""

from .discovery import (
    SKIP_DIRS,
    RepositoryEntry,
    discover,
    discover_structured,
    should_skip_dir,
)
from .matching import NO_MATCH, filter_and_rank, matches, rank, score

__all__ = [
    "NO_MATCH",
    "SKIP_DIRS",
    "RepositoryEntry",
    "discover",
    "discover_structured",
    "filter_and_rank",
    "matches",
    "rank",
    "score",
    "should_skip_dir",
]

__version__ = "0.1.0"
