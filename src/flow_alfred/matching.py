"""
Subsequence matching and ranking for launcher queries.

A query matches a target when its characters appear in the target in order,
case-insensitively, not necessarily contiguous ("fc" matches "flow-code").
Scores reward matches at the start of the target, right after a separator,
and in contiguous runs. The arithmetic is fixed: changing any bonus changes
the order users see.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")

# Returned by score() when the query is not a subsequence of the target
NO_MATCH = -1

MATCH_SCORE = 5
START_BONUS = 20
SEPARATOR_BONUS = 15
CONSECUTIVE_BONUS = 10

SEPARATORS = frozenset("/-_ ")


def matches(query: str, target: str) -> bool:
    """Return True if query is an ordered subsequence of target (case-insensitive)."""
    if not query:
        return True

    query = query.lower()
    target = target.lower()

    cursor = 0
    for char in target:
        if query[cursor] == char:
            cursor += 1
            if cursor == len(query):
                return True
    return False


def score(query: str, target: str) -> int:
    """
    Score how well query matches target (higher is better).

    For each target character that consumes the next query character:
    - +5 base credit
    - +20 if it is the first character of target
    - +15 if the preceding target character is "/", "-", "_" or a space
    - +10 * run for contiguous matches, where run grows by one for each
      match directly following the previous one and resets on a gap

    Args:
        query: Search query; empty scores 0
        target: Candidate string

    Returns:
        Score, or NO_MATCH if query is not a subsequence of target
    """
    if not query:
        return 0

    query = query.lower()
    target = target.lower()

    total = 0
    cursor = 0
    last_match: int | None = None
    run = 0

    for i, char in enumerate(target):
        if cursor == len(query) or query[cursor] != char:
            continue
        cursor += 1

        if last_match is not None:
            if i == last_match + 1:
                run += 1
                total += run * CONSECUTIVE_BONUS
            else:
                run = 0

        if i == 0:
            total += START_BONUS
        elif target[i - 1] in SEPARATORS:
            total += SEPARATOR_BONUS

        last_match = i
        total += MATCH_SCORE

    if cursor < len(query):
        return NO_MATCH

    return total


def rank(items: Iterable[T], query: str, key: Callable[[T], str]) -> list[T]:
    """
    Order items by descending score of key(item) against query.

    The sort is stable, so items with equal scores keep their input order
    (discovery output is already sorted by name). An empty query returns
    the items in their original order.
    """
    items = list(items)
    if not query:
        return items
    return sorted(items, key=lambda item: -score(query, key(item)))


def filter_and_rank(items: Iterable[T], query: str, key: Callable[[T], str]) -> list[T]:
    """Keep items whose key matches query, then rank them."""
    return rank((item for item in items if matches(query, key(item))), query, key)
