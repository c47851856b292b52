"""
sort_rules.py - Rename Ordering

Files first, in discovery order. Then directories, deepest first. A
descendant always has more path components than its ancestor, so anything
below a matched directory is renamed (through its original path) before the
directory itself moves.
"""

from typing import List, Tuple
from .models_fs import Match


def get_sort_key(match: Match) -> Tuple[int, int]:
    """
    Sort key: (0, 0) for files, (1, -depth) for directories

    sorted() is stable, so files keep discovery order and directories of
    equal depth keep theirs.
    """
    if not match.is_dir:
        return (0, 0)
    return (1, -match.depth)


def order_matches(matches: List[Match]) -> List[Match]:
    """
    Order a batch so no rename moves an entry that is still pending

    Args:
        matches: Matches in any order

    Returns:
        New list in application order
    """
    return sorted(matches, key=get_sort_key)

