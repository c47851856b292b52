"""
collect_matches.py - Match Collection

Walker + glob filter + matcher. Pattern and glob compilation happen before
the walk starts, so a bad pattern never touches the filesystem. The result
is in walker order; ordering for renames is done by sort_rules.
"""

from pathlib import Path
from typing import Iterator, List, Optional
import logging

from .glob_filter import GlobFilter
from .models_fs import Match, WalkerConfig, GlobConfig, PatternConfig
from .scan_files import WarningCallback, walk_entries, check_base_dir
from .text_match import Matcher

logger = logging.getLogger(__name__)


def iter_matches(
    walker_config: WalkerConfig,
    glob_config: GlobConfig,
    pattern_config: PatternConfig,
    on_warning: Optional[WarningCallback] = None
) -> Iterator[Match]:
    """
    Lazy form of collect(); compiles everything before returning the iterator
    """
    matcher = Matcher(pattern_config)
    glob_filter = GlobFilter(glob_config)
    base_dir = check_base_dir(walker_config.base_dir)
    return _iter_matches(walker_config, base_dir, glob_filter, matcher, on_warning)


def _iter_matches(
    walker_config: WalkerConfig,
    base_dir: Path,
    glob_filter: GlobFilter,
    matcher: Matcher,
    on_warning: Optional[WarningCallback],
) -> Iterator[Match]:
    pattern = matcher.config.pattern
    replacement = matcher.config.replacement or ""

    for entry in walk_entries(walker_config, on_warning):
        if not glob_filter.accepts(entry, base_dir):
            continue

        new_name = matcher.match(entry.path.name)
        if new_name is None:
            continue

        logger.debug("Match: %s -> %s", entry.path, new_name)
        yield Match(
            path=entry.path,
            new_name=new_name,
            is_dir=entry.is_dir,
            pattern=pattern,
            replacement=replacement,
        )


def collect(
    walker_config: WalkerConfig,
    glob_config: GlobConfig,
    pattern_config: PatternConfig,
    on_warning: Optional[WarningCallback] = None
) -> List[Match]:
    """
    Collect every entry under the base directory whose name matches

    Args:
        walker_config: Traversal options
        glob_config: Glob expressions and entry type filter
        pattern_config: Pattern, optional replacement and flags
        on_warning: Receives a WalkWarning for every unreadable entry

    Returns:
        Matches in walker order

    Raises:
        InvalidPattern: Bad regex or glob, raised before any walk
        InvalidPathError: Base directory does not exist
    """
    matches = list(iter_matches(walker_config, glob_config, pattern_config, on_warning))
    logger.debug("Collected %d matches under %s", len(matches), walker_config.base_dir)
    return matches
