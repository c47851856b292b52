"""
scan_files.py - Tree Walker

Depth-first traversal honoring depth bounds, hidden entries, symlink policy
and .gitignore / .ignore files. Unreadable entries are reported as
WalkWarning and skipped.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Set, Tuple
import logging
import os

import pathspec

from .errors import InvalidPathError, WalkWarning
from .models_fs import WalkerConfig

logger = logging.getLogger(__name__)

IGNORE_FILES = (".gitignore", ".ignore")

WarningCallback = Callable[[WalkWarning], None]


@dataclass(frozen=True)
class WalkEntry:
    """One entry yielded by the walker"""
    path: Path
    depth: int
    is_dir: bool
    is_symlink: bool = False


# (directory the rules were read in, compiled rules)
IgnoreRules = Tuple[Path, pathspec.PathSpec]


def load_ignore_rules(directory: Path) -> Optional[pathspec.PathSpec]:
    """
    Compile the ignore files of one directory

    Args:
        directory: Directory to read .gitignore / .ignore from

    Returns:
        Compiled spec, or None if the directory has no ignore file
    """
    lines: List[str] = []
    for filename in IGNORE_FILES:
        ignore_file = directory / filename
        if not ignore_file.is_file():
            continue
        with open(ignore_file, "r", encoding="utf-8", errors="replace") as f:
            lines.extend(f.read().splitlines())

    if not lines:
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


def is_ignored(path: Path, is_dir: bool, rules: List[IgnoreRules]) -> bool:
    """Check path against the rules of every enclosing directory"""
    for base, spec in rules:
        rel = path.relative_to(base).as_posix()
        if spec.match_file(rel):
            return True
        # Patterns ending in "/" only match directories
        if is_dir and spec.match_file(rel + "/"):
            return True
    return False


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def _warn(warning: WalkWarning, on_warning: Optional[WarningCallback]) -> None:
    logger.warning("Warning: %s", warning)
    if on_warning:
        on_warning(warning)


def check_base_dir(base_dir: Path) -> Path:
    base_dir = Path(base_dir)
    if not base_dir.is_dir():
        raise InvalidPathError(f"Directory does not exist: {base_dir}")
    return base_dir


def walk_entries(
    config: WalkerConfig,
    on_warning: Optional[WarningCallback] = None
) -> Iterator[WalkEntry]:
    """
    Lazily walk the tree under config.base_dir

    The root has depth 0 and is never yielded. Entries are visited in name
    order within each directory.

    Args:
        config: Walker options
        on_warning: Called with a WalkWarning for every skipped entry

    Yields:
        WalkEntry for every entry within the depth bounds
    """
    root = check_base_dir(config.base_dir)
    max_depth = config.effective_max_depth
    min_depth = config.effective_min_depth
    if max_depth is not None and max_depth < 1:
        # Only the root is within reach, and it is never yielded
        return

    root_rules: List[IgnoreRules] = []
    if config.honor_ignore_files:
        spec = _read_rules(root, on_warning)
        if spec is not None:
            root_rules.append((root, spec))

    ancestors: Set[str] = {os.path.realpath(root)}
    yield from _walk_dir(root, 1, config, max_depth, min_depth, root_rules, ancestors, on_warning)


def _read_rules(directory: Path, on_warning: Optional[WarningCallback]) -> Optional[pathspec.PathSpec]:
    try:
        return load_ignore_rules(directory)
    except OSError as e:
        _warn(WalkWarning(directory, e), on_warning)
        return None


def _walk_dir(
    directory: Path,
    depth: int,
    config: WalkerConfig,
    max_depth: Optional[int],
    min_depth: int,
    rules: List[IgnoreRules],
    ancestors: Set[str],
    on_warning: Optional[WarningCallback],
) -> Iterator[WalkEntry]:
    try:
        with os.scandir(directory) as it:
            dir_entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        _warn(WalkWarning(directory, e), on_warning)
        return

    for dir_entry in dir_entries:
        path = directory / dir_entry.name

        if not config.include_hidden and is_hidden(dir_entry.name):
            continue

        try:
            is_symlink = dir_entry.is_symlink()
            if is_symlink and config.follow_symlinks and not os.path.exists(path):
                _warn(WalkWarning(path, "broken symbolic link"), on_warning)
                continue
            is_dir = dir_entry.is_dir(follow_symlinks=config.follow_symlinks)
        except OSError as e:
            _warn(WalkWarning(path, e), on_warning)
            continue

        if rules and is_ignored(path, is_dir, rules):
            logger.debug("Ignored by ignore file: %s", path)
            continue

        if depth >= min_depth:
            yield WalkEntry(path=path, depth=depth, is_dir=is_dir, is_symlink=is_symlink)

        if not is_dir or (max_depth is not None and depth >= max_depth):
            continue

        real = os.path.realpath(path)
        if real in ancestors:
            _warn(WalkWarning(path, f"file system loop found: {path} points to an ancestor {real}"), on_warning)
            continue

        child_rules = rules
        if config.honor_ignore_files:
            spec = _read_rules(path, on_warning)
            if spec is not None:
                child_rules = rules + [(path, spec)]

        ancestors.add(real)
        try:
            yield from _walk_dir(path, depth + 1, config, max_depth, min_depth,
                                 child_rules, ancestors, on_warning)
        finally:
            ancestors.discard(real)
