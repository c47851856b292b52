"""
glob_filter.py - Glob Filter

Compiles the user's glob expressions with gitignore-style wildmatch and tests
each walked entry once, then applies the file/dir type filter.

Unlike an ignore file, a glob that matches a directory does not select the
entries beneath it: "*.txt" keeps "notes.txt" but not "notes.txt/inner.md".
"""

from pathlib import Path
from typing import List

import pathspec

from .errors import InvalidPattern
from .models_fs import EntryType, GlobConfig
from .scan_files import WalkEntry

MATCH_ALL = "**/*"

# Named group pathspec sets when a pattern matched through a directory
DIR_MARK = "ps_d"


def build_glob_lines(patterns: List[str]) -> List[str]:
    """
    Normalize the glob list

    Empty means match everything. A list made only of negations ("!target/**")
    excludes from everything, so a match-all line goes in front.
    """
    patterns = [p for p in patterns if p.strip()]
    if not patterns:
        return [MATCH_ALL]
    if all(p.startswith("!") for p in patterns):
        return [MATCH_ALL] + patterns
    return list(patterns)


def own_match(pattern: pathspec.RegexPattern, rel_path: str, is_dir: bool) -> bool:
    """
    Whether pattern matches rel_path itself, not one of its parent directories

    Directories are tried a second time with a trailing "/" so that
    directory-only globs ("build/") select them.
    """
    found = pattern.match_file(rel_path)
    if found is not None and found.match.groupdict().get(DIR_MARK) is None:
        return True
    if not is_dir:
        return False

    found = pattern.match_file(rel_path + "/")
    if found is None or found.match.groupdict().get(DIR_MARK) is None:
        return False
    return found.match.start(DIR_MARK) == len(rel_path)


class GlobFilter:
    """Membership test against a compiled glob set"""

    def __init__(self, config: GlobConfig):
        self.config = config
        self.lines = build_glob_lines(config.patterns)
        try:
            self.spec = pathspec.GitIgnoreSpec.from_lines(self.lines)
        except ValueError as e:
            raise InvalidPattern(f"Invalid glob pattern: {e}") from e
        self.patterns = [p for p in self.spec.patterns if p.include is not None]

    def matches_path(self, rel_path: str, is_dir: bool = False) -> bool:
        """The last glob matching the path decides; negations exclude"""
        selected = False
        for pattern in self.patterns:
            if own_match(pattern, rel_path, is_dir):
                selected = pattern.include
        return selected

    def matches_type(self, is_dir: bool) -> bool:
        entry_type = self.config.entry_type
        if entry_type == EntryType.FILE:
            return not is_dir
        if entry_type == EntryType.DIR:
            return is_dir
        return True

    def accepts(self, entry: WalkEntry, base_dir: Path) -> bool:
        """Glob test on the path relative to base_dir, then the type test"""
        try:
            rel = entry.path.relative_to(base_dir).as_posix()
        except ValueError:
            rel = entry.path.as_posix()
        if not self.matches_path(rel, entry.is_dir):
            return False
        return self.matches_type(entry.is_dir)
