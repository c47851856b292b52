"""
models_fs.py - Core Data Structure Definitions

Contains:
- Match: One filesystem entry selected for reporting or renaming
- WalkerConfig / PatternConfig / GlobConfig: Run configuration
- RenamePlan: Ordered batch plus rejected entries
- RenameResult: Outcome of applying a plan
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Tuple
from enum import Enum
import platform

from .errors import FnrError, RenameFailed


class EntryType(Enum):
    """Entry type filter"""
    FILE = "file"
    DIR = "dir"
    BOTH = "both"


class Decision(Enum):
    """Answer to an interactive rename prompt"""
    YES = "yes"
    NO = "no"
    ALL = "all"
    QUIT = "quit"


class ConfirmState(Enum):
    """State of the interactive driver between two prompts"""
    PROMPTING = "prompting"
    APPLY_REMAINING = "apply_remaining"


class ApplyMode(Enum):
    """How a rename batch is applied"""
    DRY_RUN = "dry_run"
    INTERACTIVE = "interactive"
    FORCED = "forced"


@dataclass(frozen=True)
class Match:
    """Entry selected for action, with its computed new name"""
    path: Path                      # Path at discovery time
    new_name: str                   # Final filename (no directory part)
    is_dir: bool                    # Entry kind at discovery time
    pattern: str = ""
    replacement: str = ""

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def destination(self) -> Path:
        """Parent directory joined with new_name"""
        return self.path.parent / self.new_name

    @property
    def depth(self) -> int:
        """Number of path components"""
        return len(self.path.parts)

    @property
    def is_unchanged(self) -> bool:
        return self.new_name == self.path.name


@dataclass
class WalkerConfig:
    """Tree walker options"""
    base_dir: Path = Path(".")
    recursive: bool = True
    max_depth: Optional[int] = None     # Root is depth 0, its children depth 1
    min_depth: Optional[int] = None
    include_hidden: bool = False
    follow_symlinks: bool = True
    honor_ignore_files: bool = True     # .gitignore / .ignore

    @property
    def effective_max_depth(self) -> Optional[int]:
        if not self.recursive:
            return 1 if self.max_depth is None else min(self.max_depth, 1)
        return self.max_depth

    @property
    def effective_min_depth(self) -> int:
        # The root itself is never a candidate
        return max(self.min_depth or 1, 1)


@dataclass
class PatternConfig:
    """Search / replace options"""
    pattern: str
    replacement: Optional[str] = None   # None means search mode
    regex: bool = False
    case_sensitive: bool = False

    @property
    def rename_mode(self) -> bool:
        return self.replacement is not None


@dataclass
class GlobConfig:
    """Glob filter options"""
    patterns: List[str] = field(default_factory=list)   # Empty matches everything
    entry_type: EntryType = EntryType.BOTH


@dataclass
class RenamePlan:
    """Batch of matches in application order"""
    ordered: List[Match] = field(default_factory=list)
    rejected: List[Tuple[Match, FnrError]] = field(default_factory=list)

    @property
    def valid_ops(self) -> List[Match]:
        """Matches that actually change a name"""
        return [m for m in self.ordered if not m.is_unchanged]

    @property
    def total_count(self) -> int:
        return len(self.valid_ops)

    @property
    def is_empty(self) -> bool:
        return not self.ordered and not self.rejected


@dataclass
class RenameResult:
    """Rename execution result"""
    renamed: List[Tuple[Match, Path]] = field(default_factory=list)
    failed: List[RenameFailed] = field(default_factory=list)
    skipped: List[Match] = field(default_factory=list)
    previewed: List[Match] = field(default_factory=list)
    quit: bool = False

    @property
    def success_count(self) -> int:
        return len(self.renamed)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Execution Result:",
            f"  - Renamed: {self.success_count}",
            f"  - Failed: {self.failed_count}",
            f"  - Skipped: {self.skipped_count}",
        ]
        if self.previewed:
            lines.append(f"  - Previewed: {len(self.previewed)}")
        if self.quit:
            lines.append("  - Stopped by user")
        if self.failed:
            lines.append("Failure Details:")
            for error in self.failed[:10]:  # Show at most 10
                lines.append(f"  - {error.source} -> {error.destination.name}: {error.cause}")
            if len(self.failed) > 10:
                lines.append(f"  ... and {len(self.failed) - 10} more failures")
        return "\n".join(lines)


def is_case_insensitive_fs() -> bool:
    """Detect if current filesystem is case-insensitive"""
    return platform.system() in ("Windows", "Darwin")


def normalize_for_comparison(path: str, case_insensitive: bool) -> str:
    """Normalize path for comparison"""
    if case_insensitive:
        return path.casefold()
    return path
