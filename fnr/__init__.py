"""
fnr - File and directory name search and rename engine

Collects matching entries under a base directory, computes their new names
and applies the renames in an order that never moves a pending entry.
"""

from .models_fs import (
    Match,
    WalkerConfig,
    PatternConfig,
    GlobConfig,
    RenamePlan,
    RenameResult,
    EntryType,
    Decision,
    ConfirmState,
    ApplyMode,
)

from .errors import (
    FnrError,
    InvalidPattern,
    InvalidPathError,
    WalkWarning,
    RenameFailed,
    InvalidNewName,
    DestinationCollision,
    EmptyBatch,
)

from .text_match import (
    Matcher,
    match,
    matches_only,
)

from .scan_files import (
    WalkEntry,
    walk_entries,
)

from .glob_filter import GlobFilter

from .collect_matches import (
    collect,
    iter_matches,
)

from .sort_rules import order_matches

from .plan_rename import plan_batch

from .exec_rename import (
    apply_plan,
    rename_one,
)

from .collaborators import (
    Reporter,
    LoggingReporter,
    DecisionSource,
    AlwaysDecide,
    ScriptedDecisions,
)

from .pipeline import run

__version__ = "1.0.0"

__all__ = [
    # Data models
    "Match",
    "WalkerConfig",
    "PatternConfig",
    "GlobConfig",
    "RenamePlan",
    "RenameResult",
    "EntryType",
    "Decision",
    "ConfirmState",
    "ApplyMode",

    # Errors
    "FnrError",
    "InvalidPattern",
    "InvalidPathError",
    "WalkWarning",
    "RenameFailed",
    "InvalidNewName",
    "DestinationCollision",
    "EmptyBatch",

    # Matching
    "Matcher",
    "match",
    "matches_only",

    # Walking and filtering
    "WalkEntry",
    "walk_entries",
    "GlobFilter",

    # Collection
    "collect",
    "iter_matches",

    # Sequencing
    "order_matches",
    "plan_batch",
    "apply_plan",
    "rename_one",

    # Collaborators
    "Reporter",
    "LoggingReporter",
    "DecisionSource",
    "AlwaysDecide",
    "ScriptedDecisions",

    # Run
    "run",
]
