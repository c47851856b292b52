"""
pipeline.py - Search / Rename Run

Search mode reports every match. Rename mode collects, plans and applies.
Pattern and glob errors surface before anything on disk is touched.
"""

from pathlib import Path
from typing import Optional
import logging

from .collaborators import DecisionSource, Reporter
from .collect_matches import collect
from .errors import EmptyBatch
from .exec_rename import apply_plan
from .models_fs import ApplyMode, GlobConfig, PatternConfig, RenameResult, WalkerConfig
from .plan_rename import plan_batch

logger = logging.getLogger(__name__)


def run(
    walker_config: WalkerConfig,
    glob_config: GlobConfig,
    pattern_config: PatternConfig,
    mode: ApplyMode = ApplyMode.INTERACTIVE,
    reporter: Optional[Reporter] = None,
    decisions: Optional[DecisionSource] = None,
    log_dir: Optional[Path] = None,
) -> RenameResult:
    """
    Run one search or rename batch

    Args:
        walker_config: Traversal options
        glob_config: Glob expressions and entry type filter
        pattern_config: Pattern; a replacement switches to rename mode
        mode: How renames are applied (ignored in search mode)
        reporter: Display callback
        decisions: Decision source for interactive mode
        log_dir: Directory for the JSON journal

    Returns:
        Execution result (search results are listed in previewed)
    """
    if reporter is None:
        reporter = Reporter()

    matches = collect(walker_config, glob_config, pattern_config, on_warning=reporter.warning)

    if not pattern_config.rename_mode:
        result = RenameResult()
        for m in matches:
            reporter.match_found(m.path, m.new_name, m.is_dir)
            result.previewed.append(m)
        return result

    if not matches:
        notice = EmptyBatch(f"No matches found under {walker_config.base_dir}")
        logger.info("%s", notice)
        reporter.empty_batch(notice)
        return RenameResult()

    plan = plan_batch(matches)
    return apply_plan(plan, mode, reporter, decisions, log_dir=log_dir)
