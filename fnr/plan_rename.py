"""
plan_rename.py - Rename Plan Generation

Validates a collected batch and puts it in application order.
"""

from pathlib import Path
from typing import Dict, List, Optional
import logging

from .errors import FnrError
from .models_fs import Match, RenamePlan, is_case_insensitive_fs
from .safety_checks import find_collisions, invalid_names
from .sort_rules import order_matches

logger = logging.getLogger(__name__)


def plan_batch(matches: List[Match], case_insensitive: Optional[bool] = None) -> RenamePlan:
    """
    Generate the rename plan for one batch

    Matches whose new name is not a plain filename, or whose destination is
    shared with another match, are rejected individually; the rest is ordered
    files first, then directories deepest first.

    Args:
        matches: Collected matches, any order
        case_insensitive: Compare destinations case-insensitively
            (defaults to the platform's filesystem behaviour)

    Returns:
        Rename plan
    """
    if case_insensitive is None:
        case_insensitive = is_case_insensitive_fs()

    # Paths are unique within one collection pass
    rejections: Dict[Path, FnrError] = {}
    for error in invalid_names(matches):
        rejections[error.source] = error

    # A name with a separator has no meaningful destination to collide on
    candidates = [m for m in matches if m.path not in rejections]
    for error in find_collisions(candidates, case_insensitive):
        rejections[error.source] = error

    plan = RenamePlan()
    for m in matches:
        error = rejections.get(m.path)
        if error is not None:
            logger.warning("Rejected: %s", error)
            plan.rejected.append((m, error))

    plan.ordered = order_matches([m for m in matches if m.path not in rejections])
    return plan
