"""
exec_rename.py - Rename Execution Module

Responsibilities:
- Apply an ordered plan one rename at a time (dry-run, interactive, forced)
- Per-entry failure handling: a failed rename is reported, the batch goes on
- Optional JSON journal of the plan and the result
"""

from pathlib import Path
from typing import Callable, Optional
from datetime import datetime
import errno
import json
import logging
import os

from .collaborators import DecisionSource, Reporter
from .errors import RenameFailed
from .models_fs import ApplyMode, ConfirmState, Decision, Match, RenamePlan, RenameResult
from .safety_checks import destination_taken

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


def rename_one(match: Match) -> Path:
    """
    Rename match.path to its parent joined with match.new_name

    Returns:
        Destination path

    Raises:
        RenameFailed: Destination occupied, or the rename itself failed
    """
    src = match.path
    dst = match.destination

    if destination_taken(src, dst):
        cause = FileExistsError(errno.EEXIST, "Destination already exists", str(dst))
        raise RenameFailed(src, dst, cause)

    try:
        os.rename(src, dst)
    except OSError as e:
        raise RenameFailed(src, dst, e) from e

    return dst


def _apply_one(match: Match, reporter: Reporter, result: RenameResult) -> None:
    if match.is_unchanged:
        result.skipped.append(match)
        return

    try:
        dst = rename_one(match)
    except RenameFailed as e:
        logger.warning("%s", e)
        result.failed.append(e)
        reporter.rename_failed(e)
        return

    logger.info("Renamed: %s -> %s", match.path, dst)
    result.renamed.append((match, dst))
    reporter.renamed(match.path, dst, match.is_dir)


def _ask(decisions: DecisionSource, match: Match) -> Decision:
    try:
        return decisions.decide(match)
    except KeyboardInterrupt:
        # Ctrl-C at the prompt
        return Decision.QUIT


def apply_interactive(
    plan: RenamePlan,
    reporter: Reporter,
    decisions: DecisionSource,
    result: RenameResult,
    progress_callback: Optional[ProgressCallback] = None
) -> RenameResult:
    """Prompt before each rename until ALL or QUIT"""
    state = ConfirmState.PROMPTING
    total = len(plan.ordered)

    for i, match in enumerate(plan.ordered):
        if progress_callback:
            progress_callback(i + 1, total, f"{match.path.name} -> {match.new_name}")

        if match.is_unchanged:
            result.skipped.append(match)
            continue

        if state == ConfirmState.PROMPTING:
            decision = _ask(decisions, match)
            if decision == Decision.QUIT:
                result.quit = True
                reporter.quit()
                break
            if decision == Decision.NO:
                result.skipped.append(match)
                continue
            if decision == Decision.ALL:
                state = ConfirmState.APPLY_REMAINING

        _apply_one(match, reporter, result)

    return result


def apply_plan(
    plan: RenamePlan,
    mode: ApplyMode = ApplyMode.INTERACTIVE,
    reporter: Optional[Reporter] = None,
    decisions: Optional[DecisionSource] = None,
    log_dir: Optional[Path] = None,
    progress_callback: Optional[ProgressCallback] = None
) -> RenameResult:
    """
    Apply a rename plan in its order

    Args:
        plan: Ordered plan from plan_batch()
        mode: Dry-run, interactive or forced
        reporter: Display callback
        decisions: Required in interactive mode
        log_dir: Write a JSON journal there (not in dry-run)
        progress_callback: Progress callback (current, total, message)

    Returns:
        Execution result
    """
    if reporter is None:
        reporter = Reporter()
    if mode == ApplyMode.INTERACTIVE and decisions is None:
        raise ValueError("Interactive mode needs a decision source")

    result = RenameResult()
    if plan.is_empty:
        logger.info("Nothing to rename")
        return result

    for match, error in plan.rejected:
        reporter.rejected(match, error)

    if mode == ApplyMode.DRY_RUN:
        for match in plan.ordered:
            reporter.match_found(match.path, match.new_name, match.is_dir)
            result.previewed.append(match)
        return result

    if log_dir:
        save_plan_log(plan, log_dir)

    if mode == ApplyMode.INTERACTIVE:
        apply_interactive(plan, reporter, decisions, result, progress_callback)
    else:
        total = len(plan.ordered)
        for i, match in enumerate(plan.ordered):
            if progress_callback:
                progress_callback(i + 1, total, f"{match.path.name} -> {match.new_name}")
            _apply_one(match, reporter, result)

    logger.info("%s", result.summary())
    if log_dir:
        save_result_log(result, log_dir)

    return result


def save_plan_log(plan: RenamePlan, log_dir: Path) -> Path:
    """Save execution plan log"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"rename_plan_{timestamp}.json"

    data = {
        "timestamp": timestamp,
        "total_ops": plan.total_count,
        "operations": [
            {
                "src": str(m.path),
                "dst": str(m.destination),
                "is_dir": m.is_dir,
            }
            for m in plan.valid_ops
        ],
        "rejected": [
            {"src": str(m.path), "new_name": m.new_name, "error": str(error)}
            for m, error in plan.rejected
        ],
    }

    with open(log_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return log_file


def save_result_log(result: RenameResult, log_dir: Path) -> Path:
    """Save execution result log"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"rename_result_{timestamp}.json"

    data = {
        "timestamp": timestamp,
        "success_count": result.success_count,
        "failed_count": result.failed_count,
        "skipped_count": result.skipped_count,
        "quit": result.quit,
        "success": [
            {"src": str(m.path), "dst": str(dst)}
            for m, dst in result.renamed
        ],
        "failed": [
            {"src": str(e.source), "dst": str(e.destination), "error": str(e.cause)}
            for e in result.failed
        ],
        "skipped": [
            {"src": str(m.path), "new_name": m.new_name}
            for m in result.skipped
        ]
    }

    with open(log_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return log_file
