"""
collaborators.py - Display and Decision Interfaces

The engine never prints or reads keys itself. It reports through a Reporter
and asks a DecisionSource before each interactive rename.
"""

from pathlib import Path
from typing import Iterable, List
import logging

from .errors import EmptyBatch, FnrError, RenameFailed, WalkWarning
from .models_fs import Decision, Match

logger = logging.getLogger(__name__)


class Reporter:
    """Display callback; every hook is a no-op by default"""

    def match_found(self, path: Path, new_name: str, is_dir: bool) -> None:
        pass

    def renamed(self, path: Path, destination: Path, is_dir: bool) -> None:
        pass

    def rename_failed(self, error: RenameFailed) -> None:
        pass

    def rejected(self, match: Match, error: FnrError) -> None:
        pass

    def warning(self, warning: WalkWarning) -> None:
        pass

    def empty_batch(self, notice: EmptyBatch) -> None:
        pass

    def quit(self) -> None:
        pass


class LoggingReporter(Reporter):
    """Reporter writing every event to the log"""

    def match_found(self, path, new_name, is_dir):
        kind = "d" if is_dir else "f"
        if new_name == path.name:
            logger.info("[%s] %s", kind, path)
        else:
            logger.info("    %s\n -> %s", path, path.parent / new_name)

    def renamed(self, path, destination, is_dir):
        logger.info("Renamed: %s -> %s", path, destination)

    def rename_failed(self, error):
        logger.error("%s", error)

    def rejected(self, match, error):
        logger.warning("Skipped: %s", error)

    def warning(self, warning):
        logger.warning("Warning: %s", warning)

    def empty_batch(self, notice):
        logger.info("%s", notice)

    def quit(self):
        logger.info("Stopped, remaining entries left untouched.")


class DecisionSource:
    """Blocking source of interactive answers"""

    def decide(self, match: Match) -> Decision:
        raise NotImplementedError


class AlwaysDecide(DecisionSource):
    """Answers every prompt the same way"""

    def __init__(self, decision: Decision):
        self.decision = decision

    def decide(self, match):
        return self.decision


class ScriptedDecisions(DecisionSource):
    """
    Replays a fixed list of answers, for tests and headless runs

    Once the script runs out every further prompt is answered with QUIT.
    """

    def __init__(self, decisions: Iterable[Decision]):
        self._pending: List[Decision] = list(decisions)
        self.asked: List[Match] = []

    def decide(self, match):
        self.asked.append(match)
        if not self._pending:
            return Decision.QUIT
        return self._pending.pop(0)
