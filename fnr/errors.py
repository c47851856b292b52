"""
errors.py - Error Kinds

Configuration errors (InvalidPattern, InvalidPathError) abort a run before
anything is touched. Per-entry errors (WalkWarning, RenameFailed and the
batch validation rejections) are reported and the batch carries on.
"""

from pathlib import Path
from typing import Optional


class FnrError(Exception):
    """Base error for the project."""


class InvalidPattern(FnrError):
    """Regex or glob expression that does not compile."""


class InvalidPathError(FnrError):
    pass


class WalkWarning(FnrError):
    """An entry could not be read or traversed; it is skipped."""

    def __init__(self, path: Path, cause: object):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class RenameFailed(FnrError):
    """A single rename failed."""

    def __init__(self, source: Path, destination: Path, cause: Optional[BaseException]):
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(f"Failed to rename {source} to {destination}: {cause}")


class InvalidNewName(FnrError):
    """Substitution produced something that is not a plain filename."""

    def __init__(self, source: Path, new_name: str, reason: str):
        self.source = source
        self.new_name = new_name
        self.reason = reason
        super().__init__(f"{source} -> {new_name!r}: {reason}")


class DestinationCollision(FnrError):
    """Several matches in one batch would land on the same path."""

    def __init__(self, source: Path, destination: Path, others: int):
        self.source = source
        self.destination = destination
        self.others = others
        super().__init__(
            f"{source} -> {destination}: destination shared with {others} other match(es)"
        )


class EmptyBatch(FnrError):
    """No matches found. Delivered as a notice, never raised."""
