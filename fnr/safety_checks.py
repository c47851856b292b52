"""
safety_checks.py - Safety Check Module

Checks run before a batch is applied: new names must stay plain filenames,
destinations must not collide, and a rename must not overwrite an existing
entry.
"""

from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import os

from .errors import DestinationCollision, InvalidNewName
from .models_fs import Match, normalize_for_comparison

SEPARATORS = tuple(s for s in ("/", os.sep, os.altsep) if s)


def check_new_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Check that a computed name is a single path component

    Args:
        name: New filename

    Returns:
        (is_valid, error_reason)
    """
    if not name:
        return False, "New name is empty"

    if name in (".", ".."):
        return False, f"New name is a special directory entry: {name}"

    for sep in SEPARATORS:
        if sep in name:
            return False, f"New name contains path separator: {sep}"

    if "\0" in name:
        return False, "New name contains a NUL character"

    return True, None


def find_collisions(matches: List[Match], case_insensitive: bool) -> List[DestinationCollision]:
    """
    Find matches sharing a destination with another match

    Every member of a colliding group is reported. Unchanged names take part
    too, since they keep their path occupied.
    """
    by_dst: Dict[str, List[Match]] = defaultdict(list)
    for m in matches:
        key = normalize_for_comparison(str(m.destination), case_insensitive)
        by_dst[key].append(m)

    collisions = []
    for group in by_dst.values():
        if len(group) < 2:
            continue
        for m in group:
            collisions.append(DestinationCollision(m.path, m.destination, len(group) - 1))
    return collisions


def invalid_names(matches: List[Match]) -> List[InvalidNewName]:
    errors = []
    for m in matches:
        valid, reason = check_new_name(m.new_name)
        if not valid:
            errors.append(InvalidNewName(m.path, m.new_name, reason))
    return errors


def destination_taken(src: Path, dst: Path) -> bool:
    """
    Whether dst is occupied by an entry other than src

    A case-only rename on a case-insensitive filesystem sees dst "exist" as
    src itself, that is not a conflict.
    """
    if not os.path.lexists(dst):
        return False
    try:
        return not os.path.samefile(src, dst)
    except OSError:
        return True
