from pathlib import Path
from typing import List

import pytest

from fnr import Reporter


def make_tree(root: Path, entries: List[str]) -> Path:
    """Create files and directories (trailing "/") under root"""
    for entry in entries:
        path = root / entry
        if entry.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(entry, encoding="utf-8")
    return root


class RecordingReporter(Reporter):
    """Keeps every event for assertions"""

    def __init__(self):
        self.found = []
        self.renames = []
        self.failures = []
        self.rejections = []
        self.warnings = []
        self.empty = False
        self.quitted = False

    def match_found(self, path, new_name, is_dir):
        self.found.append((path, new_name, is_dir))

    def renamed(self, path, destination, is_dir):
        self.renames.append((path, destination))

    def rename_failed(self, error):
        self.failures.append(error)

    def rejected(self, match, error):
        self.rejections.append((match, error))

    def warning(self, warning):
        self.warnings.append(warning)

    def empty_batch(self, notice):
        self.empty = True
        self.notice = notice

    def quit(self):
        self.quitted = True


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def tree(tmp_path):
    def _tree(*entries):
        return make_tree(tmp_path, list(entries))
    return _tree
