"""
gui_workers.py - GUI Worker Threads

Collection runs in the background so the window stays responsive. Renames
are applied in the GUI thread, one at a time, so interactive prompts can
block between steps.
"""

from typing import Optional

from PySide6.QtCore import QThread, Signal, QObject

from fnr import (
    collect, WalkerConfig, GlobConfig, PatternConfig, WalkWarning
)


class CollectWorker(QThread):
    """Match collection worker thread"""

    # Signals
    warning = Signal(str)           # Skipped entry
    finished = Signal(list)         # Complete, returns match list
    error = Signal(str)             # Error message

    def __init__(
        self,
        walker_config: WalkerConfig,
        glob_config: GlobConfig,
        pattern_config: PatternConfig,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.walker_config = walker_config
        self.glob_config = glob_config
        self.pattern_config = pattern_config

    def run(self):
        try:
            def on_warning(w: WalkWarning):
                self.warning.emit(str(w))

            matches = collect(
                self.walker_config,
                self.glob_config,
                self.pattern_config,
                on_warning=on_warning,
            )

            self.finished.emit(matches)
        except Exception as e:
            self.error.emit(str(e))
