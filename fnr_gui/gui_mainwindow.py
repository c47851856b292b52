"""
gui_mainwindow.py - GUI Main Window

One search/rename form, a results table, and the engine's display and
decision interfaces implemented with Qt widgets.
"""

from pathlib import Path
from typing import Dict, List, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QCheckBox, QComboBox, QSpinBox,
    QTableWidget, QTableWidgetItem, QProgressBar, QFileDialog,
    QMessageBox, QHeaderView, QGroupBox
)
from PySide6.QtCore import Slot
from PySide6.QtGui import QColor

from fnr import (
    Match, RenameResult, WalkerConfig, GlobConfig, PatternConfig,
    EntryType, ApplyMode, Decision, DecisionSource, Reporter,
    plan_batch, apply_plan
)
from .gui_workers import CollectWorker


MODE_CHOICES = [
    ("Interactive", ApplyMode.INTERACTIVE),
    ("Dry Run", ApplyMode.DRY_RUN),
    ("Apply All", ApplyMode.FORCED),
]

TYPE_CHOICES = [
    ("Files and Directories", EntryType.BOTH),
    ("Files Only", EntryType.FILE),
    ("Directories Only", EntryType.DIR),
]


class MessageBoxDecisions(DecisionSource):
    """Asks Yes / No / Yes to All / Abort before each rename"""

    BUTTONS = {
        QMessageBox.StandardButton.Yes: Decision.YES,
        QMessageBox.StandardButton.No: Decision.NO,
        QMessageBox.StandardButton.YesToAll: Decision.ALL,
        QMessageBox.StandardButton.Abort: Decision.QUIT,
    }

    def __init__(self, parent: QWidget):
        self.parent = parent

    def decide(self, match: Match) -> Decision:
        box = QMessageBox(self.parent)
        box.setWindowTitle("Confirm")
        box.setText(f"Rename {'directory' if match.is_dir else 'file'}?\n\n"
                    f"    {match.path}\n -> {match.destination}")
        box.setStandardButtons(
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No |
            QMessageBox.StandardButton.YesToAll | QMessageBox.StandardButton.Abort
        )
        box.setDefaultButton(QMessageBox.StandardButton.Yes)
        box.setEscapeButton(QMessageBox.StandardButton.Abort)
        reply = box.exec()
        return self.BUTTONS.get(QMessageBox.StandardButton(reply), Decision.QUIT)


class TableReporter(Reporter):
    """Writes rename outcomes into the status column"""

    def __init__(self, window: "MainWindow"):
        self.window = window

    def renamed(self, path, destination, is_dir):
        self.window.set_status(path, "Renamed", QColor(0, 150, 0))

    def rename_failed(self, error):
        self.window.set_status(error.source, f"Failed: {error.cause}", QColor(200, 0, 0))

    def rejected(self, match, error):
        self.window.set_status(match.path, f"Rejected: {error}", QColor(200, 150, 0))

    def match_found(self, path, new_name, is_dir):
        self.window.set_status(path, "Would Rename", QColor(0, 100, 200))

    def quit(self):
        self.window.status_label.setText("Stopped, remaining entries left untouched")


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("fnr - Search and Rename")
        self.setMinimumSize(900, 650)

        self.matches: List[Match] = []
        self.rows: Dict[Path, int] = {}
        self.warnings: List[str] = []
        self.collect_worker: Optional[CollectWorker] = None
        self.rename_mode = False

        central = QWidget()
        self.setCentralWidget(central)
        self._init_ui(central)

        # Status bar
        self.statusBar().showMessage("Ready")

    def _init_ui(self, central: QWidget):
        layout = QVBoxLayout(central)

        # Search settings group
        search_group = QGroupBox("Search Settings")
        search_layout = QGridLayout(search_group)

        search_layout.addWidget(QLabel("Directory:"), 0, 0)
        self.dir_edit = QLineEdit()
        self.dir_edit.setPlaceholderText("Select base directory...")
        search_layout.addWidget(self.dir_edit, 0, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse_directory)
        search_layout.addWidget(self.browse_btn, 0, 2)

        search_layout.addWidget(QLabel("Pattern:"), 1, 0)
        self.pattern_edit = QLineEdit()
        self.pattern_edit.setPlaceholderText("Text, foo*.txt, or a regex")
        search_layout.addWidget(self.pattern_edit, 1, 1, 1, 2)

        self.replace_check = QCheckBox("Replace with:")
        self.replace_check.toggled.connect(self._on_replace_toggled)
        search_layout.addWidget(self.replace_check, 2, 0)
        self.replace_edit = QLineEdit()
        self.replace_edit.setPlaceholderText("Replacement ($1 / ${name} in regex mode)")
        self.replace_edit.setEnabled(False)
        search_layout.addWidget(self.replace_edit, 2, 1, 1, 2)

        search_layout.addWidget(QLabel("Globs:"), 3, 0)
        self.glob_edit = QLineEdit()
        self.glob_edit.setPlaceholderText("e.g. *.txt !build/** (leave empty to match all)")
        search_layout.addWidget(self.glob_edit, 3, 1, 1, 2)

        # Options
        options_layout = QHBoxLayout()
        self.regex_check = QCheckBox("Regex")
        self.case_check = QCheckBox("Case Sensitive")
        self.recursive_check = QCheckBox("Recursive")
        self.recursive_check.setChecked(True)
        self.hidden_check = QCheckBox("Include Hidden")
        self.symlink_check = QCheckBox("Follow Symlinks")
        self.symlink_check.setChecked(True)
        self.ignore_check = QCheckBox("Honor .gitignore")
        self.ignore_check.setChecked(True)
        for check in (self.regex_check, self.case_check, self.recursive_check,
                      self.hidden_check, self.symlink_check, self.ignore_check):
            options_layout.addWidget(check)
        options_layout.addStretch()
        search_layout.addLayout(options_layout, 4, 0, 1, 3)

        filter_layout = QHBoxLayout()
        filter_layout.addWidget(QLabel("Max Depth:"))
        self.depth_spin = QSpinBox()
        self.depth_spin.setRange(0, 999)
        self.depth_spin.setSpecialValueText("Unlimited")
        filter_layout.addWidget(self.depth_spin)
        filter_layout.addWidget(QLabel("Type:"))
        self.type_combo = QComboBox()
        for label, _ in TYPE_CHOICES:
            self.type_combo.addItem(label)
        filter_layout.addWidget(self.type_combo)
        filter_layout.addWidget(QLabel("Mode:"))
        self.mode_combo = QComboBox()
        for label, _ in MODE_CHOICES:
            self.mode_combo.addItem(label)
        filter_layout.addWidget(self.mode_combo)
        filter_layout.addStretch()
        search_layout.addLayout(filter_layout, 5, 0, 1, 3)

        self.search_btn = QPushButton("Search")
        self.search_btn.clicked.connect(self._do_search)
        search_layout.addWidget(self.search_btn, 6, 0, 1, 3)

        layout.addWidget(search_group)

        # Results table
        self.table = QTableWidget()
        self.table.setColumnCount(5)
        self.table.setHorizontalHeaderLabels(["Original Name", "New Name", "Type", "Status", "Path"])
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(3, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(4, QHeaderView.ResizeMode.Stretch)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        layout.addWidget(self.table, 1)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.execute_btn = QPushButton("Execute Rename")
        self.execute_btn.clicked.connect(self._do_execute)
        self.execute_btn.setEnabled(False)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)

        layout.addLayout(bottom_layout)

        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def _browse_directory(self):
        """Browse and select directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Directory")
        if directory:
            self.dir_edit.setText(directory)

    @Slot(bool)
    def _on_replace_toggled(self, checked: bool):
        self.replace_edit.setEnabled(checked)

    def _configs(self):
        """Build engine configuration from the form"""
        max_depth = self.depth_spin.value() or None
        walker_config = WalkerConfig(
            base_dir=Path(self.dir_edit.text().strip()),
            recursive=self.recursive_check.isChecked(),
            max_depth=max_depth,
            include_hidden=self.hidden_check.isChecked(),
            follow_symlinks=self.symlink_check.isChecked(),
            honor_ignore_files=self.ignore_check.isChecked(),
        )
        glob_config = GlobConfig(
            patterns=self.glob_edit.text().split(),
            entry_type=TYPE_CHOICES[self.type_combo.currentIndex()][1],
        )
        pattern_config = PatternConfig(
            pattern=self.pattern_edit.text(),
            replacement=self.replace_edit.text() if self.replace_check.isChecked() else None,
            regex=self.regex_check.isChecked(),
            case_sensitive=self.case_check.isChecked(),
        )
        return walker_config, glob_config, pattern_config

    def _do_search(self):
        """Execute search"""
        directory = self.dir_edit.text().strip()
        if not directory:
            QMessageBox.warning(self, "Warning", "Please select a directory first")
            return

        if not Path(directory).is_dir():
            QMessageBox.warning(self, "Warning", f"Directory does not exist: {directory}")
            return

        walker_config, glob_config, pattern_config = self._configs()
        self.rename_mode = pattern_config.rename_mode
        self.warnings = []

        self.search_btn.setEnabled(False)
        self.search_btn.setText("Searching...")
        self.execute_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, 0)  # Indeterminate progress

        self.collect_worker = CollectWorker(walker_config, glob_config, pattern_config)
        self.collect_worker.warning.connect(self._on_collect_warning)
        self.collect_worker.finished.connect(self._on_collect_finished)
        self.collect_worker.error.connect(self._on_collect_error)
        self.collect_worker.start()

    @Slot(str)
    def _on_collect_warning(self, msg: str):
        self.warnings.append(msg)
        self.statusBar().showMessage(f"Warning: {msg}")

    @Slot(list)
    def _on_collect_finished(self, matches: List[Match]):
        """Collection complete"""
        self.matches = matches
        self.search_btn.setEnabled(True)
        self.search_btn.setText("Search")
        self.progress_bar.setVisible(False)

        self._update_table()

        if not matches:
            self.status_label.setText("No matches found")
            return

        summary = f"Found {len(matches)} matches"
        if self.warnings:
            summary += f" ({len(self.warnings)} entries skipped)"
        self.status_label.setText(summary)
        self.execute_btn.setEnabled(self.rename_mode)

    @Slot(str)
    def _on_collect_error(self, error: str):
        self.search_btn.setEnabled(True)
        self.search_btn.setText("Search")
        self.progress_bar.setVisible(False)
        QMessageBox.critical(self, "Error", f"Search failed: {error}")

    def _update_table(self):
        """Display collected matches"""
        self.table.setRowCount(len(self.matches))
        self.rows = {}

        for i, m in enumerate(self.matches):
            self.rows[m.path] = i
            self.table.setItem(i, 0, QTableWidgetItem(m.name))
            self.table.setItem(i, 1, QTableWidgetItem(m.new_name if self.rename_mode else ""))
            self.table.setItem(i, 2, QTableWidgetItem("Dir" if m.is_dir else "File"))
            if self.rename_mode and m.is_unchanged:
                status = QTableWidgetItem("No Change")
                status.setForeground(QColor(150, 150, 150))
            else:
                status = QTableWidgetItem("")
            self.table.setItem(i, 3, status)
            self.table.setItem(i, 4, QTableWidgetItem(str(m.path.parent)))

    def set_status(self, path: Path, text: str, color: QColor):
        row = self.rows.get(path)
        if row is None:
            return
        item = QTableWidgetItem(text)
        item.setForeground(color)
        self.table.setItem(row, 3, item)

    def _do_execute(self):
        """Plan and apply the batch"""
        if not self.matches:
            return

        mode = MODE_CHOICES[self.mode_combo.currentIndex()][1]
        plan = plan_batch(self.matches)

        if mode == ApplyMode.FORCED:
            reply = QMessageBox.question(
                self, "Confirm",
                f"Are you sure you want to execute {plan.total_count} rename operations?\n\nThis action cannot be undone!",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
            )
            if reply != QMessageBox.StandardButton.Yes:
                return

        self.execute_btn.setEnabled(False)
        self.search_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, max(len(plan.ordered), 1))

        result = apply_plan(
            plan,
            mode,
            reporter=TableReporter(self),
            decisions=MessageBoxDecisions(self),
            progress_callback=self._on_rename_progress,
        )
        self._on_rename_finished(result, mode)

    def _on_rename_progress(self, current: int, total: int, msg: str):
        """Execution progress update"""
        self.progress_bar.setValue(current)
        self.status_label.setText(msg)

    def _on_rename_finished(self, result: RenameResult, mode: ApplyMode):
        """Execution complete"""
        self.search_btn.setEnabled(True)
        self.progress_bar.setVisible(False)

        if mode == ApplyMode.DRY_RUN:
            self.execute_btn.setEnabled(True)
            self.status_label.setText(f"Dry run: {len(result.previewed)} entries would be renamed")
            return

        QMessageBox.information(self, "Complete", result.summary())

        # Paths in the table are stale now; search again to continue
        self.matches = []
        self.status_label.setText("Stopped by user" if result.quit else "Complete")
