# auditor_tools/gui/log_viewer.py

from PySide6.QtCore import Signal, Slot
from PySide6.QtWidgets import (
    QAbstractItemView, QComboBox, QHBoxLayout, QHeaderView, QLabel, QPushButton, QTableView, QVBoxLayout, QWidget
)

from auditor_tools.core.event_log import Severity
from .log_model import LogModel
from .log_panel import IncrementalLogView
from .resources import ICON_SIZE, get_icon

LEVEL_CHOICES = [("Info", Severity.INFO), ("Warning", Severity.WARNING), ("Error", Severity.ERROR)]


class LogTable(QTableView):
    """Read-only table view over a LogModel that follows the model's scroll requests."""

    def __init__(self, model: LogModel, parent=None):
        super().__init__(parent)
        self.setModel(model)
        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setWordWrap(False)
        self.setShowGrid(False)

        header = self.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(2, QHeaderView.ResizeToContents)
        # The message column takes the remaining width.
        header.setSectionResizeMode(3, QHeaderView.Stretch)
        self.verticalHeader().hide()

        model.scroll_requested.connect(self.scrollToBottom)


class LogViewer(QWidget):
    """
    The log panel: a severity filter, a Clear button and the log table.

    The widget never filters anything itself. It reports the user's choices
    through its signals, and the IncrementalLogView in `self.view` renders the
    shared state into the model.
    """
    threshold_changed = Signal(str)
    clear_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.model = LogModel(self)
        self.view = IncrementalLogView(self.model)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        header_layout = QHBoxLayout()
        title = QLabel("Logs")
        title.setObjectName("SectionTitle")
        self.level_combo = QComboBox()
        for label, severity in LEVEL_CHOICES:
            self.level_combo.addItem(label, severity.value)
        self.clear_button = QPushButton(" Clear")
        self.clear_button.setIcon(get_icon("clear"))
        self.clear_button.setIconSize(ICON_SIZE)

        header_layout.addWidget(title)
        header_layout.addWidget(self.level_combo)
        header_layout.addStretch()
        header_layout.addWidget(self.clear_button)

        self.table = LogTable(self.model)
        layout.addLayout(header_layout)
        layout.addWidget(self.table)

        self.level_combo.currentIndexChanged.connect(self._on_level_changed)
        self.clear_button.clicked.connect(self.clear_requested)

    @Slot(int)
    def _on_level_changed(self, index: int):
        self.threshold_changed.emit(self.level_combo.itemData(index))

    def sync_threshold(self, threshold: Severity):
        """Moves the combo to `threshold` without emitting threshold_changed."""
        index = self.level_combo.findData(threshold.value)
        if index >= 0 and index != self.level_combo.currentIndex():
            self.level_combo.blockSignals(True)
            self.level_combo.setCurrentIndex(index)
            self.level_combo.blockSignals(False)
