# auditor_tools/gui/log_model.py

from typing import List, Optional, Sequence

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal
from PySide6.QtGui import QColor, QFont

from auditor_tools.core.event_log import Severity
from .log_panel import LogLine
from .resources import get_icon

SEVERITY_ICONS = {Severity.ERROR: "error", Severity.WARNING: "warning", Severity.INFO: "info"}
SEVERITY_COLORS = {Severity.ERROR: "#BF616A", Severity.WARNING: "#EBCB8B", Severity.INFO: "#88C0D0"}


class LogModel(QAbstractTableModel):
    """
    The Qt render target of the log panel. Rows are LogLine nodes; the empty-state
    placeholder, when shown, is an extra row after the last node.

    Appends go through beginInsertRows/endInsertRows so the view only lays out the
    new rows; a full render is a model reset.
    """
    scroll_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._nodes: List[LogLine] = []
        self._placeholder: Optional[str] = None
        self._headers = ["", "Time", "Level", "Message"]
        self._icons = {severity: get_icon(name) for severity, name in SEVERITY_ICONS.items()}

    # --- QAbstractTableModel ---

    def rowCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self._nodes) + (1 if self._placeholder is not None else 0)

    def columnCount(self, parent=QModelIndex()):
        return len(self._headers)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid():
            return None
        row, col = index.row(), index.column()

        if row >= len(self._nodes):
            # Placeholder row.
            if role == Qt.DisplayRole and col == 3:
                return self._placeholder
            if role == Qt.FontRole:
                font = QFont()
                font.setItalic(True)
                return font
            if role == Qt.ForegroundRole:
                return QColor("#7B8394")
            return None

        node = self._nodes[row]
        if role == Qt.DisplayRole:
            if col == 1:
                return node.time_text
            if col == 2:
                return node.severity.value
            if col == 3:
                return node.message
        if role == Qt.DecorationRole and col == 0:
            return self._icons[node.severity]
        if role == Qt.ForegroundRole and col == 2:
            return QColor(SEVERITY_COLORS[node.severity])
        if role == Qt.ToolTipRole:
            return node.text
        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            return self._headers[section]
        return None

    # --- RenderTarget ---

    def replace_contents(self, nodes: Sequence[LogLine]):
        self.beginResetModel()
        self._nodes = list(nodes)
        self._placeholder = None
        self.endResetModel()

    def append_nodes(self, nodes: Sequence[LogLine]):
        if not nodes:
            return
        first = len(self._nodes)
        self.beginInsertRows(QModelIndex(), first, first + len(nodes) - 1)
        self._nodes.extend(nodes)
        self.endInsertRows()

    def show_placeholder(self, text: str):
        row = len(self._nodes)
        if self._placeholder is None:
            self.beginInsertRows(QModelIndex(), row, row)
            self._placeholder = text
            self.endInsertRows()
        else:
            self._placeholder = text
            self.dataChanged.emit(self.index(row, 0), self.index(row, self.columnCount() - 1))

    def remove_placeholder(self) -> bool:
        if self._placeholder is None:
            return False
        row = len(self._nodes)
        self.beginRemoveRows(QModelIndex(), row, row)
        self._placeholder = None
        self.endRemoveRows()
        return True

    def scroll_to_end(self):
        self.scroll_requested.emit()

    # --- Accessors ---

    def nodes(self) -> List[LogLine]:
        return list(self._nodes)

    def placeholder(self) -> Optional[str]:
        return self._placeholder
