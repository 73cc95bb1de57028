# auditor_tools/gui/widgets.py

import logging
from pathlib import Path

from PySide6.QtCore import QMimeData, Qt, QUrl, Signal
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QProgressBar, QSizePolicy, QVBoxLayout, QWidget

from auditor_tools.core.input_resolver import DropEvent, DroppedFile, DroppedItem
from .progress_panel import ProgressSnapshot, ProgressView

logger = logging.getLogger(__name__)


class DesktopRevealer:
    """Opens result folders and files through the desktop's default handlers."""

    def _open(self, target: Path):
        logger.info(f"Opening with desktop services: {target}")
        if not QDesktopServices.openUrl(QUrl.fromLocalFile(str(target))):
            raise OSError(f"No application could open {target}")

    def open_folder(self, path: str):
        folder = Path(path)
        if not folder.is_dir():
            raise FileNotFoundError(f"Folder not found: {path}")
        self._open(folder)

    def open_file(self, path: str):
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        self._open(file_path)


def drop_event_from_mime(mime: QMimeData) -> DropEvent:
    """
    Translates Qt drag-and-drop data into a DropEvent.

    Local-file URLs become native paths. Any other URL only carries a virtual
    location, so it becomes a dropped file with a relative path and no direct
    path. Plain text without URLs becomes a non-file item.
    """
    native_paths = []
    files = []
    items = []
    if mime.hasUrls():
        for url in mime.urls():
            if url.isLocalFile():
                native_paths.append(url.toLocalFile())
            else:
                files.append(DroppedFile(name=url.fileName(), path=None, relative_path=url.toString()))
    elif mime.hasText():
        items.append(DroppedItem(kind="string"))
    return DropEvent(native_paths=tuple(native_paths), files=tuple(files), items=tuple(items))


# --- Drop Zone ---
class DropZone(QFrame):
    """A framed target area for dragging a folder or zip file into the window."""
    dropped = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("DropZone")
        self.setAcceptDrops(True)
        self.setFrameShape(QFrame.StyledPanel)
        self.setMinimumHeight(110)

        layout = QVBoxLayout(self)
        self.title_label = QLabel("Drag and drop a folder or zip file here")
        self.title_label.setObjectName("DropZoneTitle")
        self.hint_label = QLabel("or use the buttons below to browse")
        for label in (self.title_label, self.hint_label):
            label.setAlignment(Qt.AlignCenter)
            layout.addWidget(label)

    def _set_hover(self, active: bool):
        self.setProperty("dragActive", active)
        self.style().unpolish(self)
        self.style().polish(self)

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls() or event.mimeData().hasText():
            self._set_hover(True)
            event.acceptProposedAction()
        else:
            super().dragEnterEvent(event)

    def dragMoveEvent(self, event):
        if event.mimeData().hasUrls() or event.mimeData().hasText():
            event.acceptProposedAction()
        else:
            super().dragMoveEvent(event)

    def dragLeaveEvent(self, event):
        self._set_hover(False)
        super().dragLeaveEvent(event)

    def dropEvent(self, event):
        self._set_hover(False)
        self.dropped.emit(drop_event_from_mime(event.mimeData()))
        event.acceptProposedAction()


# --- Status Widget ---
class StatusWidget(QWidget):
    """A word-wrapping status line that turns red for error messages."""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 5, 10, 5)

        self.status_label = QLabel("Status:")
        self.status_label.setObjectName("StatusLabel")
        self.status_message = QLabel("")
        self.status_message.setWordWrap(True)
        self.status_message.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Minimum)

        layout.addWidget(self.status_label)
        layout.addWidget(self.status_message, 1)

    def set_status(self, message: str, is_error: bool = False):
        self.status_message.setText(message)
        self.status_message.setProperty("error", is_error)
        self.status_message.style().unpolish(self.status_message)
        self.status_message.style().polish(self.status_message)

    def text(self) -> str:
        return self.status_message.text()


# --- Progress Panel ---
class ProgressPanel(QWidget):
    """
    Qt adapter over ProgressView. The Shell drives `self.view`; every snapshot it
    produces is applied to the bar, the counters and the status line.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.progress_section = QWidget()
        section_layout = QVBoxLayout(self.progress_section)
        section_layout.setContentsMargins(0, 0, 0, 0)
        bar_row = QHBoxLayout()
        self.progress_bar = QProgressBar()
        self.progress_bar.setTextVisible(False)
        self.counter_label = QLabel("0 / 0")
        bar_row.addWidget(self.progress_bar, 1)
        bar_row.addWidget(self.counter_label)
        self.category_label = QLabel("")
        self.category_label.setObjectName("TaskCategory")
        section_layout.addLayout(bar_row)
        section_layout.addWidget(self.category_label)

        self.status_widget = StatusWidget()

        layout.addWidget(self.progress_section)
        layout.addWidget(self.status_widget)

        self.view = ProgressView(self.apply_snapshot)
        self.apply_snapshot(self.view.snapshot)

    def apply_snapshot(self, snapshot: ProgressSnapshot):
        self.progress_section.setVisible(snapshot.is_processing)
        self.status_widget.setVisible(bool(snapshot.status_message))
        self.status_widget.set_status(snapshot.status_message,
                                      is_error=snapshot.status_message.startswith("Error:"))
        if not snapshot.is_processing:
            return
        if snapshot.indeterminate:
            # A zero maximum puts QProgressBar into its busy animation.
            self.progress_bar.setRange(0, 0)
        else:
            self.progress_bar.setRange(0, 100)
            self.progress_bar.setValue(snapshot.percent)
        self.counter_label.setText(snapshot.counter_text)
        self.category_label.setText(snapshot.category)
