# auditor_tools/gui/conversion_view.py

import logging

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QFileDialog, QHBoxLayout, QLabel, QLineEdit, QPushButton, QSplitter, QVBoxLayout, QWidget
)

from auditor_tools.core.app_state import ObservableState
from auditor_tools.core.shell import Shell
from .action_controller import ActionController
from .log_viewer import LogViewer
from .resources import ICON_SIZE, get_icon
from .widgets import DesktopRevealer, DropZone, ProgressPanel

logger = logging.getLogger(__name__)


class ConversionView(QWidget):
    """
    The File Conversion task page.

    This widget is a "dumb" view: every action is delegated to the Shell (or to the
    ActionController for the threaded job), and every enabled/visible flag is
    recomputed from the ObservableState when it notifies.
    """
    back_requested = Signal()

    def __init__(self, backend, state: ObservableState = None, parent=None):
        super().__init__(parent)
        self.progress_panel = ProgressPanel()
        self.log_viewer = LogViewer()
        self.shell = Shell(backend, self.log_viewer.view, self.progress_panel.view, state=state,
                           revealer=DesktopRevealer())
        self.state = self.shell.state
        self.controller = ActionController(self.shell, self)

        self._init_ui()
        self._connect_signals()
        self._unsubscribe = self.state.subscribe(self.sync_controls)
        self.sync_controls()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # --- Header ---
        header = QHBoxLayout()
        self.back_button = QPushButton("< Dashboard")
        title = QLabel("File Conversion")
        title.setObjectName("PageTitle")
        header.addWidget(self.back_button)
        header.addWidget(title)
        header.addStretch()
        layout.addLayout(header)

        # --- Input Selection ---
        self.drop_zone = DropZone()
        layout.addWidget(self.drop_zone)

        browse_row = QHBoxLayout()
        self.browse_folder_button = QPushButton(" Browse Folders")
        self.browse_folder_button.setIcon(get_icon("folder-open"))
        self.browse_zip_button = QPushButton(" Browse Zip Files")
        self.browse_zip_button.setIcon(get_icon("archive"))
        for button in (self.browse_folder_button, self.browse_zip_button):
            button.setIconSize(ICON_SIZE)
            browse_row.addWidget(button)
        browse_row.addStretch()
        layout.addLayout(browse_row)

        path_row = QHBoxLayout()
        path_row.addWidget(QLabel("Selected:"))
        self.path_edit = QLineEdit()
        self.path_edit.setPlaceholderText("Type or paste a path and press Enter")
        self.clear_path_button = QPushButton("x")
        self.clear_path_button.setToolTip("Clear selection")
        self.clear_path_button.setFixedWidth(28)
        path_row.addWidget(self.path_edit, 1)
        path_row.addWidget(self.clear_path_button)
        layout.addLayout(path_row)

        # --- Actions ---
        action_row = QHBoxLayout()
        self.go_button = QPushButton(" GO")
        self.go_button.setObjectName("PrimaryButton")
        self.go_button.setIcon(get_icon("start"))
        self.start_over_button = QPushButton(" Start Over")
        self.start_over_button.setIcon(get_icon("reset"))
        action_row.addWidget(self.go_button)
        action_row.addWidget(self.start_over_button)
        action_row.addStretch()
        layout.addLayout(action_row)

        # --- Results ---
        self.results_widget = QWidget()
        results_row = QHBoxLayout(self.results_widget)
        results_row.setContentsMargins(0, 0, 0, 0)
        self.open_staging_button = QPushButton("Open Staging Folder")
        self.open_output_button = QPushButton("Open LLM Output Folder")
        self.open_report_button = QPushButton("Open Report")
        for button in (self.open_staging_button, self.open_output_button, self.open_report_button):
            results_row.addWidget(button)
        results_row.addStretch()
        layout.addWidget(self.results_widget)

        # --- Progress and Logs ---
        splitter = QSplitter(Qt.Vertical)
        splitter.addWidget(self.progress_panel)
        splitter.addWidget(self.log_viewer)
        splitter.setStretchFactor(1, 1)
        layout.addWidget(splitter, 1)

    def _connect_signals(self):
        self.back_button.clicked.connect(self.back_requested)
        self.drop_zone.dropped.connect(self.shell.handle_drop)
        self.browse_folder_button.clicked.connect(self.browse_folder)
        self.browse_zip_button.clicked.connect(self.browse_zip)
        self.path_edit.returnPressed.connect(self._on_path_entered)
        self.clear_path_button.clicked.connect(self.shell.clear_selection)
        self.go_button.clicked.connect(self.controller.start_job)
        self.start_over_button.clicked.connect(self.shell.start_over)
        self.open_staging_button.clicked.connect(self.shell.reveal_staging)
        self.open_output_button.clicked.connect(self.shell.reveal_output)
        self.open_report_button.clicked.connect(self.shell.reveal_report)
        self.log_viewer.threshold_changed.connect(self.shell.set_severity_threshold)
        self.log_viewer.clear_requested.connect(self.shell.clear_logs)

    # --- Dialogs ---

    @Slot()
    def browse_folder(self):
        folder = QFileDialog.getExistingDirectory(self, "Select a folder to convert")
        self.shell.handle_dialog_result(folder)

    @Slot()
    def browse_zip(self):
        files, _ = QFileDialog.getOpenFileNames(self, "Select a zip file to convert", "", "Zip Files (*.zip)")
        self.shell.handle_dialog_result(files)

    @Slot()
    def _on_path_entered(self):
        self.shell.handle_user_input(self.path_edit.text())

    # --- State Sync ---

    def sync_controls(self):
        state = self.state
        idle = not state.is_processing
        selected = state.selected_path or ""
        if self.path_edit.text() != selected and not self.path_edit.hasFocus():
            self.path_edit.setText(selected)

        for widget in (self.drop_zone, self.browse_folder_button, self.browse_zip_button,
                       self.path_edit, self.clear_path_button, self.start_over_button, self.back_button):
            widget.setEnabled(idle)
        self.clear_path_button.setEnabled(idle and bool(state.selected_path))
        self.go_button.setEnabled(idle and bool(state.selected_path))
        self.results_widget.setVisible(state.result is not None)
        self.log_viewer.sync_threshold(state.severity_threshold)

    def is_busy(self) -> bool:
        return not self.controller.is_idle()

    def close_view(self):
        self._unsubscribe()
        self.shell.close()
