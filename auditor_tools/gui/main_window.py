# auditor_tools/gui/main_window.py

import logging
import sys

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtWidgets import (
    QApplication, QLabel, QMainWindow, QMessageBox, QPushButton, QStackedWidget, QVBoxLayout, QWidget
)

from auditor_tools.core.app_state import ObservableState
from auditor_tools.core.backend import LocalConversionBackend
from auditor_tools.core.config_manager import load_settings
from auditor_tools.utils.logger import setup_logging
from .conversion_view import ConversionView
from .dashboard import FILE_CONVERSION_TASK, DashboardPage
from .resources import (
    SETTINGS_FILE_PATH, get_current_theme, get_icon, load_stylesheet, set_current_theme, validate_assets
)

logger = logging.getLogger(__name__)

APP_TITLE = "Auditor Tools"


class BlockingPage(QWidget):
    """Full-window error page shown when the office engine is missing. Only offers Quit."""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.addStretch()
        title = QLabel("Office engine not found")
        title.setObjectName("PageTitle")
        message = QLabel(
            "File conversion needs LibreOffice. Install it, or set the EPT_LIBREOFFICE_PATH "
            "environment variable (or 'office_path' in config/settings.json) to the soffice "
            "executable, then restart the application."
        )
        message.setWordWrap(True)
        self.quit_button = QPushButton("Quit")
        for widget in (title, message):
            widget.setAlignment(Qt.AlignCenter)
            layout.addWidget(widget)
        layout.addWidget(self.quit_button, alignment=Qt.AlignCenter)
        layout.addStretch()


class MainWindow(QMainWindow):
    """
    The application shell: a stack of the dashboard, the File Conversion page and
    the blocking page. The backend readiness check runs once at startup.
    """

    def __init__(self, backend=None, settings=None):
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.setWindowIcon(get_icon("app_icon"))
        self.setGeometry(100, 100, 1000, 780)

        self.settings = settings if settings is not None else load_settings(SETTINGS_FILE_PATH)
        self.backend = backend if backend is not None else LocalConversionBackend(self.settings.office_path)

        self._create_menus()

        self.stack = QStackedWidget()
        self.dashboard = DashboardPage()
        self.conversion_view = ConversionView(self.backend, ObservableState(self.settings.severity))
        self.blocking_page = BlockingPage()
        for page in (self.dashboard, self.conversion_view, self.blocking_page):
            self.stack.addWidget(page)
        self.setCentralWidget(self.stack)

        self.dashboard.task_selected.connect(self._open_task)
        self.conversion_view.back_requested.connect(self.show_dashboard)
        self.blocking_page.quit_button.clicked.connect(self.close)

        if self.conversion_view.shell.check_backend():
            self.show_dashboard()
        else:
            self.stack.setCurrentWidget(self.blocking_page)

    def _create_menus(self):
        menu_bar = self.menuBar()
        settings_menu = menu_bar.addMenu("&Settings")
        theme_menu = settings_menu.addMenu("Theme")
        theme_group = QActionGroup(self)
        dark_action = QAction("Dark Theme", self, checkable=True)
        light_action = QAction("Light Theme", self, checkable=True)
        dark_action.triggered.connect(lambda: self._handle_theme_change("dark"))
        light_action.triggered.connect(lambda: self._handle_theme_change("light"))
        for action in (dark_action, light_action):
            theme_menu.addAction(action)
            theme_group.addAction(action)
        if get_current_theme() == "light":
            light_action.setChecked(True)
        else:
            dark_action.setChecked(True)

    @Slot(str)
    def _handle_theme_change(self, theme: str):
        if set_current_theme(theme):
            QApplication.instance().setStyleSheet(load_stylesheet())
        else:
            QMessageBox.critical(self, "Error", "Could not save theme setting.")

    @Slot(str)
    def _open_task(self, task_id: str):
        if task_id == FILE_CONVERSION_TASK:
            self.stack.setCurrentWidget(self.conversion_view)
        else:
            logger.warning(f"Task '{task_id}' is not available yet.")

    @Slot()
    def show_dashboard(self):
        self.stack.setCurrentWidget(self.dashboard)

    def is_blocked(self) -> bool:
        return self.stack.currentWidget() is self.blocking_page

    def closeEvent(self, event):
        if self.conversion_view.is_busy():
            reply = QMessageBox.question(self, 'Conversion in Progress',
                                         "A conversion is running and cannot be cancelled. Quit when it finishes?",
                                         QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
            if reply != QMessageBox.Yes:
                event.ignore()
                return
            self.conversion_view.controller.wait_for_job()
        self.conversion_view.close_view()
        event.accept()


def run_gui():
    """Entry point of the desktop application."""
    setup_logging()
    validate_assets()

    app = QApplication(sys.argv)
    app.setApplicationName(APP_TITLE)
    app.setStyleSheet(load_stylesheet())

    window = MainWindow()
    window.show()

    sys.exit(app.exec())
