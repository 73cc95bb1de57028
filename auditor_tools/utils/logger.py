# auditor_tools/utils/logger.py

import logging
import logging.handlers
from pathlib import Path

LOG_FILE_NAME = 'auditor_tools.log'


class LoggerManager:
    """
    Configures the application-wide logging system.

    Two handlers are attached to the root logger:
    1. Console handler at INFO for live feedback.
    2. Rotating file handler at DEBUG (5 MB per file, 5 backups) for diagnostics.
    """

    def __init__(self, log_file_name: str = LOG_FILE_NAME, log_level=logging.DEBUG, console_level=logging.INFO):
        """
        Args:
            log_file_name: Name of the log file, created in the project root.
            log_level: The root level to capture.
            console_level: The level shown on the console.
        """
        self.log_file_path = Path(__file__).resolve().parents[2] / log_file_name
        self.log_level = log_level
        self.console_level = console_level
        self.root_logger = logging.getLogger()

    def setup(self):
        # Handlers are attached once; a second call must not duplicate output.
        if self.root_logger.hasHandlers():
            return

        self.root_logger.setLevel(self.log_level)
        self.root_logger.addHandler(self._create_console_handler())
        self.root_logger.addHandler(self._create_file_handler())
        logging.info("Logging configured successfully.")

    def _create_console_handler(self) -> logging.StreamHandler:
        handler = logging.StreamHandler()
        handler.setLevel(self.console_level)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - [%(levelname)s] - %(message)s',
            datefmt='%H:%M:%S'
        ))
        return handler

    def _create_file_handler(self) -> logging.handlers.RotatingFileHandler:
        handler = logging.handlers.RotatingFileHandler(
            self.log_file_path, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - [%(levelname)s] - %(filename)s:%(lineno)d - %(message)s'
        ))
        return handler


def setup_logging(console_level=logging.INFO):
    """Initializes the application-wide logging system."""
    LoggerManager(console_level=console_level).setup()
