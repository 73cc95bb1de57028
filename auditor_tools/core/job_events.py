# auditor_tools/core/job_events.py

import logging
from typing import Callable, Optional

from .app_state import Progress
from .event_log import LogEntry, Severity

logger = logging.getLogger(__name__)

LogCallback = Callable[[LogEntry], None]
ProgressCallback = Callable[[Progress], None]

_PY_LEVELS = {Severity.INFO: logging.INFO, Severity.WARNING: logging.WARNING, Severity.ERROR: logging.ERROR}


# --- Error Taxonomy ---

class BackendError(Exception):
    """Base class for every failure reported by a conversion backend."""


class InvalidPathError(BackendError):
    """The user-supplied path could not be normalized (missing, empty, unreadable)."""


class JobError(BackendError):
    """A conversion job failed. The message is human-readable and goes straight to the log panel."""


class JobReporter:
    """
    The backend side of the two push streams. Every message is mirrored into
    Python logging and forwarded to the optional callbacks; neither stream waits
    for an acknowledgment.
    """

    def __init__(self, on_log: Optional[LogCallback] = None, on_progress: Optional[ProgressCallback] = None):
        self._on_log = on_log
        self._on_progress = on_progress

    def log(self, severity: Severity, message: str):
        logger.log(_PY_LEVELS[severity], message)
        if self._on_log is not None:
            self._on_log(LogEntry(severity, message))

    def info(self, message: str):
        self.log(Severity.INFO, message)

    def warning(self, message: str):
        self.log(Severity.WARNING, message)

    def error(self, message: str):
        self.log(Severity.ERROR, message)

    def progress(self, current: int, total: int, category: str):
        if self._on_progress is not None:
            self._on_progress(Progress(current, total, category))
