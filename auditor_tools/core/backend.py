# auditor_tools/core/backend.py

import logging
from pathlib import Path
from typing import Optional, Protocol

from .app_state import JobResult
from .job_events import InvalidPathError, JobReporter, LogCallback, ProgressCallback
from .office_converter import OfficeConverter
from .process_controller import ProcessController

logger = logging.getLogger(__name__)


# --- The Backend Contract ---
class ConversionBackend(Protocol):
    """The operations the shell consumes from the conversion engine."""

    def is_available(self) -> bool: ...

    def normalize_path(self, raw: str) -> str: ...

    def start_job(self, path: str, on_log: LogCallback, on_progress: ProgressCallback) -> JobResult: ...


class LocalConversionBackend:
    """
    The production backend: runs the conversion pipeline on the local filesystem
    and delegates document conversion to the external office engine.
    """

    def __init__(self, office_path: Optional[str] = None, converter=None):
        self.converter = converter if converter is not None else OfficeConverter(office_path)

    def is_available(self) -> bool:
        return self.converter.find_executable() is not None

    def normalize_path(self, raw: str) -> str:
        text = (raw or "").strip()
        if not text:
            raise InvalidPathError("Input path must not be empty.")
        path = Path(text).expanduser()
        if not path.exists():
            raise InvalidPathError(f"Path does not exist: {text}")
        return str(path.resolve())

    def start_job(self, path: str, on_log: LogCallback, on_progress: ProgressCallback) -> JobResult:
        reporter = JobReporter(on_log, on_progress)
        controller = ProcessController(reporter, self.converter)
        logger.debug(f"Starting job for {path}")
        return controller.start_processing(Path(path))
