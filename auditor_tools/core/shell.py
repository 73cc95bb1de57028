# auditor_tools/core/shell.py

"""
The orchestration layer of the File Conversion view.

The Shell owns the ObservableState, turns raw events (drops, dialog results,
typed paths, backend pushes) into named state mutations, and runs the job
lifecycle Idle -> Processing -> Idle. It registers a single render listener on
the store, so every mutation re-renders the log and progress views from the
current state. Nothing here imports Qt; the GUI and the CLI drive the same Shell.
"""

import logging
from typing import Optional

from .app_state import JobResult, ObservableState, Progress
from .backend import ConversionBackend
from .event_log import LogEntry, Severity
from .input_resolver import DropEvent, NoUsablePathError, resolve_dialog, resolve_drop
from .job_events import InvalidPathError
from auditor_tools.utils import system_viewer

logger = logging.getLogger(__name__)

_PY_LEVELS = {Severity.INFO: logging.INFO, Severity.WARNING: logging.WARNING, Severity.ERROR: logging.ERROR}


class JobNotStartableError(RuntimeError):
    """Raised when a job is started without a selected path or while another job is running."""


def format_success_status(result: JobResult) -> str:
    return (f"Processed {result.processed_count} of {len(result.entries)} files.\n"
            f"Staging folder: {result.staging_path}\n"
            f"Output folder: {result.output_path}\n"
            f"Report: {result.report_path}")


class Shell:
    def __init__(self, backend: ConversionBackend, log_view, progress_view,
                 state: Optional[ObservableState] = None, revealer=None):
        self.backend = backend
        self.log_view = log_view
        self.progress_view = progress_view
        self.state = state if state is not None else ObservableState()
        self.revealer = revealer if revealer is not None else system_viewer
        self._unsubscribe = self.state.subscribe(self.render)
        self.render()

    def render(self):
        """Re-renders both views from the current state. Registered once as the store listener."""
        state = self.state
        self.log_view.update(state.logs, state.severity_threshold, state.log_epoch)
        progress = state.progress
        self.progress_view.update(progress.current, progress.total, progress.category,
                                  state.is_processing, state.status_message)

    def close(self):
        self._unsubscribe()

    def _log(self, severity: Severity, message: str) -> LogEntry:
        logger.log(_PY_LEVELS[severity], message)
        return self.state.add_log(severity, message)

    # --- Readiness ---

    def check_backend(self) -> bool:
        try:
            available = bool(self.backend.is_available())
        except Exception as e:
            logger.error(f"Backend readiness check failed: {e}", exc_info=True)
            return False
        if not available:
            logger.error("Conversion backend is not available.")
        return available

    # --- Selection ---

    def handle_drop(self, event: DropEvent) -> Optional[str]:
        try:
            resolution = resolve_drop(event)
        except NoUsablePathError as e:
            self._log(Severity.ERROR, f"Could not get a path from the dropped item. {e}")
            return None
        if resolution.warning:
            self._log(Severity.WARNING, resolution.warning)
        return self._select(resolution.path)

    def handle_dialog_result(self, value) -> Optional[str]:
        path = resolve_dialog(value)
        if path is None:
            logger.info("File dialog closed without a selection.")
            return None
        return self._select(path)

    def handle_user_input(self, raw: str) -> Optional[str]:
        return self._select(raw)

    def _select(self, raw: str) -> Optional[str]:
        if self.state.is_processing:
            self._log(Severity.WARNING, "A job is running; the selection cannot change until it finishes.")
            return None
        try:
            path = self.backend.normalize_path(raw)
        except InvalidPathError as e:
            self._log(Severity.WARNING, f"Invalid path: {e}")
            return None
        self.state.set_selected_path(path)
        self._log(Severity.INFO, f"Selected: {path}")
        return path

    def clear_selection(self):
        self.state.set_selected_path(None)

    # --- View Controls ---

    def set_severity_threshold(self, threshold):
        self.state.set_severity_threshold(threshold)

    def clear_logs(self):
        self.state.clear_logs()

    def start_over(self):
        if self.state.is_processing:
            logger.warning("Start Over ignored while a job is running.")
            return
        self.state.reset()

    # --- Job Lifecycle ---

    def begin_job(self) -> str:
        """
        Moves the shell to Processing. The previous result is cleared before the
        processing flag goes up.

        Raises:
            JobNotStartableError: if no path is selected or a job is already running.
        """
        path = self.state.selected_path
        if not path:
            raise JobNotStartableError("No path selected.")
        if self.state.is_processing:
            raise JobNotStartableError("A job is already running.")
        self.state.set_result(None)
        self.state.set_processing(True)
        self.state.update_progress(0, 0, "")
        self.state.set_status_message("Processing...")
        self._log(Severity.INFO, f"Starting conversion of {path}")
        return path

    def complete_job(self, result: JobResult):
        self.state.set_result(result)
        self.state.set_status_message(format_success_status(result))

    def fail_job(self, error):
        self.state.set_status_message(f"Error: {error}")
        self._log(Severity.ERROR, f"Job failed: {error}")

    def finish_job(self):
        self.state.set_processing(False)

    def run_job(self) -> Optional[JobResult]:
        """Runs a whole job on the calling thread. Returns the result, or None if the job failed."""
        path = self.begin_job()
        try:
            result = self.backend.start_job(path, self.push_log, self.push_progress)
        except Exception as e:
            logger.error(f"Job for {path} failed: {e}", exc_info=True)
            self.fail_job(e)
            return None
        else:
            self.complete_job(result)
            return result
        finally:
            self.finish_job()

    # --- Backend Pushes ---

    def push_log(self, entry: LogEntry):
        self.state.add_log_entry(entry)

    def push_progress(self, progress: Progress):
        self.state.update_progress(progress.current, progress.total, progress.category)

    # --- Reveal Results ---

    def reveal_staging(self):
        self._reveal("staging folder", "staging_path", self.revealer.open_folder)

    def reveal_output(self):
        self._reveal("output folder", "output_path", self.revealer.open_folder)

    def reveal_report(self):
        self._reveal("report", "report_path", self.revealer.open_file)

    def _reveal(self, label: str, attr: str, opener):
        result = self.state.result
        if result is None or not getattr(result, attr):
            self._log(Severity.WARNING, f"There is no {label} to open yet.")
            return
        target = getattr(result, attr)
        try:
            opener(target)
        except OSError as e:
            self._log(Severity.ERROR, f"Could not open {label} '{target}': {e}")
