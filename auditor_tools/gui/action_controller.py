# auditor_tools/gui/action_controller.py

import logging

from PySide6.QtCore import QObject, QThread, Signal, Slot

from auditor_tools.core.shell import JobNotStartableError, Shell

logger = logging.getLogger(__name__)


# --- Worker Thread ---

class JobWorker(QObject):
    """
    Runs one conversion job on a background thread. Backend pushes leave the
    worker as signals; because the controller lives on the GUI thread, they are
    delivered there as queued calls in the order they were emitted.
    """
    log_pushed = Signal(object)
    progress_pushed = Signal(object)
    succeeded = Signal(object)
    failed = Signal(str)
    finished = Signal()

    def __init__(self, backend, path: str):
        super().__init__()
        self.backend = backend
        self.path = path

    @Slot()
    def run(self):
        try:
            result = self.backend.start_job(self.path, self.log_pushed.emit, self.progress_pushed.emit)
            self.succeeded.emit(result)
        except Exception as e:
            logger.critical(f"Job worker error: {e}", exc_info=True)
            self.failed.emit(str(e))
        finally:
            self.finished.emit()


# --- The Action Controller ---
class ActionController(QObject):
    """Owns the worker thread of the running job and forwards its signals to the Shell."""
    job_running_changed = Signal(bool)

    def __init__(self, shell: Shell, parent=None):
        super().__init__(parent)
        self.shell = shell
        self.active_thread = None
        self.active_worker = None

    def is_idle(self) -> bool:
        return self.active_thread is None

    @Slot()
    def start_job(self) -> bool:
        """Starts the job for the selected path. Returns False if it could not be started."""
        if not self.is_idle():
            logger.warning("A job is already running.")
            return False
        try:
            path = self.shell.begin_job()
        except JobNotStartableError as e:
            logger.warning(f"Cannot start job: {e}")
            return False

        self.active_thread = QThread()
        self.active_worker = JobWorker(self.shell.backend, path)
        self.active_worker.moveToThread(self.active_thread)

        self.active_worker.log_pushed.connect(self._on_log_pushed)
        self.active_worker.progress_pushed.connect(self._on_progress_pushed)
        self.active_worker.succeeded.connect(self._on_succeeded)
        self.active_worker.failed.connect(self._on_failed)
        self.active_worker.finished.connect(self._on_finished)
        self.active_thread.started.connect(self.active_worker.run)

        self.job_running_changed.emit(True)
        self.active_thread.start()
        return True

    @Slot(object)
    def _on_log_pushed(self, entry):
        self.shell.push_log(entry)

    @Slot(object)
    def _on_progress_pushed(self, progress):
        self.shell.push_progress(progress)

    @Slot(object)
    def _on_succeeded(self, result):
        self.shell.complete_job(result)

    @Slot(str)
    def _on_failed(self, message: str):
        self.shell.fail_job(message)

    @Slot()
    def _on_finished(self):
        self.shell.finish_job()
        if self.active_thread:
            self.active_thread.quit()
            self.active_thread.wait()
        self.active_thread = None
        self.active_worker = None
        self.job_running_changed.emit(False)

    def wait_for_job(self):
        """Blocks until the running job's thread exits. Used when the window closes mid-job."""
        if self.active_thread:
            self.active_thread.wait()
