# auditor_tools/core/app_state.py

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .event_log import LogEntry, Severity
from .file_operations import format_file_size

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


# --- Job Data Types ---

@dataclass(frozen=True)
class Progress:
    """A progress snapshot pushed by the backend: `current` of `total` in `category`."""
    current: int = 0
    total: int = 0
    category: str = ""


@dataclass
class FileRecord:
    """
    One row of the conversion report. The "original" fields keep the identity
    a file had when it was scanned; the working fields follow it through conversion.
    """
    original_file_name: str
    original_relative_path: str
    file_name: str
    relative_path: str
    file_type: str
    file_size_bytes: int
    last_modified: str
    created_time: str
    sha512: Optional[str] = None
    processed: bool = False
    skip_reason: Optional[str] = None
    converted_file_name: Optional[str] = None

    @classmethod
    def scanned(cls, file_name: str, relative_path: str, file_type: str, file_size_bytes: int,
                last_modified: str, created_time: str) -> "FileRecord":
        return cls(
            original_file_name=file_name,
            original_relative_path=relative_path,
            file_name=file_name,
            relative_path=relative_path,
            file_type=file_type,
            file_size_bytes=file_size_bytes,
            last_modified=last_modified,
            created_time=created_time,
        )

    @property
    def file_size_human(self) -> str:
        return format_file_size(self.file_size_bytes)

    def mark_skipped(self, reason: str):
        self.processed = False
        self.skip_reason = reason


@dataclass(frozen=True)
class JobResult:
    """The structured result of a completed conversion job."""
    entries: Tuple[FileRecord, ...] = field(default_factory=tuple)
    staging_path: str = ""
    output_path: str = ""
    report_path: str = ""

    @property
    def processed_count(self) -> int:
        return sum(1 for entry in self.entries if entry.processed)


class LogSequence(Sequence):
    """A read-only window onto the store's log list. Views hold this, never the list."""

    def __init__(self, entries: List[LogEntry]):
        self._entries = entries

    def __getitem__(self, index):
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"LogSequence({len(self._entries)} entries)"


# --- The Observable Store ---
class ObservableState:
    """
    The single mutable store behind the File Conversion view.

    Every named mutation updates its field(s) and then synchronously calls every
    subscriber with no arguments; subscribers re-read the state they need. There
    is no diffing, so writing an unchanged value still notifies.
    """

    def __init__(self, default_threshold: Severity = Severity.WARNING):
        self._default_threshold = Severity.parse(default_threshold)
        self._listeners: List[Listener] = []
        self._logs: List[LogEntry] = []
        self._log_view = LogSequence(self._logs)
        self._log_epoch = 0
        self._init_fields()

    def _init_fields(self):
        self._selected_path: Optional[str] = None
        self._is_processing = False
        self._result: Optional[JobResult] = None
        self._severity_threshold = self._default_threshold
        self._progress = Progress()
        self._status_message = ""

    # --- Read-only Accessors ---

    @property
    def selected_path(self) -> Optional[str]:
        return self._selected_path

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def logs(self) -> LogSequence:
        return self._log_view

    @property
    def log_epoch(self) -> int:
        """Bumped on every clear/reset, so renderers can tell a shrink-then-regrow apart from growth."""
        return self._log_epoch

    @property
    def result(self) -> Optional[JobResult]:
        return self._result

    @property
    def severity_threshold(self) -> Severity:
        return self._severity_threshold

    @property
    def progress(self) -> Progress:
        return self._progress

    @property
    def status_message(self) -> str:
        return self._status_message

    # --- Mutations ---

    def set_selected_path(self, path: Optional[str]):
        self._selected_path = path
        self._notify()

    def set_processing(self, is_processing: bool):
        self._is_processing = bool(is_processing)
        self._notify()

    def set_result(self, result: Optional[JobResult]):
        self._result = result
        self._notify()

    def set_severity_threshold(self, threshold):
        # Only the display filter changes; stored entries are never touched.
        self._severity_threshold = Severity.parse(threshold)
        self._notify()

    def update_progress(self, current: int, total: int, category: str):
        self._progress = Progress(int(current), int(total), str(category or ""))
        self._notify()

    def set_status_message(self, message: str):
        self._status_message = str(message or "")
        self._notify()

    def add_log_entry(self, entry: LogEntry):
        self._logs.append(entry)
        self._notify()

    def add_log(self, severity, message: str) -> LogEntry:
        """Creates a timestamped entry and appends it. Returns the new entry."""
        entry = LogEntry.create(severity, message)
        self.add_log_entry(entry)
        return entry

    def clear_logs(self):
        self._logs.clear()
        self._log_epoch += 1
        self._notify()

    def reset(self):
        """Returns every field to its initial value with a single notification."""
        self._logs.clear()
        self._log_epoch += 1
        self._init_fields()
        self._notify()

    # --- Subscription ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers `listener` and returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            try:
                self._listeners.remove(listener)
            except ValueError:
                logger.debug("Listener already unsubscribed.")

        return unsubscribe

    def _notify(self):
        # Iterate over a snapshot: listeners may (un)subscribe or mutate the store mid-loop.
        for listener in list(self._listeners):
            listener()
