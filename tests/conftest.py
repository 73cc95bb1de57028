# tests/conftest.py

import os

# Widget tests run without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from pathlib import Path

import pytest

from auditor_tools.core.app_state import FileRecord, JobResult, Progress
from auditor_tools.core.event_log import LogEntry, Severity
from auditor_tools.core.job_events import InvalidPathError
from auditor_tools.core.office_converter import ConversionFailed


def make_record(name: str, processed: bool) -> FileRecord:
    record = FileRecord.scanned(name, name, Path(name).suffix.lstrip(".") or "unknown", 10,
                                "2024-01-01 00:00:00", "2024-01-01 00:00:00")
    if processed:
        record.processed = True
    else:
        record.mark_skipped("Not LLM-readable and not convertible")
    return record


def make_result(total: int, processed: int) -> JobResult:
    entries = tuple(make_record(f"file_{i}.txt", i < processed) for i in range(total))
    return JobResult(entries=entries, staging_path="/x__20240101_000000",
                     output_path="/x__20240101_000000_LLM",
                     report_path="/x__20240101_000000_LLM/x__20240101_000000_LLM_file-report.xlsx")


class FakeBackend:
    """In-memory ConversionBackend. Paths listed in `invalid_paths` fail normalization."""

    def __init__(self):
        self.available = True
        self.invalid_paths = set()
        self.result = make_result(10, 7)
        self.error = None
        self.pushed_logs = [LogEntry(Severity.INFO, "Starting processing..."),
                            LogEntry(Severity.WARNING, "Skipped one file")]
        self.started_paths = []

    def is_available(self) -> bool:
        if isinstance(self.available, Exception):
            raise self.available
        return self.available

    def normalize_path(self, raw: str) -> str:
        text = (raw or "").strip()
        if not text or text in self.invalid_paths:
            raise InvalidPathError(f"Path does not exist: {raw}")
        return text

    def start_job(self, path, on_log, on_progress):
        self.started_paths.append(path)
        for entry in self.pushed_logs:
            on_log(entry)
        on_progress(Progress(1, 2, "Converting Documents"))
        on_progress(Progress(2, 2, "Complete"))
        if self.error is not None:
            raise self.error
        return self.result


class FakeConverter:
    """Stands in for LibreOffice: writes '<stem>__converted.pdf' next to the source."""

    def __init__(self, available: bool = True):
        self.available = available
        self.failing_names = set()
        self.converted = []

    def find_executable(self):
        return Path("/usr/bin/soffice") if self.available else None

    def convert(self, file_path: Path) -> Path:
        if file_path.name in self.failing_names:
            raise ConversionFailed("Office engine exited with status 1: broken file")
        output = file_path.parent / f"{file_path.stem}__converted.pdf"
        output.write_text(f"PDF rendering of {file_path.name}", encoding="utf-8")
        self.converted.append(file_path.name)
        return output


class FakeRevealer:
    def __init__(self):
        self.opened = []
        self.error = None

    def open_folder(self, path):
        if self.error is not None:
            raise self.error
        self.opened.append(("folder", path))

    def open_file(self, path):
        if self.error is not None:
            raise self.error
        self.opened.append(("file", path))


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def fake_converter():
    return FakeConverter()


@pytest.fixture
def fake_revealer():
    return FakeRevealer()


@pytest.fixture(scope="session")
def qapp():
    """Creates a QApplication instance for the test session."""
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def result_factory():
    """Builds a JobResult with `total` entries of which the first `processed` were processed."""
    return make_result
