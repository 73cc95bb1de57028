# tests/test_shell.py

import pytest

from auditor_tools.core.app_state import Progress
from auditor_tools.core.job_events import JobError
from auditor_tools.core.event_log import LogEntry, Severity
from auditor_tools.core.input_resolver import DropEvent, DroppedFile, DroppedItem
from auditor_tools.core.shell import JobNotStartableError, Shell
from auditor_tools.gui.log_panel import PLACEHOLDER_TEXT, IncrementalLogView, MemoryRenderTarget
from auditor_tools.gui.progress_panel import ProgressView


@pytest.fixture
def target():
    return MemoryRenderTarget()


@pytest.fixture
def progress_view():
    return ProgressView()


@pytest.fixture
def shell(fake_backend, target, progress_view, fake_revealer):
    return Shell(fake_backend, IncrementalLogView(target), progress_view, revealer=fake_revealer)


def log_pairs(shell):
    return [(entry.severity, entry.message) for entry in shell.state.logs]


# --- Job Lifecycle ---

def test_successful_job_reports_processed_count(shell, fake_backend, result_factory):
    fake_backend.result = result_factory(10, 7)
    shell.handle_user_input("/x")

    result = shell.run_job()

    assert result is fake_backend.result
    assert fake_backend.started_paths == ["/x"]
    assert "Processed 7 of 10" in shell.state.status_message
    assert shell.state.is_processing is False
    assert shell.state.result is result


def test_status_lists_output_locations(shell, fake_backend):
    shell.handle_user_input("/x")
    shell.run_job()
    status = shell.state.status_message
    assert fake_backend.result.staging_path in status
    assert fake_backend.result.output_path in status
    assert fake_backend.result.report_path in status


def test_begin_job_clears_result_before_processing(shell):
    shell.handle_user_input("/x")
    shell.run_job()
    assert shell.state.result is not None

    seen = []
    shell.state.subscribe(lambda: seen.append((shell.state.result, shell.state.is_processing)))
    shell.begin_job()

    assert seen[0] == (None, False)
    assert seen[1] == (None, True)


def test_failed_job_sets_error_status_and_always_finishes(shell, fake_backend):
    fake_backend.error = JobError("Processing failed: Failed to scan files -> permission denied")
    shell.handle_user_input("/x")

    assert shell.run_job() is None

    assert shell.state.is_processing is False
    assert shell.state.status_message.startswith("Error: Processing failed")
    assert log_pairs(shell)[-1][0] is Severity.ERROR
    assert shell.state.result is None


def test_unexpected_exception_still_resets_processing(shell, fake_backend):
    fake_backend.error = RuntimeError("backend crashed")
    shell.handle_user_input("/x")
    shell.run_job()
    assert shell.state.is_processing is False
    assert shell.state.status_message == "Error: backend crashed"


def test_job_requires_a_selected_path(shell):
    with pytest.raises(JobNotStartableError):
        shell.begin_job()


def test_job_cannot_start_twice(shell):
    shell.handle_user_input("/x")
    shell.begin_job()
    with pytest.raises(JobNotStartableError):
        shell.begin_job()
    shell.finish_job()
    assert shell.state.is_processing is False


def test_backend_pushes_reach_views(shell, target, progress_view):
    shell.set_severity_threshold(Severity.INFO)
    shell.handle_user_input("/x")
    shell.run_job()
    assert "Starting processing..." in target.messages()
    assert "Skipped one file" in target.messages()
    assert progress_view.snapshot.category == "Complete"
    assert progress_view.snapshot.is_processing is False


def test_each_push_is_a_single_mutation(shell):
    calls = []
    shell.state.subscribe(lambda: calls.append(1))
    shell.push_log(LogEntry(Severity.INFO, "hello"))
    shell.push_progress(Progress(1, 4, "Converting Documents"))
    assert len(calls) == 2
    assert shell.state.progress == Progress(1, 4, "Converting Documents")


# --- Selection ---

def test_native_drop_selects_path(shell):
    assert shell.handle_drop(DropEvent(native_paths=("/evidence",))) == "/evidence"
    assert shell.state.selected_path == "/evidence"
    assert log_pairs(shell) == [(Severity.INFO, "Selected: /evidence")]


def test_relative_path_drop_logs_warning(shell):
    shell.handle_drop(DropEvent(files=(DroppedFile("folder", relative_path="folder/a.docx"),)))
    assert shell.state.selected_path == "folder/a.docx"
    assert log_pairs(shell)[0][0] is Severity.WARNING


def test_item_list_drop_without_path_only_logs_an_error(shell):
    before = (shell.state.selected_path, shell.state.is_processing, shell.state.result,
              shell.state.severity_threshold, shell.state.progress, shell.state.status_message)

    result = shell.handle_drop(DropEvent(items=(DroppedItem("file", DroppedFile("report.docx")),)))

    assert result is None
    after = (shell.state.selected_path, shell.state.is_processing, shell.state.result,
             shell.state.severity_threshold, shell.state.progress, shell.state.status_message)
    assert after == before
    assert len(shell.state.logs) == 1
    assert shell.state.logs[0].severity is Severity.ERROR


def test_invalid_path_is_a_warning(shell, fake_backend):
    fake_backend.invalid_paths.add("/missing")
    assert shell.handle_user_input("/missing") is None
    assert shell.state.selected_path is None
    assert [severity for severity, _ in log_pairs(shell)] == [Severity.WARNING]


def test_cancelled_dialog_changes_nothing(shell):
    shell.handle_user_input("/x")
    logs_before = len(shell.state.logs)
    assert shell.handle_dialog_result([]) is None
    assert shell.handle_dialog_result(None) is None
    assert shell.state.selected_path == "/x"
    assert len(shell.state.logs) == logs_before


def test_dialog_list_selects_first_entry(shell):
    shell.handle_dialog_result(["/a.zip", "/b.zip"])
    assert shell.state.selected_path == "/a.zip"


def test_selection_is_locked_while_processing(shell):
    shell.handle_user_input("/x")
    shell.begin_job()
    assert shell.handle_user_input("/y") is None
    assert shell.state.selected_path == "/x"


def test_clear_selection(shell):
    shell.handle_user_input("/x")
    shell.clear_selection()
    assert shell.state.selected_path is None


# --- Readiness ---

def test_check_backend(shell, fake_backend):
    assert shell.check_backend() is True
    fake_backend.available = False
    assert shell.check_backend() is False
    fake_backend.available = RuntimeError("engine lookup crashed")
    assert shell.check_backend() is False


# --- Log Panel Controls ---

def test_threshold_change_rerenders_without_touching_logs(shell, target):
    shell.push_log(LogEntry(Severity.INFO, "detail"))
    shell.push_log(LogEntry(Severity.ERROR, "failure"))
    assert target.messages() == ["failure"]

    shell.set_severity_threshold("info")
    assert target.messages() == ["detail", "failure"]
    assert len(shell.state.logs) == 2


def test_clear_logs_shows_placeholder(shell, target):
    shell.push_log(LogEntry(Severity.ERROR, "failure"))
    shell.clear_logs()
    assert target.nodes == []
    assert target.placeholder == PLACEHOLDER_TEXT
    assert shell.log_view.last_rendered_count == 0


def test_start_over_resets_everything(shell, target):
    shell.handle_user_input("/x")
    shell.run_job()
    shell.start_over()
    assert shell.state.selected_path is None
    assert shell.state.result is None
    assert shell.state.status_message == ""
    assert target.placeholder == PLACEHOLDER_TEXT


# --- Reveal ---

def test_reveal_opens_result_locations(shell, fake_revealer, fake_backend):
    shell.handle_user_input("/x")
    shell.run_job()
    shell.reveal_staging()
    shell.reveal_output()
    shell.reveal_report()
    result = fake_backend.result
    assert fake_revealer.opened == [("folder", result.staging_path), ("folder", result.output_path),
                                    ("file", result.report_path)]


def test_reveal_failure_becomes_error_entry(shell, fake_revealer):
    shell.handle_user_input("/x")
    shell.run_job()
    fake_revealer.error = FileNotFoundError("Folder not found")
    shell.reveal_output()
    assert log_pairs(shell)[-1][0] is Severity.ERROR
    assert "Folder not found" in log_pairs(shell)[-1][1]


def test_reveal_without_result_warns(shell, fake_revealer):
    shell.reveal_report()
    assert fake_revealer.opened == []
    assert log_pairs(shell)[-1][0] is Severity.WARNING
