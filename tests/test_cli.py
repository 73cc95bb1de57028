# tests/test_cli.py

import io

import pytest
from click.testing import CliRunner
from rich.console import Console

from auditor_tools.cli import main as cli_main
from auditor_tools.cli.main import EXIT_BACKEND_UNAVAILABLE, EXIT_JOB_FAILED, ConsoleRenderTarget, cli
from auditor_tools.core.config_manager import AppSettings
from auditor_tools.core.event_log import LogEntry, Severity
from auditor_tools.core.job_events import JobError
from auditor_tools.gui.log_panel import PLACEHOLDER_TEXT, LogLine


@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    monkeypatch.setattr(cli_main, "setup_logging", lambda console_level=None: None)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, fake_backend):
    def _invoke(*args, **kwargs):
        obj = {"backend": fake_backend, "settings": AppSettings()}
        return runner.invoke(cli, list(args), obj=obj, **kwargs)
    return _invoke


@pytest.fixture
def evidence(tmp_path):
    folder = tmp_path / "evidence"
    folder.mkdir()
    return folder


def test_check_reports_ready_engine(invoke):
    result = invoke("check")
    assert result.exit_code == 0
    assert "Office engine found" in result.output


def test_check_reports_missing_engine(invoke, fake_backend):
    fake_backend.available = False
    result = invoke("check")
    assert result.exit_code == EXIT_BACKEND_UNAVAILABLE
    assert "Office engine not found" in result.output


def test_convert_prints_summary(invoke, fake_backend, evidence):
    result = invoke("convert", str(evidence), "--yes")
    assert result.exit_code == 0, result.output
    assert fake_backend.started_paths == [str(evidence)]
    assert "Conversion Summary" in result.output
    assert "Processed 7 of 10 files." in result.output
    assert "Skipped Files" in result.output


def test_convert_filters_log_by_level(invoke, evidence):
    quiet = invoke("convert", str(evidence), "--yes", "--level", "error")
    assert "Skipped one file" not in quiet.output

    verbose = invoke("convert", str(evidence), "--yes", "--level", "info")
    assert "Starting processing..." in verbose.output
    assert "Skipped one file" in verbose.output


def test_convert_asks_for_confirmation(invoke, fake_backend, evidence):
    result = invoke("convert", str(evidence), input="n\n")
    assert result.exit_code != 0
    assert fake_backend.started_paths == []


def test_convert_without_engine(invoke, fake_backend, evidence):
    fake_backend.available = False
    result = invoke("convert", str(evidence), "--yes")
    assert result.exit_code == EXIT_BACKEND_UNAVAILABLE
    assert fake_backend.started_paths == []


def test_convert_job_failure(invoke, fake_backend, evidence):
    fake_backend.error = JobError("Processing failed: Failed to scan files -> disk error")
    result = invoke("convert", str(evidence), "--yes")
    assert result.exit_code == EXIT_JOB_FAILED
    assert "Error: Processing failed" in result.output


def test_convert_rejected_path(invoke, fake_backend, evidence):
    fake_backend.invalid_paths.add(str(evidence))
    result = invoke("convert", str(evidence), "--yes")
    assert result.exit_code == EXIT_JOB_FAILED
    assert fake_backend.started_paths == []


def test_convert_opens_output_folder(runner, fake_backend, fake_revealer, evidence):
    obj = {"backend": fake_backend, "settings": AppSettings(), "revealer": fake_revealer}
    result = runner.invoke(cli, ["convert", str(evidence), "--yes", "--open"], obj=obj)
    assert result.exit_code == 0, result.output
    assert fake_revealer.opened == [("folder", fake_backend.result.output_path)]


def test_convert_output_starts_without_placeholder(invoke, evidence):
    result = invoke("convert", str(evidence), "--yes", "--level", "error")
    assert result.exit_code == 0, result.output
    assert PLACEHOLDER_TEXT not in result.output


def test_console_target_shows_placeholder_only_after_output():
    output = io.StringIO()
    target = ConsoleRenderTarget(Console(file=output, width=120))

    target.show_placeholder(PLACEHOLDER_TEXT)
    assert output.getvalue() == ""

    target.replace_contents([LogLine(LogEntry(Severity.INFO, "Starting processing..."))])
    target.show_placeholder(PLACEHOLDER_TEXT)
    assert output.getvalue().splitlines()[-1] == PLACEHOLDER_TEXT
