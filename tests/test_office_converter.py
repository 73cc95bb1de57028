# tests/test_office_converter.py

import subprocess
from pathlib import Path

import pytest

from auditor_tools.core import office_converter
from auditor_tools.core.office_converter import (
    OFFICE_PATH_ENV_VAR, ConversionFailed, OfficeConverter, is_convertible, is_llm_readable
)


@pytest.fixture(autouse=True)
def no_env_override(monkeypatch):
    monkeypatch.delenv(OFFICE_PATH_ENV_VAR, raising=False)


@pytest.fixture
def engine(tmp_path):
    path = tmp_path / "soffice"
    path.write_text("#!/bin/sh\n")
    return path


def test_classification():
    assert is_convertible(Path("a.DOCX"))
    assert is_convertible(Path("sheet.xlsx"))
    assert not is_convertible(Path("a.pdf"))
    assert is_llm_readable(Path("a.pdf"))
    assert not is_llm_readable(Path("a.bin"))


def test_configured_path_wins(engine, monkeypatch):
    monkeypatch.setattr(office_converter.shutil, "which", lambda name: "/somewhere/else")
    assert OfficeConverter(str(engine)).find_executable() == engine


def test_environment_variable_is_used(engine, monkeypatch):
    monkeypatch.setenv(OFFICE_PATH_ENV_VAR, str(engine))
    monkeypatch.setattr(office_converter.shutil, "which", lambda name: None)
    assert OfficeConverter().find_executable() == engine


def test_missing_configured_path_falls_back_to_search(tmp_path, monkeypatch):
    monkeypatch.setattr(office_converter.shutil, "which",
                        lambda name: "/opt/bin/soffice" if name == "soffice" else None)
    converter = OfficeConverter(str(tmp_path / "nope"))
    assert converter.find_executable() == Path("/opt/bin/soffice")


def test_not_found(monkeypatch):
    monkeypatch.setattr(office_converter.shutil, "which", lambda name: None)
    assert OfficeConverter().find_executable() is None
    with pytest.raises(ConversionFailed):
        OfficeConverter().convert(Path("a.docx"))


def fake_engine(calls, output=b"%PDF"):
    """Stands in for subprocess.run; writes '<stem>.pdf' into the requested --outdir."""
    def run(command, capture_output, text):
        calls.append(command)
        outdir = Path(command[command.index("--outdir") + 1])
        (outdir / f"{Path(command[-1]).stem}.pdf").write_bytes(output)
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")
    return run


def test_convert_renames_engine_output(engine, tmp_path, monkeypatch):
    document = tmp_path / "letter.docx"
    document.write_bytes(b"docx")
    calls = []
    monkeypatch.setattr(office_converter.subprocess, "run", fake_engine(calls))

    output = OfficeConverter(str(engine)).convert(document)

    assert output == tmp_path / "letter__converted.pdf"
    assert output.read_bytes() == b"%PDF"
    assert not (tmp_path / "letter.pdf").exists()
    assert calls[0][1:5] == ["--headless", "--convert-to", "pdf", "--outdir"]
    assert calls[0][-1] == str(document)


def test_convert_keeps_existing_sibling_pdf(engine, tmp_path, monkeypatch):
    document = tmp_path / "letter.docx"
    document.write_bytes(b"docx")
    sibling = tmp_path / "letter.pdf"
    sibling.write_bytes(b"%PDF original")
    calls = []
    monkeypatch.setattr(office_converter.subprocess, "run", fake_engine(calls, b"%PDF converted"))

    output = OfficeConverter(str(engine)).convert(document)

    assert sibling.read_bytes() == b"%PDF original"
    assert output.read_bytes() == b"%PDF converted"
    assert Path(calls[0][5]) != tmp_path
    assert sorted(p.name for p in tmp_path.iterdir()) == ["letter.docx", "letter.pdf", "letter__converted.pdf",
                                                         "soffice"]


def test_convert_reports_engine_failure(engine, tmp_path, monkeypatch):
    document = tmp_path / "letter.docx"
    document.write_bytes(b"docx")
    monkeypatch.setattr(office_converter.subprocess, "run",
                        lambda command, capture_output, text: subprocess.CompletedProcess(
                            command, 1, stdout="", stderr="source file could not be loaded"))
    with pytest.raises(ConversionFailed, match="status 1: source file could not be loaded"):
        OfficeConverter(str(engine)).convert(document)


def test_convert_without_output_fails(engine, tmp_path, monkeypatch):
    document = tmp_path / "letter.docx"
    document.write_bytes(b"docx")
    monkeypatch.setattr(office_converter.subprocess, "run",
                        lambda command, capture_output, text: subprocess.CompletedProcess(command, 0, "", ""))
    with pytest.raises(ConversionFailed, match="output file not found"):
        OfficeConverter(str(engine)).convert(document)
