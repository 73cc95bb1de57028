# tests/test_excel_converter.py

from pathlib import Path

import pytest
from openpyxl import Workbook

from auditor_tools.core.excel_converter import (
    EMPTY_SHEET_MARKER, NO_SHEETS_MARKER, convert_excel_to_markdown, format_cell, is_excel,
    sheet_to_markdown
)
from auditor_tools.core.office_converter import ConversionFailed


@pytest.fixture
def ledger(tmp_path):
    """A workbook with two filled sheets and one empty sheet."""
    workbook = Workbook()
    totals = workbook.active
    totals.title = "Totals"
    totals.append(["Account", "Amount", "Note"])
    totals.append(["cash", 1200, "a|b"])
    totals.append(["fees", 0.005])
    workbook.create_sheet("Blank")
    people = workbook.create_sheet("People")
    people.append(["Name"])
    people.append(["Ada"])
    path = tmp_path / "ledger.xlsx"
    workbook.save(path)
    return path


def test_is_excel():
    assert is_excel(Path("a/Book.XLSX"))
    assert is_excel(Path("old.xls"))
    assert not is_excel(Path("deck.pptx"))


@pytest.mark.parametrize("value, expected", [
    (None, ""),
    (0, "0"),
    (0.0, "0"),
    (1200, "1200"),
    (12.5, "12.5"),
    (3.14159, "3.14"),
    (0.005, "0.005000"),
    (True, "true"),
    ("text", "text"),
])
def test_format_cell(value, expected):
    assert format_cell(value) == expected


def test_convert_writes_one_table_per_sheet(ledger):
    output = convert_excel_to_markdown(ledger)

    assert output == ledger.parent / "ledger__converted.md"
    lines = output.read_text(encoding="utf-8").split("\n")
    assert lines[0] == "# Excel File: ledger.xlsx"
    assert lines[2].startswith("Converted on: ")
    assert "## Sheet: Totals" in lines
    assert "## Sheet: People" in lines
    assert lines.index("## Sheet: Totals") < lines.index("## Sheet: Blank") < lines.index("## Sheet: People")

    assert "| Account | Amount | Note |" in lines
    assert "|---|---|---|" in lines
    assert "| Name |" in lines
    assert "| Ada |" in lines


def test_convert_pads_short_rows_and_escapes_pipes(ledger):
    text = convert_excel_to_markdown(ledger).read_text(encoding="utf-8")

    assert "| cash | 1200 | a\\|b |" in text
    assert "| fees | 0.005000 |  |" in text


def test_convert_marks_empty_sheets(ledger):
    lines = convert_excel_to_markdown(ledger).read_text(encoding="utf-8").split("\n")

    blank = lines.index("## Sheet: Blank")
    assert lines[blank + 2] == EMPTY_SHEET_MARKER


def test_conversion_notice_sheet_is_skipped(tmp_path):
    workbook = Workbook()
    workbook.active.title = "Conversion Notice"
    workbook.active.append(["converted earlier"])
    data = workbook.create_sheet("Data")
    data.append(["x"])
    path = tmp_path / "noticed.xlsx"
    workbook.save(path)

    text = convert_excel_to_markdown(path).read_text(encoding="utf-8")

    assert "Conversion Notice" not in text
    assert "## Sheet: Data" in text


def test_sheet_to_markdown_without_rows():
    assert sheet_to_markdown("Empty", []) == ["## Sheet: Empty", "", EMPTY_SHEET_MARKER, ""]


def test_sheet_to_markdown_with_header_only():
    assert sheet_to_markdown("Head", [["a", "b"]]) == ["## Sheet: Head", "", "| a | b |", "|---|---|", ""]


def test_no_sheets_marker_is_written(tmp_path, monkeypatch):
    from auditor_tools.core import excel_converter

    path = tmp_path / "hollow.xlsx"
    path.write_bytes(b"")
    monkeypatch.setattr(excel_converter, "_read_xlsx", lambda file_path: [])

    text = convert_excel_to_markdown(path).read_text(encoding="utf-8")

    assert text.endswith(NO_SHEETS_MARKER)


@pytest.mark.parametrize("name", ["broken.xlsx", "broken.xls"])
def test_corrupt_workbook_raises(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"this is not a spreadsheet")

    with pytest.raises(ConversionFailed):
        convert_excel_to_markdown(path)
    assert not (tmp_path / "broken__converted.md").exists()
