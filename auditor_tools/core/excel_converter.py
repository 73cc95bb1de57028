# auditor_tools/core/excel_converter.py

"""
Converts Excel workbooks to Markdown without the office engine.

Each sheet becomes a '## Sheet: <name>' section holding a pipe table whose first
row is the header. Short rows are padded to the widest row, and '|' inside a cell
is escaped.
"""

import datetime
import logging
import zipfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .office_converter import CONVERTED_MARKER, ConversionFailed

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = {"xls", "xlsx"}
# Sheets added by earlier conversion runs; they carry no evidence.
IGNORED_SHEETS = {"Conversion Notice"}
EMPTY_SHEET_MARKER = "*Sheet is empty*"
NO_SHEETS_MARKER = "*Workbook contains no sheets*"

# (sheet name, rows) on success, (sheet name, error) when a sheet could not be read.
SheetData = Tuple[str, Optional[List[list]], Optional[Exception]]


def is_excel(file_path: Path) -> bool:
    return file_path.suffix.lower().lstrip(".") in EXCEL_EXTENSIONS


def format_cell(value) -> str:
    """
    Renders a cell as table text. Numbers keep at most two decimals, with
    trailing zeros dropped; values below 0.01 keep six so they don't read as 0.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        if value == 0:
            return "0"
        if abs(value) < 0.01:
            return f"{value:.6f}"
        return f"{value:.2f}".rstrip("0").rstrip(".")
    return str(value)


def sheet_to_markdown(sheet_name: str, rows: Sequence[Sequence[str]]) -> List[str]:
    """Renders one sheet as Markdown lines: heading, blank line, table (or the empty marker), blank line."""
    lines = [f"## Sheet: {sheet_name}", ""]
    width = max((len(row) for row in rows), default=0)
    if width == 0:
        return lines + [EMPTY_SHEET_MARKER, ""]

    def table_row(cells: Sequence[str]) -> str:
        padded = list(cells) + [""] * (width - len(cells))
        return "| " + " | ".join(cell.replace("|", "\\|") for cell in padded) + " |"

    lines.append(table_row(rows[0]))
    lines.append("|" + "---|" * width)
    lines.extend(table_row(row) for row in rows[1:])
    lines.append("")
    return lines


def _trim(rows) -> List[List[str]]:
    """Formats every cell, drops trailing empty cells and trailing empty rows."""
    trimmed = []
    for row in rows:
        cells = [format_cell(value) for value in row]
        while cells and cells[-1] == "":
            cells.pop()
        trimmed.append(cells)
    while trimmed and not trimmed[-1]:
        trimmed.pop()
    return trimmed


def _read_xlsx(file_path: Path) -> List[SheetData]:
    try:
        workbook = load_workbook(file_path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ConversionFailed(f"Failed to open XLSX file: {e}") from e
    sheets = []
    try:
        for sheet in workbook.worksheets:
            try:
                sheets.append((sheet.title, _trim(sheet.iter_rows(values_only=True)), None))
            except (ValueError, KeyError, TypeError) as e:
                sheets.append((sheet.title, None, e))
    finally:
        workbook.close()
    return sheets


def _read_xls(file_path: Path) -> List[SheetData]:
    try:
        book = xlrd.open_workbook(str(file_path))
    except (xlrd.XLRDError, OSError) as e:
        raise ConversionFailed(f"Failed to open XLS file: {e}") from e
    sheets = []
    try:
        for sheet in book.sheets():
            try:
                rows = (sheet.row_values(index) for index in range(sheet.nrows))
                sheets.append((sheet.name, _trim(rows), None))
            except (xlrd.XLRDError, IndexError) as e:
                sheets.append((sheet.name, None, e))
    finally:
        book.release_resources()
    return sheets


def convert_excel_to_markdown(file_path: Path) -> Path:
    """
    Writes '<stem>__converted.md' next to `file_path` and returns its path.

    Raises:
        ConversionFailed: if the workbook cannot be opened or the output cannot be written.
    """
    logger.info(f"Converting Excel file {file_path} to markdown")
    extension = file_path.suffix.lower().lstrip(".")
    if extension == "xlsx":
        sheets = _read_xlsx(file_path)
    elif extension == "xls":
        sheets = _read_xls(file_path)
    else:
        raise ConversionFailed(f"Unsupported Excel file format: {extension}")

    lines = [
        f"# Excel File: {file_path.name}",
        "",
        f"Converted on: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
    ]
    for name, rows, error in sheets:
        if name in IGNORED_SHEETS:
            continue
        if error is not None:
            logger.error(f"Error reading sheet {name}: {error}")
            lines.extend([f"## Sheet: {name} (Error)", "", f"*Error processing sheet: {error}*", ""])
            continue
        logger.debug(f"Processing sheet: {name}")
        lines.extend(sheet_to_markdown(name, rows))

    if not sheets:
        logger.warning(f"Workbook contains no sheets: {file_path}")
        lines.append(NO_SHEETS_MARKER)

    output_path = file_path.parent / f"{file_path.stem}{CONVERTED_MARKER}.md"
    try:
        output_path.write_text("\n".join(lines), encoding="utf-8")
    except OSError as e:
        raise ConversionFailed(f"Failed to write markdown file {output_path}: {e}") from e
    logger.info(f"Converted Excel file to markdown: {output_path} ({len(sheets)} sheet(s))")
    return output_path
