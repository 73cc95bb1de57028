# auditor_tools/core/report_writer.py

import logging
from pathlib import Path
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .app_state import FileRecord

logger = logging.getLogger(__name__)

REPORT_SHEET_TITLE = "File Report"
REPORT_HEADERS = [
    "File Name",
    "Converted File Name",
    "SHA512",
    "Processed",
    "Skip Reason",
    "Relative Path",
    "File Type",
    "File Size (Bytes)",
    "File Size (Human)",
    "Last Modified",
    "Created Time",
]
DEFAULT_COLUMN_WIDTH = 15
# Wider columns for names, digests and paths, keyed by header index.
COLUMN_WIDTHS = {0: 30, 1: 30, 2: 64, 5: 40}


def report_row(record: FileRecord) -> list:
    """Flattens a FileRecord into the column order of REPORT_HEADERS."""
    return [
        record.original_file_name,
        record.converted_file_name or "",
        record.sha512 or "",
        "Yes" if record.processed else "No",
        record.skip_reason or "",
        record.original_relative_path,
        record.file_type,
        record.file_size_bytes,
        record.file_size_human,
        record.last_modified,
        record.created_time,
    ]


def write_report(records: Iterable[FileRecord], output_path: Path) -> int:
    """
    Writes the per-file report as a single-sheet XLSX workbook with a bold,
    frozen header row. Returns the number of rows written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = REPORT_SHEET_TITLE

    sheet.append(REPORT_HEADERS)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    sheet.freeze_panes = "A2"

    count = 0
    for record in records:
        row = count + 2
        for column, value in enumerate(report_row(record), start=1):
            cell = sheet.cell(row=row, column=column, value=value)
            # File names are text; a leading '=' must not become a formula.
            if isinstance(value, str) and value.startswith("="):
                cell.data_type = "s"
        count += 1

    for index in range(len(REPORT_HEADERS)):
        sheet.column_dimensions[get_column_letter(index + 1)].width = COLUMN_WIDTHS.get(index, DEFAULT_COLUMN_WIDTH)

    workbook.save(output_path)
    logger.info(f"Report generated successfully: {output_path} ({count} entries)")
    return count
