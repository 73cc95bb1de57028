# auditor_tools/core/office_converter.py

import logging
import os
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

OFFICE_PATH_ENV_VAR = "EPT_LIBREOFFICE_PATH"
CONVERTIBLE_EXTENSIONS = {"doc", "docx", "ppt", "pptx", "xls", "xlsx", "odt", "ods", "odp"}
LLM_READABLE_EXTENSIONS = {"txt", "md", "pdf", "csv", "json", "xml", "html", "htm", "log", "rtf"}
CONVERTED_MARKER = "__converted"


def _extension(file_path: Path) -> str:
    return file_path.suffix.lower().lstrip(".")


def is_convertible(file_path: Path) -> bool:
    return _extension(file_path) in CONVERTIBLE_EXTENSIONS


def is_llm_readable(file_path: Path) -> bool:
    return _extension(file_path) in LLM_READABLE_EXTENSIONS


def _platform_candidates() -> List[str]:
    if sys.platform.startswith("win"):
        return [
            "soffice.exe",
            r"C:\Program Files\LibreOffice\program\soffice.exe",
            r"C:\Program Files (x86)\LibreOffice\program\soffice.exe",
        ]
    if sys.platform == "darwin":
        return ["/Applications/LibreOffice.app/Contents/MacOS/soffice", "soffice"]
    return ["/usr/bin/soffice", "/usr/local/bin/soffice", "soffice", "libreoffice"]


class ConversionFailed(RuntimeError):
    """The office engine ran but did not produce the expected output file."""


class OfficeConverter:
    """
    Thin adapter around the external LibreOffice process. It only knows how to
    find the executable and how to turn one office document into a PDF.
    """

    def __init__(self, office_path: Optional[str] = None):
        self.office_path = office_path

    def find_executable(self) -> Optional[Path]:
        """
        Looks for the office engine in priority order: the configured path, the
        EPT_LIBREOFFICE_PATH environment variable, then well-known install
        locations and the PATH.
        """
        for label, configured in (("settings", self.office_path),
                                  (OFFICE_PATH_ENV_VAR, os.environ.get(OFFICE_PATH_ENV_VAR))):
            if not configured:
                continue
            path = Path(configured).expanduser()
            if path.exists():
                logger.info(f"Using office engine from {label}: {path}")
                return path
            logger.warning(f"{label} points to {configured}, but that file does not exist.")

        for candidate in _platform_candidates():
            found = shutil.which(candidate)
            if found:
                return Path(found)
        logger.error("Office engine not found. Install LibreOffice and make sure 'soffice' is on the PATH.")
        return None

    def convert(self, file_path: Path) -> Path:
        """
        Converts `file_path` to '<stem>__converted.pdf' next to the original.

        The engine writes into a scratch folder first, so an existing '<stem>.pdf'
        beside the document is never overwritten.

        Raises:
            ConversionFailed: if the engine is missing, exits non-zero, or
                leaves no output file behind.
        """
        executable = self.find_executable()
        if executable is None:
            raise ConversionFailed("Office engine not found")

        output_path = file_path.parent / f"{file_path.stem}{CONVERTED_MARKER}.pdf"
        with tempfile.TemporaryDirectory(prefix=".convert-", dir=file_path.parent) as scratch:
            command = [str(executable), "--headless", "--convert-to", "pdf", "--outdir", scratch, str(file_path)]
            logger.info(f"Executing office engine: {command}")

            completed = subprocess.run(command, capture_output=True, text=True)
            logger.debug(f"Office engine exit status {completed.returncode}, stdout: {completed.stdout}, "
                         f"stderr: {completed.stderr}")
            if completed.returncode != 0:
                raise ConversionFailed(f"Office engine exited with status {completed.returncode}: "
                                       f"{completed.stderr.strip() or completed.stdout.strip()}")

            # The engine names its output after the original stem.
            engine_output = Path(scratch) / f"{file_path.stem}.pdf"
            if not engine_output.exists():
                raise ConversionFailed("Conversion completed but output file not found")
            engine_output.replace(output_path)
        return output_path
