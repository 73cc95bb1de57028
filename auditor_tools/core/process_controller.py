# auditor_tools/core/process_controller.py

import logging
import shutil
import zipfile
from pathlib import Path
from typing import Dict, List, Optional

from .app_state import FileRecord, JobResult
from .excel_converter import convert_excel_to_markdown, is_excel
from .file_operations import (
    copy_directory, extract_zip, get_unique_path, hash_file_sha512, recursive_decompress,
    safe_resolve, timestamp_suffix
)
from .file_scanner import scan_directory
from .job_events import JobError, JobReporter
from .office_converter import ConversionFailed, is_convertible, is_llm_readable
from .report_writer import write_report

logger = logging.getLogger(__name__)

CATEGORY_PREPARING = "Preparing staging folder"
CATEGORY_DECOMPRESSING = "Decompressing zip files"
CATEGORY_SCANNING = "Scanning files"
CATEGORY_CONVERTING = "Converting Documents"
CATEGORY_FINISHING = "Finishing up"
CATEGORY_COMPLETE = "Complete"


class _StepFailed(Exception):
    """Internal: wraps a step's exception with the name of the step that raised it."""

    def __init__(self, step: str, cause: BaseException):
        super().__init__(f"{step} -> {cause}")


class ProcessController:
    """
    Runs one conversion job end to end:

    1. Prepare a staging copy of the input (copy a folder, expand a zip).
    2. Recursively expand nested archives inside the staging folder.
    3. Scan the staging folder into report records.
    4. Hash every file, convert Excel workbooks to Markdown and other office
       documents to PDF through the office engine.
    5. Export processed files into a flat, de-duplicated output folder.
    6. Write the XLSX report.

    The original input is never modified.
    """

    def __init__(self, reporter: JobReporter, converter):
        self.reporter = reporter
        self.converter = converter
        self.records: List[FileRecord] = []

    def start_processing(self, input_path: Path) -> JobResult:
        """
        Runs the whole pipeline and returns the job result.

        Raises:
            JobError: if any step fails; the message names the failing step and its cause.
        """
        self.reporter.info("Starting processing...")
        self.records = []
        try:
            working_path = self._run_step("Failed to prepare workspace", self.prepare_workspace, input_path)
            self._run_step("Failed during recursive decompression", self.decompress_archives, working_path)
            self._run_step("Failed to scan files", self.scan_files, working_path)
            self.reporter.info(f"Found {len(self.records)} files. Starting conversion and hashing...")
            self._run_step("Failed during file processing loop", self.process_file_entries, working_path)
            result = self._run_step("Failed to finalize output", self.finalize_output, working_path)
        except _StepFailed as e:
            message = f"Processing failed: {e}"
            self.reporter.error(message)
            raise JobError(message) from e.__cause__

        self.reporter.info(f"Processing complete. {result.processed_count} files processed. "
                           f"Output: {result.output_path}")
        return result

    def _run_step(self, step: str, func, *args):
        try:
            return func(*args)
        except (OSError, ValueError, RuntimeError, zipfile.BadZipFile) as e:
            logger.error(f"{step}: {e}", exc_info=True)
            raise _StepFailed(step, e) from e

    # --- Pipeline Steps ---

    def prepare_workspace(self, input_path: Path) -> Path:
        """Creates the sibling '<name>__<timestamp>' staging folder and fills it."""
        if not input_path.exists():
            raise ValueError(f"Path does not exist: {input_path}")

        if input_path.is_dir():
            staging = get_unique_path(input_path.parent / f"{input_path.name}__{timestamp_suffix()}")
            self.reporter.info(f"Input is a folder, copying to staging folder: {staging}")
            self.reporter.progress(0, 1, CATEGORY_PREPARING)
            copy_directory(input_path, staging)
            return staging

        staging = get_unique_path(input_path.parent / f"{input_path.stem}__{timestamp_suffix()}")
        if input_path.suffix.lower() == ".zip":
            self.reporter.info(f"Input is a ZIP file, expanding: {input_path}")
            self.reporter.progress(0, 1, CATEGORY_DECOMPRESSING)
            extract_zip(input_path, staging)
        else:
            self.reporter.info(f"Input is a single file, copying to staging folder: {staging}")
            self.reporter.progress(0, 1, CATEGORY_PREPARING)
            staging.mkdir(parents=True)
            shutil.copy2(input_path, staging / input_path.name)
        return staging

    def decompress_archives(self, working_path: Path):
        self.reporter.info("Starting recursive decompression...")
        self.reporter.progress(0, 1, CATEGORY_DECOMPRESSING)
        expanded = recursive_decompress(working_path)
        if expanded:
            self.reporter.info(f"Expanded {expanded} nested archive(s).")

    def scan_files(self, working_path: Path):
        self.reporter.info("Scanning and cataloging files...")
        self.reporter.progress(0, 0, CATEGORY_SCANNING)
        self.records = scan_directory(working_path)

    def process_file_entries(self, working_path: Path):
        resolved = []
        for record in self.records:
            file_path = safe_resolve(working_path, record.relative_path)
            if file_path is None:
                record.mark_skipped("Path validation failed - potential path traversal")
                self.reporter.warning(f"Blocked path traversal attempt: {record.relative_path}")
            resolved.append(file_path)

        to_process = [p for p in resolved if p is not None and p.exists()
                      and (is_convertible(p) or is_llm_readable(p))]
        total = len(to_process)
        self.reporter.info(f"Found {total} files to convert/process out of {len(self.records)} total files")
        if total:
            self.reporter.progress(0, total, CATEGORY_CONVERTING)

        done = 0
        for record, file_path in zip(self.records, resolved):
            if file_path is None:
                continue
            if not file_path.exists():
                record.mark_skipped("File not found")
                continue
            needs_processing = is_convertible(file_path) or is_llm_readable(file_path)
            self._process_single_file(record, file_path, working_path)
            if needs_processing:
                done += 1
                self.reporter.progress(done, total, CATEGORY_CONVERTING)

    def _process_single_file(self, record: FileRecord, file_path: Path, working_path: Path):
        try:
            record.sha512 = hash_file_sha512(file_path)
        except OSError as e:
            self.reporter.warning(f"Failed to hash {file_path}: {e}")
            record.mark_skipped(f"Hash failed: {e}")
            return

        if is_convertible(file_path):
            try:
                if is_excel(file_path):
                    converted = convert_excel_to_markdown(file_path)
                else:
                    converted = self.converter.convert(file_path)
            except (ConversionFailed, OSError) as e:
                self.reporter.error(f"Conversion failed for {file_path}: {e}")
                record.mark_skipped(f"Conversion failed: {e}")
                return
            self.reporter.info(f"Converted {file_path.name} to {converted.name}")
            record.file_name = converted.name
            record.converted_file_name = converted.name
            record.relative_path = converted.relative_to(working_path).as_posix()
            try:
                record.sha512 = hash_file_sha512(converted)
            except OSError as e:
                self.reporter.warning(f"Failed to hash converted file {converted}: {e}")
                record.sha512 = None
            record.processed = True
        elif is_llm_readable(file_path):
            record.processed = True
        else:
            record.mark_skipped("Not LLM-readable and not convertible")

    def finalize_output(self, working_path: Path) -> JobResult:
        total = len(self.records)
        output_path = working_path.parent / f"{working_path.name}_LLM"

        self.reporter.info("Exporting LLM-readable files...")
        self.reporter.progress(total, total, CATEGORY_FINISHING)
        self.export_files(working_path, output_path)

        report_path = output_path / f"{working_path.name}_LLM_file-report.xlsx"
        self.reporter.info("Generating report...")
        write_report(self.records, report_path)

        self.reporter.progress(total, total, CATEGORY_COMPLETE)
        return JobResult(
            entries=tuple(self.records),
            staging_path=str(working_path),
            output_path=str(output_path),
            report_path=str(report_path),
        )

    def export_files(self, working_path: Path, output_path: Path) -> int:
        """
        Copies every processed file into the flat output folder, skipping
        content that was already copied (same SHA-512) and numbering name clashes.
        """
        output_path.mkdir(parents=True, exist_ok=True)
        seen: Dict[str, Path] = {}
        copied = skipped = 0
        for record in self.records:
            if not record.processed:
                continue
            source = safe_resolve(working_path, record.relative_path)
            if source is None or not source.exists():
                self.reporter.warning(f"Source file does not exist: {record.relative_path}")
                continue

            digest = record.sha512 or self._try_hash(source)
            if digest is None:
                continue
            if digest in seen:
                self.reporter.info(f"Skipping duplicate (hash {digest[:16]}): {source.name} "
                                   f"(already copied as {seen[digest].name})")
                skipped += 1
                continue

            destination = get_unique_path(output_path / record.file_name)
            shutil.copy2(source, destination)
            seen[digest] = destination
            copied += 1

        self.reporter.info(f"Export complete: {copied} files copied, {skipped} duplicates skipped.")
        return copied

    def _try_hash(self, path: Path) -> Optional[str]:
        try:
            return hash_file_sha512(path)
        except OSError as e:
            self.reporter.warning(f"Failed to hash file {path}: {e}")
            return None
