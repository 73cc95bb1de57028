# auditor_tools/core/file_scanner.py

import datetime
import logging
import os
from pathlib import Path
from typing import List

from .app_state import FileRecord
from .file_operations import should_skip_file

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
PROGRESS_LOG_INTERVAL = 100


def _format_time(epoch_seconds: float) -> str:
    return datetime.datetime.fromtimestamp(epoch_seconds).strftime(TIME_FORMAT)


def scan_directory(root_path: Path) -> List[FileRecord]:
    """
    Walks `root_path` and catalogs every regular file as a FileRecord, ignoring
    system housekeeping files. Relative paths use forward slashes so reports
    read the same on every platform.
    """
    logger.info(f"Scanning directory: {root_path}")
    records = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames.sort()
        for filename in sorted(filenames):
            if should_skip_file(filename):
                logger.debug(f"Ignoring system file: {filename}")
                continue
            path = Path(dirpath) / filename
            try:
                stat = path.stat()
            except OSError as e:
                logger.warning(f"Could not read metadata for '{path}': {e}")
                continue

            last_modified = _format_time(stat.st_mtime)
            # st_birthtime only exists on some platforms; fall back to the modification time.
            birth = getattr(stat, "st_birthtime", None)
            created_time = _format_time(birth) if birth else last_modified

            records.append(FileRecord.scanned(
                file_name=filename,
                relative_path=path.relative_to(root_path).as_posix(),
                file_type=path.suffix.lstrip(".") or "unknown",
                file_size_bytes=stat.st_size,
                last_modified=last_modified,
                created_time=created_time,
            ))
            if len(records) % PROGRESS_LOG_INTERVAL == 0:
                logger.debug(f"Scanned {len(records)} files so far...")

    logger.info(f"File scan complete: found {len(records)} files")
    return records
