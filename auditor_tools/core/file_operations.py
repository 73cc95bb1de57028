# auditor_tools/core/file_operations.py

import datetime
import hashlib
import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import Optional

# Set up a logger for this module. The main application will configure its handlers.
logger = logging.getLogger(__name__)

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]
HASH_CHUNK_SIZE = 1024 * 1024

# Files that operating systems and office suites leave behind and that never
# belong in a conversion workspace.
SYSTEM_FILE_PREFIXES = ("~$", "._", ".DS")
SYSTEM_FILE_NAMES = {"desktop.ini", "thumbs.db", ".ds_store"}


def format_file_size(size_bytes: int) -> str:
    """
    Renders a byte count for humans: '512 B', '1.50 KB', '3.00 MB', ...
    Whole bytes are shown without decimals, larger units with two.
    """
    size = float(size_bytes)
    unit_index = 0
    while size >= 1024.0 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024.0
        unit_index += 1
    if unit_index == 0:
        return f"{size_bytes} {SIZE_UNITS[0]}"
    return f"{size:.2f} {SIZE_UNITS[unit_index]}"


def should_skip_file(file_name: str) -> bool:
    """Returns True for OS/office housekeeping files such as '~$draft.docx' or 'Thumbs.db'."""
    return file_name.startswith(SYSTEM_FILE_PREFIXES) or file_name.lower() in SYSTEM_FILE_NAMES


def timestamp_suffix() -> str:
    return datetime.datetime.now().strftime("%Y%m%d_%H%M%S")


def get_unique_path(destination_path: Path) -> Path:
    """
    Generates a unique path if the destination already exists by appending a number.

    Example:
        If 'report.pdf' exists, it will return 'report_1.pdf'.
        If 'report_1.pdf' also exists, it will return 'report_2.pdf'.
    """
    if not destination_path.exists():
        return destination_path

    parent = destination_path.parent
    stem = destination_path.stem
    suffix = destination_path.suffix
    counter = 1

    while True:
        new_path = parent.joinpath(f"{stem}_{counter}{suffix}")
        if not new_path.exists():
            logger.debug(f"Found unique path for '{destination_path}': '{new_path}'")
            return new_path
        counter += 1


def hash_file_sha512(file_path: Path) -> str:
    """Returns the hex SHA-512 digest of a file, read in 1 MB chunks."""
    digest = hashlib.sha512()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def is_within(path: Path, root: Path) -> bool:
    """True if `path` resolves to `root` itself or somewhere beneath it."""
    try:
        path.resolve().relative_to(root.resolve())
        return True
    except ValueError:
        return False


def safe_resolve(root: Path, relative_path: str) -> Optional[Path]:
    """
    Joins a report-relative path onto `root` and returns it only if the result
    stays inside `root`. Leading separators are stripped first.
    """
    sanitized = relative_path.lstrip("/\\")
    candidate = root / sanitized
    if not is_within(candidate, root):
        logger.warning(f"Blocked path traversal attempt: {relative_path}")
        return None
    return candidate


def copy_directory(source_dir: Path, destination_dir: Path) -> int:
    """
    Recursively copies `source_dir` into `destination_dir`, skipping system files.
    Returns the number of files copied.
    """
    copied = 0
    destination_dir.mkdir(parents=True, exist_ok=True)
    for src_path in sorted(source_dir.rglob("*")):
        dst_path = destination_dir / src_path.relative_to(source_dir)
        if src_path.is_dir():
            dst_path.mkdir(parents=True, exist_ok=True)
        elif src_path.is_file():
            if should_skip_file(src_path.name):
                logger.debug(f"Ignoring system file: {src_path.name}")
                continue
            dst_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src_path, dst_path)
            copied += 1
    logger.info(f"Copied {copied} files from '{source_dir}' to '{destination_dir}'")
    return copied


def _sanitize_member_name(name: str) -> Optional[PurePosixPath]:
    """Strips drive letters, leading slashes and '..' segments from a zip member name."""
    parts = [part for part in PurePosixPath(name.replace("\\", "/")).parts
             if part not in ("", "/", ".", "..") and not part.endswith(":")]
    if not parts:
        return None
    return PurePosixPath(*parts)


def extract_zip(zip_path: Path, output_dir: Path) -> int:
    """
    Extracts `zip_path` into `output_dir` without letting any member escape it.
    Returns the number of files written.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written = 0
    with zipfile.ZipFile(zip_path) as archive:
        for member in archive.infolist():
            relative = _sanitize_member_name(member.filename)
            if relative is None or should_skip_file(relative.name):
                continue
            target = output_dir.joinpath(*relative.parts)
            if not is_within(target, output_dir):
                logger.warning(f"Skipping zip member outside extraction folder: {member.filename}")
                continue
            if member.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with archive.open(member) as src, open(target, "wb") as dst:
                shutil.copyfileobj(src, dst)
            written += 1
    logger.info(f"Extracted {written} files from '{zip_path.name}' into '{output_dir}'")
    return written


def recursive_decompress(root: Path, max_rounds: int = 10) -> int:
    """
    Expands every nested .zip under `root` in place (archive.zip -> archive/) and
    removes the archive afterwards, repeating until no archives remain or
    `max_rounds` passes have run. Returns the number of archives expanded.
    """
    visited = set()
    expanded = 0
    for _ in range(max_rounds):
        archives = [p for p in root.rglob("*") if p.is_file() and p.suffix.lower() == ".zip"
                    and p.resolve() not in visited]
        if not archives:
            break
        for archive in archives:
            visited.add(archive.resolve())
            target = get_unique_path(archive.with_suffix(""))
            try:
                extract_zip(archive, target)
                archive.unlink()
                expanded += 1
            except zipfile.BadZipFile:
                logger.warning(f"Skipping unreadable archive: {archive}")
    return expanded
