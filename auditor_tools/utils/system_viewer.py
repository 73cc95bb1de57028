# auditor_tools/utils/system_viewer.py

import logging
import os
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def _open_with_system(target: Path):
    if sys.platform.startswith("win"):
        os.startfile(str(target))
    elif sys.platform == "darwin":
        subprocess.Popen(("open", str(target)))
    else:
        subprocess.Popen(("xdg-open", str(target)))


def open_folder(path: str):
    """Opens a folder in the platform's file manager. Raises FileNotFoundError if it is gone."""
    folder = Path(path)
    if not folder.is_dir():
        raise FileNotFoundError(f"Folder not found: {path}")
    logger.info(f"Opening folder in system viewer: {folder}")
    _open_with_system(folder)


def open_file(path: str):
    """Opens a file with its default application."""
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    logger.info(f"Opening file in default application: {file_path}")
    _open_with_system(file_path)
