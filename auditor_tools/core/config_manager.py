# auditor_tools/core/config_manager.py

import json
import logging
import shutil
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .event_log import Severity

logger = logging.getLogger(__name__)

THEMES = ("dark", "light")
DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "settings.json"


@dataclass
class AppSettings:
    """User preferences persisted between sessions."""
    theme: str = "dark"
    default_severity: str = Severity.WARNING.value
    office_path: Optional[str] = None

    @property
    def severity(self) -> Severity:
        return Severity.parse(self.default_severity)

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        settings = cls()
        theme = data.get("theme", settings.theme)
        if theme in THEMES:
            settings.theme = theme
        else:
            logger.warning(f"Unknown theme '{theme}' in settings, using '{settings.theme}'.")
        settings.default_severity = Severity.parse(data.get("default_severity", settings.default_severity)).value
        settings.office_path = data.get("office_path") or None
        return settings


def load_settings(config_path: Path = DEFAULT_SETTINGS_PATH) -> AppSettings:
    """
    Reads the settings file. A missing or unreadable file is not fatal: the
    defaults are returned and the problem is logged.
    """
    if not config_path.exists():
        logger.info(f"No settings file at {config_path}, using defaults.")
        return AppSettings()
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read settings from {config_path}: {e}. Using defaults.")
        return AppSettings()
    if not isinstance(data, dict):
        logger.warning(f"Settings file {config_path} does not hold an object. Using defaults.")
        return AppSettings()
    return AppSettings.from_dict(data)


def save_settings(settings: AppSettings, config_path: Path = DEFAULT_SETTINGS_PATH) -> bool:
    """
    Writes the settings file, keeping a '.json.bak' copy of the previous version.
    If the write fails the backup is restored.

    Returns:
        True on success, False if the settings could not be saved.
    """
    backup_path = config_path.with_suffix(".json.bak")
    had_backup = False
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        if config_path.exists():
            shutil.copy(config_path, backup_path)
            had_backup = True
            logger.info(f"Settings backup created at: {backup_path}")

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, indent=2)
        logger.info(f"Settings saved to {config_path}")
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Failed to save settings: {e}", exc_info=True)
        if had_backup and backup_path.exists():
            shutil.copy(backup_path, config_path)
            logger.warning("Restored settings from backup due to a save failure.")
        return False
