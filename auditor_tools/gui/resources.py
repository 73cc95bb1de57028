# auditor_tools/gui/resources.py

import logging
import sys
from pathlib import Path

from PySide6.QtCore import QDir, QSize
from PySide6.QtGui import QIcon

from auditor_tools.core.config_manager import THEMES, load_settings, save_settings

logger = logging.getLogger(__name__)


# --- Resource Path Resolver ---
def get_resource_path(relative_path: str) -> Path:
    """
    Gets the absolute path to a resource, both when running from source and from
    a PyInstaller bundle (which unpacks into `sys._MEIPASS`).
    """
    try:
        base_path = Path(sys._MEIPASS)
    except AttributeError:
        base_path = Path(__file__).resolve().parent.parent.parent
    return base_path / relative_path


ASSETS_PATH = get_resource_path('assets')
STYLES_PATH = ASSETS_PATH / 'styles'
THEMES_PATH = STYLES_PATH / 'themes'
ICONS_PATH = ASSETS_PATH / 'icons'
SETTINGS_FILE_PATH = get_resource_path('config') / 'settings.json'

REQUIRED_ICONS = ["app_icon", "folder-open", "archive", "start", "reset", "clear", "success", "warning", "error", "info"]
FALLBACK_ICON_NAME = "app_icon"
ICON_SIZE = QSize(20, 20)

_icon_cache = {}


def theme_file(theme: str) -> str:
    return f"{theme}_theme.qss"


def validate_assets():
    """Logs a warning for every missing theme or icon, so setup problems show up at startup."""
    logger.info("Validating GUI assets...")
    missing_themes = [t for t in THEMES if not (THEMES_PATH / theme_file(t)).exists()]
    if missing_themes:
        logger.warning(f"Missing theme stylesheets in '{THEMES_PATH}': {', '.join(missing_themes)}")

    missing_icons = [name for name in REQUIRED_ICONS if not (ICONS_PATH / f"{name}.svg").exists()]
    if missing_icons:
        logger.warning(f"Missing required icons in '{ICONS_PATH}': {', '.join(missing_icons)}")
    else:
        logger.info("All required icons found.")


def get_current_theme() -> str:
    return load_settings(SETTINGS_FILE_PATH).theme


def set_current_theme(theme: str) -> bool:
    """Saves the user's theme choice, keeping every other setting."""
    if theme not in THEMES:
        logger.error(f"Unknown theme: {theme}")
        return False
    settings = load_settings(SETTINGS_FILE_PATH)
    settings.theme = theme
    if save_settings(settings, SETTINGS_FILE_PATH):
        logger.info(f"User theme changed to: {theme}")
        return True
    return False


def load_stylesheet() -> str:
    """Loads the stylesheet of the current theme. `assets:` URLs in the QSS resolve against ASSETS_PATH."""
    QDir.addSearchPath("assets", str(ASSETS_PATH))
    theme_path = THEMES_PATH / theme_file(get_current_theme())
    if theme_path.exists():
        logger.info(f"Loading theme: {theme_path.name}")
        return theme_path.read_text(encoding='utf-8')
    logger.error(f"Failed to load theme file: {theme_path}")
    return ""


def get_icon(name: str) -> QIcon:
    """Creates and caches a QIcon from an SVG file, falling back to the app icon."""
    if name in _icon_cache:
        return _icon_cache[name]

    icon_path = ICONS_PATH / f"{name}.svg"
    if not icon_path.exists():
        logger.warning(f"Icon '{name}.svg' not found. Using fallback.")
        if name == FALLBACK_ICON_NAME:
            return QIcon()
        return get_icon(FALLBACK_ICON_NAME)

    icon = QIcon(str(icon_path))
    _icon_cache[name] = icon
    return icon
