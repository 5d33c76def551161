"""Icon name → URI resolution with a rasterizing theme cache.

Resolution order:
  1. Existing absolute file path
  2. Fixed hicolor/pixmaps directories, .png before .svg
  3. Cached theme rasterization (~/.cache/hexpanel/icons/{name}_{size}.png),
     then QIcon.fromTheme, only when the caller asks for the theme path
  4. Bundled placeholder

Exact files beat the theme engine: theme lookups are slow and happily
return a generic fallback icon.
"""

from __future__ import annotations

import os
from pathlib import Path

from PyQt6.QtCore import QCoreApplication
from PyQt6.QtGui import QGuiApplication, QIcon

from hexpanel.core.config import ICON_CACHE_DIR, XDG_DATA_HOME
from hexpanel.core.logger import get_logger

_log = get_logger("icon_resolver")

ICON_DIRS = [
    Path("/usr/share/icons/hicolor/256x256/apps"),
    Path("/usr/share/icons/hicolor/128x128/apps"),
    Path("/usr/share/icons/hicolor/64x64/apps"),
    Path("/usr/share/icons/hicolor/48x48/apps"),
    Path("/usr/share/icons/hicolor/scalable/apps"),
    Path("/usr/share/pixmaps"),
    XDG_DATA_HOME / "icons" / "hicolor" / "256x256" / "apps",
]

ICON_EXTENSIONS = [".png", ".svg"]
THEME_ICON_SIZE = 64

PLACEHOLDER_ICON = Path(__file__).resolve().parent.parent / "assets" / "placeholder.svg"


def placeholder_uri() -> str:
    return PLACEHOLDER_ICON.as_uri()


def resolve_icon(name: str, use_theme: bool = False, size: int = THEME_ICON_SIZE) -> str:
    """Resolve an icon name or path to a file:// URI. Never returns an empty string."""
    if not name:
        return placeholder_uri()

    if os.path.isabs(name):
        if os.path.isfile(name):
            return Path(name).as_uri()
        return placeholder_uri()

    found = _search_icon_dirs(name)
    if found is not None:
        return found.as_uri()

    if use_theme:
        cached = _theme_icon(name, size)
        if cached is not None:
            return cached.as_uri()

    _log.debug("No icon found for %r, using placeholder", name)
    return placeholder_uri()


def _search_icon_dirs(name: str) -> Path | None:
    for d in ICON_DIRS:
        for ext in ICON_EXTENSIONS:
            candidate = d / f"{name}{ext}"
            if candidate.is_file():
                return candidate
    return None


def cache_path(name: str, size: int = THEME_ICON_SIZE) -> Path:
    safe = name.replace(os.sep, "_")
    return ICON_CACHE_DIR / f"{safe}_{size}.png"


def _theme_icon(name: str, size: int) -> Path | None:
    """Return the cached rasterization of a theme icon, creating it on first use."""
    path = cache_path(name, size)
    if path.is_file():
        return path

    # QIcon needs a GUI application; a bare QCoreApplication (or none) can't render.
    if not isinstance(QCoreApplication.instance(), QGuiApplication):
        _log.debug("Theme lookup for %r skipped: no QGuiApplication", name)
        return None

    icon = QIcon.fromTheme(name)
    if icon.isNull():
        return None
    pixmap = icon.pixmap(size, size)
    if pixmap.isNull():
        return None

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        _log.warning("Cannot create icon cache %s: %s", path.parent, e)
        return None
    if not pixmap.save(str(path), "PNG"):
        _log.warning("Failed to cache theme icon %r at %s", name, path)
        return None
    _log.debug("Cached theme icon %r at %s", name, path)
    return path
