"""Configuration manager for hexpanel. Persists settings to ~/.config/hexpanel/settings.json."""

import json
import logging
import os
from pathlib import Path
from typing import Any

XDG_CONFIG_HOME = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
XDG_CACHE_HOME = Path(os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache")
XDG_DATA_HOME = Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")

CONFIG_DIR = XDG_CONFIG_HOME / "hexpanel"
SETTINGS_FILE = CONFIG_DIR / "settings.json"
APPS_FILE = CONFIG_DIR / "apps.json"
TILES_FILE = CONFIG_DIR / "launcher_tiles.json"
CACHE_DIR = XDG_CACHE_HOME / "hexpanel"
ICON_CACHE_DIR = CACHE_DIR / "icons"

# Written by the external list-windows helper, not by us.
WINDOWS_SNAPSHOT_FILE = XDG_CONFIG_HOME / "hexlauncher" / "windows.ini"

DEFAULTS: dict[str, Any] = {
    "window_helper": "list-windows",
    "poll_interval_ms": 2000,
    "warmup_delay_ms": 300,
    "followup_delay_ms": 120,
    "theme_icon_size": 64,
    "osd_client": "osd-client",
    "toggles": {
        "Win10Menu": "/usr/bin/Win10Menu",
        "nmqt": "/usr/bin/nmqt",
        "blueman-manager": "/usr/bin/blueman-manager",
    },
}

_log = logging.getLogger("hexpanel.config")


class Config:
    """Singleton settings manager with JSON persistence."""

    _instance: "Config | None" = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._loaded = False
        return cls._instance

    def __init__(self) -> None:
        if self._loaded:
            return
        self._data: dict[str, Any] = dict(DEFAULTS)
        self._ensure_dirs()
        self._load()
        self._loaded = True

    @staticmethod
    def _ensure_dirs() -> None:
        for d in (CONFIG_DIR, CACHE_DIR, ICON_CACHE_DIR):
            try:
                d.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                _log.warning("Config: cannot create %s: %s", d, e)

    def _load(self) -> None:
        if not SETTINGS_FILE.exists():
            return
        try:
            with open(SETTINGS_FILE, "r", encoding="utf-8") as f:
                saved = json.load(f)
        except (ValueError, RecursionError, OSError) as e:
            _log.warning("Config: ignoring unreadable %s: %s", SETTINGS_FILE, e)
            return
        if not isinstance(saved, dict):
            _log.warning("Config: %s is not a JSON object, using defaults", SETTINGS_FILE)
            return
        self._data.update(saved)

    def save(self) -> None:
        try:
            with open(SETTINGS_FILE, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
        except OSError as e:
            _log.warning("Config: cannot write %s: %s", SETTINGS_FILE, e)

    def get(self, key: str, fallback: Any = None) -> Any:
        return self._data.get(key, fallback if fallback is not None else DEFAULTS.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.save()

    def reset(self) -> None:
        self._data = dict(DEFAULTS)
        self.save()
