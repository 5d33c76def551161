""".desktop file parser. Extracts name, icon and launch command from the main section."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from hexpanel.core.config import XDG_DATA_HOME
from hexpanel.core.logger import get_logger

_log = get_logger("desktop_parser")

USER_APPLICATIONS_DIR = XDG_DATA_HOME / "applications"

# User entries shadow system ones with the same file name.
APPLICATIONS_DIRS = [
    USER_APPLICATIONS_DIR,
    Path("/usr/share/applications"),
    Path("/usr/local/share/applications"),
]

MAIN_SECTION = "[Desktop Entry]"
ACTION_SECTION_PREFIX = "[Desktop Action"

# Field codes are never substituted, we always launch without arguments.
FIELD_CODE_RE = re.compile(r"%[fFuUdDnNickvVmM]")


@dataclass
class DesktopEntry:
    """Parsed fields from a .desktop file."""
    file_path: str = ""
    name: str = ""
    icon: str = ""
    exec_cmd: str = ""
    no_display: bool = False

    @property
    def is_launchable(self) -> bool:
        return bool(self.name) and bool(self.exec_cmd) and not self.no_display


def strip_field_codes(command: str) -> str:
    """Remove %U, %f and friends from an Exec value. Surrounding spaces are kept."""
    return FIELD_CODE_RE.sub("", command)


def parse_desktop_file(path: str | Path) -> DesktopEntry | None:
    """Parse a single .desktop file and return a DesktopEntry, or None if it can't be read.

    Only keys inside ``[Desktop Entry]`` count. Any other section header
    leaves the main section, and the first ``[Desktop Action ...]`` header
    ends parsing since everything after it belongs to actions. The first
    ``Name``, ``Icon`` and ``Exec`` win over later duplicates.
    """
    entry = DesktopEntry(file_path=str(path))
    in_main_section = False
    seen: set[str] = set()
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for raw_line in f:
                line = raw_line.strip()
                if line.startswith("["):
                    if line == MAIN_SECTION:
                        in_main_section = True
                    elif line.startswith(ACTION_SECTION_PREFIX):
                        break
                    else:
                        in_main_section = False
                    continue
                if not in_main_section or "=" not in line:
                    continue

                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()

                if key in seen:
                    continue
                seen.add(key)

                if key == "Name":
                    entry.name = value
                elif key == "Icon":
                    entry.icon = value
                elif key == "Exec":
                    entry.exec_cmd = strip_field_codes(value)
                elif key == "NoDisplay":
                    if value.lower() == "true":
                        entry.no_display = True
    except OSError as e:
        _log.warning("Cannot read desktop file %s: %s", path, e)
        return None
    return entry


def scan_applications(dirs: Iterable[Path] | None = None) -> list[DesktopEntry]:
    """Collect launchable entries from the application directories, sorted by name.

    A file name seen in an earlier directory hides the same name in later ones,
    even when the earlier copy is hidden itself.
    """
    seen: set[str] = set()
    entries: list[DesktopEntry] = []
    for d in (APPLICATIONS_DIRS if dirs is None else dirs):
        d = Path(d)
        if not d.is_dir():
            continue
        try:
            files = sorted(f for f in d.iterdir() if f.suffix == ".desktop")
        except OSError as e:
            _log.warning("Cannot list %s: %s", d, e)
            continue
        for f in files:
            if f.name in seen:
                continue
            entry = parse_desktop_file(f)
            if entry is None:
                continue
            seen.add(f.name)
            if not entry.is_launchable:
                _log.debug(
                    "Skipping %s (name=%r exec=%r no_display=%s)",
                    f, entry.name, entry.exec_cmd, entry.no_display,
                )
                continue
            entries.append(entry)

    entries.sort(key=lambda e: e.name.lower())
    _log.debug("Scanned %d applications", len(entries))
    return entries


def find_desktop_entry(app_id: str, dirs: Iterable[Path] | None = None) -> DesktopEntry | None:
    """Find the .desktop entry for a window's app id (exact, then lower-cased)."""
    if not app_id:
        return None
    candidates = [f"{app_id}.desktop"]
    if app_id.lower() != app_id:
        candidates.append(f"{app_id.lower()}.desktop")

    for d in (APPLICATIONS_DIRS if dirs is None else dirs):
        for name in candidates:
            path = Path(d) / name
            if not path.is_file():
                continue
            entry = parse_desktop_file(path)
            if entry is not None:
                return entry
    return None
