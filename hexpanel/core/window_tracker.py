"""Open windows for the taskbar, polled from the list-windows helper.

The helper keeps an INI snapshot up to date, one section per window named
by a stable window id::

    [4021]
    Title=README.md - Kate
    AppID=org.kde.kate
    Focused=true

and accepts ``--activate <id>`` / ``--close <id>``. We re-read the
snapshot every couple of seconds and push the result into the model with
the smallest notification that keeps views correct.
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any, Callable

from PyQt6.QtCore import (
    QAbstractListModel, QModelIndex, QObject, Qt, QTimer, pyqtProperty, pyqtSignal, pyqtSlot,
)

from hexpanel.core import config, process_utils
from hexpanel.core.desktop_parser import find_desktop_entry
from hexpanel.core.icon_resolver import THEME_ICON_SIZE, resolve_icon
from hexpanel.core.logger import get_logger
from hexpanel.core.observer import USER_ROLE

_log = get_logger("window_tracker")

POLL_INTERVAL_MS = 2000
WARMUP_DELAY_MS = 300
FOLLOWUP_DELAY_MS = 120
HELPER_NAME = "list-windows"

# QSettings keeps top-level keys here; it never describes a window.
GENERAL_SECTION = "General"
TRUE_VALUES = {"true", "1", "yes", "on"}
# Window ids are plain section names, so "DEFAULT" must not be special.
NO_DEFAULT_SECTION = "\x00"


@dataclass
class WindowEntry:
    id: str
    title: str = ""
    app_id: str = ""
    focused: bool = False
    icon: str = ""


def icon_for_app_id(app_id: str, size: int = THEME_ICON_SIZE) -> str:
    """Icon URI for a window: its .desktop Icon= through the theme-aware resolver."""
    entry = find_desktop_entry(app_id)
    return resolve_icon(entry.icon if entry else "", use_theme=True, size=size)


def read_window_snapshot(path: Path, icon_lookup: Callable[[str], str] = icon_for_app_id,
                         ) -> list[WindowEntry] | None:
    """Parse the helper's snapshot. None means "no usable snapshot", not "no windows"."""
    if not path.is_file():
        _log.debug("No window snapshot at %s", path)
        return None

    parser = configparser.ConfigParser(
        interpolation=None, strict=False, delimiters=("=",), default_section=NO_DEFAULT_SECTION,
    )
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            parser.read_file(f)
    except (configparser.Error, OSError) as e:
        _log.warning("Unreadable window snapshot %s: %s", path, e)
        return None

    windows: list[WindowEntry] = []
    for section in parser.sections():
        if section == GENERAL_SECTION:
            continue
        app_id = parser.get(section, "AppID", fallback="").strip('"')
        focused = parser.get(section, "Focused", fallback="").strip('"').strip().lower()
        windows.append(WindowEntry(
            id=section,
            title=parser.get(section, "Title", fallback="").strip('"'),
            app_id=app_id,
            focused=focused in TRUE_VALUES,
            icon=icon_lookup(app_id),
        ))
    return windows


class WindowTracker(QAbstractListModel):
    """Live list of open windows.

    Same window ids in the same order → the rows are updated in place with
    one dataChanged over the whole range, so title and focus churn never
    tears down delegates. Anything else → model reset, since rows can no
    longer be matched by position.
    """

    class Roles(IntEnum):
        ID = USER_ROLE + 1
        TITLE = USER_ROLE + 2
        APP_ID = USER_ROLE + 3
        FOCUSED = USER_ROLE + 4
        ICON = USER_ROLE + 5

    _ROLE_FIELDS = {
        Roles.ID: "id",
        Roles.TITLE: "title",
        Roles.APP_ID: "app_id",
        Roles.FOCUSED: "focused",
        Roles.ICON: "icon",
    }

    countChanged = pyqtSignal()

    def __init__(
        self,
        snapshot_path: Path | None = None,
        helper_name: str = HELPER_NAME,
        interval_ms: int = POLL_INTERVAL_MS,
        warmup_ms: int = WARMUP_DELAY_MS,
        followup_ms: int = FOLLOWUP_DELAY_MS,
        icon_lookup: Callable[[str], str] = icon_for_app_id,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.snapshot_path = Path(snapshot_path) if snapshot_path is not None else config.WINDOWS_SNAPSHOT_FILE
        self.helper_name = helper_name
        self.followup_ms = followup_ms
        self._icon_lookup = icon_lookup
        self._windows: list[WindowEntry] = []
        self._refreshing = False

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.refresh)

        # The helper needs a moment after login before its first snapshot is complete.
        self._warmup = QTimer(self)
        self._warmup.setSingleShot(True)
        self._warmup.setInterval(warmup_ms)
        self._warmup.timeout.connect(self.refresh)

    # ── Qt model interface ──
    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._windows)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._windows):
            return None
        field_name = self._ROLE_FIELDS.get(role)
        if field_name is None:
            return None
        return getattr(self._windows[index.row()], field_name)

    def roleNames(self) -> dict[int, bytes]:
        return {
            self.Roles.ID: b"wid",
            self.Roles.TITLE: b"title",
            self.Roles.APP_ID: b"app_id",
            self.Roles.FOCUSED: b"focused",
            self.Roles.ICON: b"icon",
        }

    def _count(self) -> int:
        return len(self._windows)

    count = pyqtProperty(int, fget=_count, notify=countChanged)

    def windows(self) -> list[WindowEntry]:
        return list(self._windows)

    # ── Polling ──
    def start(self) -> None:
        self.refresh()
        self._warmup.start()
        self._timer.start()

    def stop(self) -> None:
        self._warmup.stop()
        self._timer.stop()

    def set_interval(self, interval_ms: int) -> None:
        self._timer.setInterval(interval_ms)

    def interval(self) -> int:
        return self._timer.interval()

    def is_active(self) -> bool:
        return self._timer.isActive()

    @pyqtSlot()
    def refresh(self) -> None:
        if self._refreshing:
            _log.debug("refresh already running, skipped")
            return
        self._refreshing = True
        try:
            windows = read_window_snapshot(self.snapshot_path, self._icon_lookup)
            if windows is not None:
                self._apply(windows)
        finally:
            self._refreshing = False

    def _apply(self, windows: list[WindowEntry]) -> None:
        if len(windows) == len(self._windows):
            if [w.id for w in windows] == [w.id for w in self._windows]:
                if windows != self._windows:
                    self._windows = windows
                    self.dataChanged.emit(self.index(0), self.index(len(windows) - 1), [])
                return

        _log.debug("Window list changed shape: %d -> %d", len(self._windows), len(windows))
        old_count = len(self._windows)
        self.beginResetModel()
        self._windows = windows
        self.endResetModel()
        if old_count != len(windows):
            self.countChanged.emit()

    # ── Helper commands ──
    @pyqtSlot(int)
    def activate(self, index: int) -> bool:
        return self._send(index, "--activate")

    @pyqtSlot(int)
    def close(self, index: int) -> bool:
        return self._send(index, "--close")

    def _send(self, index: int, flag: str) -> bool:
        if not 0 <= index < len(self._windows):
            _log.warning("%s: index %d out of range (0..%d)", flag, index, len(self._windows) - 1)
            return False
        wid = self._windows[index].id

        program = process_utils.find_executable(self.helper_name)
        if program is None:
            _log.warning("%s not found, cannot %s window %s", self.helper_name, flag, wid)
            return False

        if not process_utils.launch_detached(program, [flag, wid]):
            return False
        # The helper updates its snapshot asynchronously.
        QTimer.singleShot(self.followup_ms, self.refresh)
        return True
