"""A–Z application menu built from the installed .desktop files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable

from PyQt6.QtCore import QAbstractListModel, QModelIndex, QObject, Qt, pyqtSignal, pyqtSlot

from hexpanel.core import process_utils
from hexpanel.core.desktop_parser import DesktopEntry, scan_applications
from hexpanel.core.icon_resolver import resolve_icon
from hexpanel.core.logger import get_logger
from hexpanel.core.observer import USER_ROLE

_log = get_logger("app_menu")


@dataclass
class MenuApp:
    name: str
    command: str
    icon: str
    desktop_file: str

    @property
    def letter(self) -> str:
        return self.name[:1].upper()

    @classmethod
    def from_desktop_entry(cls, entry: DesktopEntry) -> "MenuApp":
        return cls(entry.name, entry.exec_cmd, resolve_icon(entry.icon), entry.file_path)


class ApplicationMenu(QAbstractListModel):
    """Sorted launcher list. ``headerVisible`` marks the first app of each letter group."""

    class Roles(IntEnum):
        NAME = USER_ROLE + 1
        COMMAND = USER_ROLE + 2
        ICON = USER_ROLE + 3
        LETTER = USER_ROLE + 4
        HEADER_VISIBLE = USER_ROLE + 5
        DESKTOP_FILE = USER_ROLE + 6

    loaded = pyqtSignal(int)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._apps: list[MenuApp] = []

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._apps)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        row = index.row()
        if not index.isValid() or not 0 <= row < len(self._apps):
            return None
        app = self._apps[row]
        if role == self.Roles.NAME:
            return app.name
        if role == self.Roles.COMMAND:
            return app.command
        if role == self.Roles.ICON:
            return app.icon
        if role == self.Roles.LETTER:
            return app.letter
        if role == self.Roles.HEADER_VISIBLE:
            return row == 0 or app.letter != self._apps[row - 1].letter
        if role == self.Roles.DESKTOP_FILE:
            return app.desktop_file
        return None

    def roleNames(self) -> dict[int, bytes]:
        return {
            self.Roles.NAME: b"name",
            self.Roles.COMMAND: b"command",
            self.Roles.ICON: b"icon",
            self.Roles.LETTER: b"letter",
            self.Roles.HEADER_VISIBLE: b"headerVisible",
            self.Roles.DESKTOP_FILE: b"desktopFilePath",
        }

    def apps(self) -> list[MenuApp]:
        return list(self._apps)

    def set_apps(self, apps: Iterable[MenuApp]) -> None:
        self.beginResetModel()
        self._apps = list(apps)
        self.endResetModel()
        self.loaded.emit(len(self._apps))

    @pyqtSlot()
    def reload(self) -> None:
        """Rescan the application directories. Entries arrive sorted and filtered."""
        self.set_apps(MenuApp.from_desktop_entry(e) for e in scan_applications())
        _log.info("Application menu: %d apps", len(self._apps))

    @pyqtSlot(int)
    def launch(self, index: int) -> bool:
        if not 0 <= index < len(self._apps):
            _log.warning("launch: index %d out of range (0..%d)", index, len(self._apps) - 1)
            return False
        return process_utils.launch_command(self._apps[index].command)

    @pyqtSlot(str)
    def launch_command(self, command: str) -> bool:
        return process_utils.launch_command(command)
