"""Pinned applications on the panel, in user order, persisted to apps.json."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any

from PyQt6.QtCore import (
    QAbstractListModel, QModelIndex, QObject, Qt, pyqtProperty, pyqtSignal, pyqtSlot,
)

from hexpanel.core import config, process_utils
from hexpanel.core.desktop_parser import parse_desktop_file
from hexpanel.core.icon_resolver import resolve_icon
from hexpanel.core.logger import get_logger
from hexpanel.core.observer import USER_ROLE
from hexpanel.core.storage import load_json_array, save_json_atomic, str_field

_log = get_logger("app_catalog")


@dataclass
class AppEntry:
    name: str = ""
    icon: str = ""
    exec: str = ""

    def is_empty(self) -> bool:
        return not self.name and not self.exec

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "icon": self.icon, "exec": self.exec}

    @classmethod
    def from_dict(cls, obj: Any) -> "AppEntry":
        if not isinstance(obj, dict):
            return cls()
        return cls(str_field(obj, "name"), str_field(obj, "icon"), str_field(obj, "exec"))


class AppCatalog(QAbstractListModel):
    """Ordered list of pinned apps.

    add/remove/move emit row-level insert/remove/move signals, never a
    reset, so views keep their selection. Each of them persists right away.
    Bad indices are logged and ignored.
    """

    class Roles(IntEnum):
        NAME = USER_ROLE + 1
        ICON = USER_ROLE + 2
        EXEC = USER_ROLE + 3

    countChanged = pyqtSignal()

    def __init__(self, path: Path | None = None, autoload: bool = True,
                 parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.path = Path(path) if path is not None else config.APPS_FILE
        self._apps: list[AppEntry] = []
        if autoload:
            self.load()

    # ── Qt model interface ──
    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._apps)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._apps):
            return None
        app = self._apps[index.row()]
        if role == self.Roles.NAME:
            return app.name
        if role == self.Roles.ICON:
            return app.icon
        if role == self.Roles.EXEC:
            return app.exec
        return None

    def roleNames(self) -> dict[int, bytes]:
        return {
            self.Roles.NAME: b"name",
            self.Roles.ICON: b"icon",
            self.Roles.EXEC: b"exec",
        }

    def _count(self) -> int:
        return len(self._apps)

    count = pyqtProperty(int, fget=_count, notify=countChanged)

    # ── Accessors ──
    def entries(self) -> list[AppEntry]:
        return list(self._apps)

    def entry_at(self, index: int) -> AppEntry | None:
        if 0 <= index < len(self._apps):
            return self._apps[index]
        return None

    def _check_index(self, index: int, op: str) -> bool:
        if 0 <= index < len(self._apps):
            return True
        _log.warning("%s: index %d out of range (0..%d)", op, index, len(self._apps) - 1)
        return False

    # ── Persistence ──
    def load(self) -> None:
        """Replace the catalog with the saved one. Malformed files leave it untouched."""
        data = load_json_array(self.path)
        if data is None:
            return
        self.beginResetModel()
        self._apps = [AppEntry.from_dict(obj) for obj in data]
        self.endResetModel()
        self.countChanged.emit()
        _log.debug("Loaded %d pinned apps from %s", len(self._apps), self.path)

    def persist(self) -> bool:
        payload = [a.to_dict() for a in self._apps if not a.is_empty()]
        return save_json_atomic(self.path, payload)

    # ── Mutations ──
    def add(self, entry: AppEntry) -> None:
        row = len(self._apps)
        self.beginInsertRows(QModelIndex(), row, row)
        self._apps.append(entry)
        self.endInsertRows()
        self.countChanged.emit()
        _log.info("Pinned %r at %d", entry.name, row)
        self.persist()

    @pyqtSlot(str)
    def add_desktop_file(self, path: str) -> bool:
        desktop = parse_desktop_file(path)
        if desktop is None:
            return False
        if not desktop.name and not desktop.exec_cmd:
            _log.warning("Invalid .desktop file: %s", path)
            return False
        self.add(AppEntry(desktop.name, resolve_icon(desktop.icon), desktop.exec_cmd))
        return True

    @pyqtSlot(int)
    def remove_at(self, index: int) -> None:
        if not self._check_index(index, "remove_at"):
            return
        self.beginRemoveRows(QModelIndex(), index, index)
        removed = self._apps.pop(index)
        self.endRemoveRows()
        self.countChanged.emit()
        _log.info("Unpinned %r from %d", removed.name, index)
        self.persist()

    @pyqtSlot(int, int)
    def move_to(self, source: int, destination: int) -> None:
        """Move one row so it ends up at ``destination``."""
        if not (self._check_index(source, "move_to") and self._check_index(destination, "move_to")):
            return
        if source == destination:
            return
        # Qt wants the insertion point in pre-move coordinates.
        qt_destination = destination + 1 if destination > source else destination
        if not self.beginMoveRows(QModelIndex(), source, source, QModelIndex(), qt_destination):
            return
        self._apps.insert(destination, self._apps.pop(source))
        self.endMoveRows()
        self.persist()

    @pyqtSlot(int)
    def launch(self, index: int) -> bool:
        if not self._check_index(index, "launch"):
            return False
        return process_utils.launch_command(self._apps[index].exec)
