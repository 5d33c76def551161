"""Launcher tiles dropped onto the start-menu canvas, persisted to launcher_tiles.json."""

from __future__ import annotations

import math
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
from hexpanel.core.storage import float_field, load_json_array, save_json_atomic, str_field

_log = get_logger("tile_store")

TILE_SIZES = ("small", "medium", "large")
DEFAULT_TILE_SIZE = "medium"


@dataclass
class Tile:
    name: str = ""
    icon: str = ""
    desktop_file: str = ""
    command: str = ""
    x: float = 0.0
    y: float = 0.0
    size: str = DEFAULT_TILE_SIZE

    def is_empty(self) -> bool:
        return not self.name and not self.command and not self.desktop_file

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "icon": self.icon,
            "desktopFile": self.desktop_file,
            "command": self.command,
            "x": self.x,
            "y": self.y,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, obj: Any) -> "Tile":
        if not isinstance(obj, dict):
            return cls()
        return cls(
            name=str_field(obj, "name"),
            icon=str_field(obj, "icon"),
            desktop_file=str_field(obj, "desktopFile"),
            command=str_field(obj, "command"),
            x=float_field(obj, "x"),
            y=float_field(obj, "y"),
            size=str_field(obj, "size") or DEFAULT_TILE_SIZE,
        )


class TileStore(QAbstractListModel):
    """Tiles in insertion order, each with a canvas position and a size tag.

    Moving or resizing a tile is a data change on that one row, scoped to
    the touched roles. Adding and removing are structural. Every mutation
    is written through to disk immediately.
    """

    class Roles(IntEnum):
        NAME = USER_ROLE + 1
        ICON = USER_ROLE + 2
        DESKTOP_FILE = USER_ROLE + 3
        COMMAND = USER_ROLE + 4
        X = USER_ROLE + 5
        Y = USER_ROLE + 6
        SIZE = USER_ROLE + 7

    _ROLE_FIELDS = {
        Roles.NAME: "name",
        Roles.ICON: "icon",
        Roles.DESKTOP_FILE: "desktop_file",
        Roles.COMMAND: "command",
        Roles.X: "x",
        Roles.Y: "y",
        Roles.SIZE: "size",
    }

    countChanged = pyqtSignal()

    def __init__(self, path: Path | None = None, autoload: bool = True,
                 parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.path = Path(path) if path is not None else config.TILES_FILE
        self._tiles: list[Tile] = []
        if autoload:
            self.load()

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._tiles)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < len(self._tiles):
            return None
        field_name = self._ROLE_FIELDS.get(role)
        if field_name is None:
            return None
        return getattr(self._tiles[index.row()], field_name)

    def roleNames(self) -> dict[int, bytes]:
        return {
            self.Roles.NAME: b"name",
            self.Roles.ICON: b"icon",
            self.Roles.DESKTOP_FILE: b"desktopFile",
            self.Roles.COMMAND: b"command",
            self.Roles.X: b"x",
            self.Roles.Y: b"y",
            self.Roles.SIZE: b"size",
        }

    def _count(self) -> int:
        return len(self._tiles)

    count = pyqtProperty(int, fget=_count, notify=countChanged)

    def tiles(self) -> list[Tile]:
        return list(self._tiles)

    def tile_at(self, index: int) -> Tile | None:
        if 0 <= index < len(self._tiles):
            return self._tiles[index]
        return None

    def _check_index(self, index: int, op: str) -> bool:
        if 0 <= index < len(self._tiles):
            return True
        _log.warning("%s: index %d out of range (0..%d)", op, index, len(self._tiles) - 1)
        return False

    def load(self) -> None:
        data = load_json_array(self.path)
        if data is None:
            return
        self.beginResetModel()
        self._tiles = [Tile.from_dict(obj) for obj in data]
        self.endResetModel()
        self.countChanged.emit()
        _log.debug("Loaded %d tiles from %s", len(self._tiles), self.path)

    def persist(self) -> bool:
        payload = [t.to_dict() for t in self._tiles if not t.is_empty()]
        return save_json_atomic(self.path, payload, indent=4)

    @pyqtSlot(str, float, float)
    def add_from_desktop_file(self, path: str, x: float, y: float) -> bool:
        desktop = parse_desktop_file(path)
        if desktop is None:
            return False
        tile = Tile(
            name=desktop.name or Path(path).stem,
            icon=resolve_icon(desktop.icon),
            desktop_file=str(path),
            command=desktop.exec_cmd,
            x=float(x),
            y=float(y),
        )
        row = len(self._tiles)
        self.beginInsertRows(QModelIndex(), row, row)
        self._tiles.append(tile)
        self.endInsertRows()
        self.countChanged.emit()
        _log.info("Added tile %r -> %r", tile.name, tile.command)
        self.persist()
        return True

    @pyqtSlot(int, float, float)
    def update_position(self, index: int, x: float, y: float) -> None:
        if not self._check_index(index, "update_position"):
            return
        if not (math.isfinite(x) and math.isfinite(y)):
            _log.warning("update_position: non-finite position (%s, %s) for tile %d", x, y, index)
            return
        tile = self._tiles[index]
        tile.x = float(x)
        tile.y = float(y)
        idx = self.index(index)
        self.dataChanged.emit(idx, idx, [self.Roles.X, self.Roles.Y])
        self.persist()

    @pyqtSlot(int, str)
    def resize(self, index: int, size: str) -> None:
        if not self._check_index(index, "resize"):
            return
        if not size:
            _log.warning("resize: empty size for tile %d", index)
            return
        if size not in TILE_SIZES:
            _log.debug("resize: non-standard size %r for tile %d", size, index)
        self._tiles[index].size = size
        idx = self.index(index)
        self.dataChanged.emit(idx, idx, [self.Roles.SIZE])
        self.persist()

    @pyqtSlot(int)
    def remove_at(self, index: int) -> None:
        if not self._check_index(index, "remove_at"):
            return
        self.beginRemoveRows(QModelIndex(), index, index)
        removed = self._tiles.pop(index)
        self.endRemoveRows()
        self.countChanged.emit()
        _log.info("Removed tile %r", removed.name)
        self.persist()

    @pyqtSlot(int)
    def launch(self, index: int) -> bool:
        if not self._check_index(index, "launch"):
            return False
        return process_utils.launch_command(self._tiles[index].command)
