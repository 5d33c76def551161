"""QGuiApplication subclass that owns the shell's models and single-instance lock."""

from PyQt6.QtCore import QLockFile, QObject, QStandardPaths, pyqtSignal, pyqtSlot
from PyQt6.QtGui import QGuiApplication

from hexpanel import __app_name__, __version__
from hexpanel.core.app_catalog import AppCatalog
from hexpanel.core.app_menu import ApplicationMenu
from hexpanel.core.config import Config
from hexpanel.core.logger import get_logger
from hexpanel.core.osd import OsdControl
from hexpanel.core.process_toggle import PanelToggles
from hexpanel.core.tile_store import TileStore
from hexpanel.core.window_tracker import WindowTracker, icon_for_app_id

_log = get_logger("app")


class PanelSettings(QObject):
    """Settings the UI can change while running. Changes apply immediately and are saved."""

    changed = pyqtSignal(str)  # setting key, empty after a reset

    def __init__(self, config: Config, windows: WindowTracker, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.config = config
        self.windows = windows

    @pyqtSlot(result=int)
    def poll_interval(self) -> int:
        return int(self.config.get("poll_interval_ms"))

    @pyqtSlot(int, result=bool)
    def set_poll_interval(self, interval_ms: int) -> bool:
        if interval_ms <= 0:
            _log.warning("Ignoring poll interval %d ms", interval_ms)
            return False
        self.config.set("poll_interval_ms", interval_ms)
        self.windows.set_interval(interval_ms)
        self.changed.emit("poll_interval_ms")
        return True

    @pyqtSlot()
    def reset(self) -> None:
        self.config.reset()
        self.windows.set_interval(self.poll_interval())
        _log.info("Settings reset to defaults")
        self.changed.emit("")


class HexPanelApp(QGuiApplication):
    """Main application for hexpanel."""

    def __init__(self, argv: list[str]) -> None:
        super().__init__(argv)
        self.setApplicationName(__app_name__)
        self.setApplicationVersion(__version__)
        self.setDesktopFileName("hexpanel")

        self.config = Config()
        icon_size = int(self.config.get("theme_icon_size"))

        self.catalog = AppCatalog(parent=self)
        self.menu = ApplicationMenu(parent=self)
        self.tiles = TileStore(parent=self)
        self.windows = WindowTracker(
            helper_name=self.config.get("window_helper"),
            interval_ms=int(self.config.get("poll_interval_ms")),
            warmup_ms=int(self.config.get("warmup_delay_ms")),
            followup_ms=int(self.config.get("followup_delay_ms")),
            icon_lookup=lambda app_id: icon_for_app_id(app_id, icon_size),
            parent=self,
        )
        self.toggles = PanelToggles(self.config.get("toggles"), parent=self)
        self.osd = OsdControl(self.config.get("osd_client"), parent=self)
        self.settings = PanelSettings(self.config, self.windows, parent=self)

    # ── Lock file for single instance ──
    def acquire_lock(self) -> bool:
        tmp = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.TempLocation)
        self._lock = QLockFile(f"{tmp}/hexpanel.lock")
        return self._lock.tryLock(100)

    def context_objects(self) -> dict[str, QObject]:
        """Objects a UI layer binds to, under the names its delegates expect."""
        return {
            "appModel": self.catalog,
            "menuModel": self.menu,
            "tileModel": self.tiles,
            "windowModel": self.windows,
            "panelToggles": self.toggles,
            "osdController": self.osd,
            "panelSettings": self.settings,
        }

    def start(self) -> None:
        self.menu.reload()
        self.windows.start()
        _log.info(
            "hexpanel %s started: %d pinned, %d tiles, %d menu entries",
            __version__, self.catalog.rowCount(), self.tiles.rowCount(), self.menu.rowCount(),
        )

    def shutdown(self) -> None:
        self.windows.stop()
