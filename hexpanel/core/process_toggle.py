"""Start-or-stop toggles for auxiliary panel helpers (menu, network and bluetooth applets)."""

from __future__ import annotations

from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from hexpanel.core import process_utils
from hexpanel.core.logger import get_logger

_log = get_logger("process_toggle")


class ToggleResult(Enum):
    STOPPED = "stopped"
    LAUNCHED = "launched"
    FAILED = "failed"


class ProcessToggle:
    """If ``process_name`` is running kill it, otherwise launch it.

    The executable is found on PATH, falling back to ``fallback_path``
    (``/usr/bin/<name>`` unless given).
    """

    def __init__(self, process_name: str, fallback_path: str | None = None) -> None:
        self.process_name = process_name
        self.fallback_path = fallback_path or f"/usr/bin/{process_name}"

    def executable(self) -> str:
        return process_utils.find_executable(self.process_name, self.fallback_path)

    def toggle(self) -> ToggleResult:
        if process_utils.is_running(self.process_name):
            _log.info("%s is running, killing it", self.process_name)
            if process_utils.kill_by_name(self.process_name):
                return ToggleResult.STOPPED
            return ToggleResult.FAILED

        _log.info("Launching %s", self.process_name)
        if process_utils.launch_detached(self.executable()):
            return ToggleResult.LAUNCHED
        _log.warning("Failed to launch %s", self.process_name)
        return ToggleResult.FAILED


class PanelToggles(QObject):
    """The configured toggles, addressable by process name from the UI."""

    toggled = pyqtSignal(str, str)  # process name, ToggleResult value

    def __init__(self, toggles: dict[str, str] | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._toggles: dict[str, ProcessToggle] = {
            name: ProcessToggle(name, fallback) for name, fallback in (toggles or {}).items()
        }

    def names(self) -> list[str]:
        return list(self._toggles)

    @pyqtSlot(str)
    def toggle(self, name: str) -> ToggleResult:
        toggle = self._toggles.get(name)
        if toggle is None:
            _log.warning("No toggle configured for %r", name)
            return ToggleResult.FAILED
        result = toggle.toggle()
        self.toggled.emit(name, result.value)
        return result
