"""Volume and brightness keys, forwarded to the on-screen-display client."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSlot

from hexpanel.core import process_utils
from hexpanel.core.logger import get_logger

_log = get_logger("osd")


class OsdControl(QObject):

    def __init__(self, client: str = "osd-client", parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.client = client

    def _send(self, flag: str) -> bool:
        program = process_utils.find_executable(self.client)
        if program is None:
            _log.warning("%s not found, ignoring %s", self.client, flag)
            return False
        return process_utils.launch_detached(program, [flag])

    @pyqtSlot()
    def vol_up(self) -> bool:
        return self._send("--volup")

    @pyqtSlot()
    def vol_down(self) -> bool:
        return self._send("--voldown")

    @pyqtSlot()
    def vol_mute(self) -> bool:
        return self._send("--mute")

    @pyqtSlot()
    def disp_up(self) -> bool:
        return self._send("--dispup")

    @pyqtSlot()
    def disp_down(self) -> bool:
        return self._send("--dispdown")
