"""Entry point for hexpanel."""

import os
import sys

os.environ.setdefault("QT_LOGGING_RULES", "qt.svg.warning=false")

from hexpanel.core.logger import get_logger, setup_logging

setup_logging(console=sys.stderr.isatty())

from hexpanel.app import HexPanelApp

_log = get_logger("main")


def main() -> None:
    app = HexPanelApp(sys.argv)

    if not app.acquire_lock():
        _log.warning("hexpanel is already running, exiting")
        sys.exit(1)

    app.aboutToQuit.connect(app.shutdown)
    app.start()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
