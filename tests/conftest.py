from pathlib import Path

import pytest
from PyQt6.QtCore import QCoreApplication

from hexpanel.core import config, desktop_parser, icon_resolver
from hexpanel.core.observer import ListObserver, attach_observer


class RecordingObserver(ListObserver):
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_inserted(self, first, last):
        self.events.append(("inserted", first, last))

    def on_removed(self, first, last):
        self.events.append(("removed", first, last))

    def on_moved(self, source, destination):
        self.events.append(("moved", source, destination))

    def on_changed(self, first, last, roles):
        self.events.append(("changed", first, last, tuple(roles)))

    def on_reset(self):
        self.events.append(("reset",))

    def kinds(self) -> list[str]:
        return [e[0] for e in self.events]


@pytest.fixture(scope="session", autouse=True)
def qapp():
    # A core application is enough for timers; icon theme lookups stay disabled.
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path, monkeypatch):
    """Point every per-user path at the test's temp dir."""
    cfg = tmp_path / "config"
    monkeypatch.setattr(config, "CONFIG_DIR", cfg)
    monkeypatch.setattr(config, "SETTINGS_FILE", cfg / "settings.json")
    monkeypatch.setattr(config, "APPS_FILE", cfg / "apps.json")
    monkeypatch.setattr(config, "TILES_FILE", cfg / "launcher_tiles.json")
    monkeypatch.setattr(config, "WINDOWS_SNAPSHOT_FILE", tmp_path / "hexlauncher" / "windows.ini")
    monkeypatch.setattr(config, "CACHE_DIR", tmp_path / "cache")
    monkeypatch.setattr(config, "ICON_CACHE_DIR", tmp_path / "cache" / "icons")
    monkeypatch.setattr(icon_resolver, "ICON_CACHE_DIR", tmp_path / "cache" / "icons")
    monkeypatch.setattr(icon_resolver, "ICON_DIRS", [])
    monkeypatch.setattr(desktop_parser, "APPLICATIONS_DIRS", [tmp_path / "applications"])
    return tmp_path


@pytest.fixture
def observe():
    bindings = []

    def _observe(model) -> RecordingObserver:
        recorder = RecordingObserver()
        bindings.append(attach_observer(model, recorder))
        return recorder

    yield _observe
    for binding in bindings:
        binding.detach()


def write_desktop(directory: Path, filename: str, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(body, encoding="utf-8")
    return path


@pytest.fixture
def apps_dir(isolated_paths) -> Path:
    d = isolated_paths / "applications"
    d.mkdir(parents=True, exist_ok=True)
    return d


@pytest.fixture
def launches(monkeypatch):
    """Capture detached launches instead of spawning processes."""
    from hexpanel.core import process_utils

    calls: list[tuple[str, list[str]]] = []

    def fake_launch(program, args=()):
        calls.append((program, list(args)))
        return True

    monkeypatch.setattr(process_utils, "launch_detached", fake_launch)
    return calls

