import pytest

from hexpanel.core import process_utils
from hexpanel.core.osd import OsdControl
from hexpanel.core.process_toggle import PanelToggles, ProcessToggle, ToggleResult


@pytest.fixture
def process_table(monkeypatch, launches):
    """A fake process table: names in ``running`` are alive, kills remove them."""
    state = {"running": set(), "killed": [], "kill_ok": True}

    def kill(name):
        state["killed"].append(name)
        if state["kill_ok"]:
            state["running"].discard(name)
        return state["kill_ok"]

    monkeypatch.setattr(process_utils, "is_running", lambda name: name in state["running"])
    monkeypatch.setattr(process_utils, "kill_by_name", kill)
    monkeypatch.setattr(process_utils.shutil, "which", lambda name: None)
    state["launches"] = launches
    return state


def test_launches_fallback_when_not_running(process_table):
    result = ProcessToggle("nmqt").toggle()
    assert result is ToggleResult.LAUNCHED
    assert process_table["launches"] == [("/usr/bin/nmqt", [])]
    assert process_table["killed"] == []


def test_prefers_path_lookup(process_table, monkeypatch):
    monkeypatch.setattr(process_utils.shutil, "which", lambda name: f"/home/u/.local/bin/{name}")
    ProcessToggle("nmqt", "/opt/nmqt").toggle()
    assert process_table["launches"] == [("/home/u/.local/bin/nmqt", [])]


def test_kills_when_running(process_table):
    process_table["running"].add("blueman-manager")
    assert ProcessToggle("blueman-manager").toggle() is ToggleResult.STOPPED
    assert process_table["killed"] == ["blueman-manager"]
    assert process_table["launches"] == []


def test_toggle_twice_round_trips(process_table):
    toggle = ProcessToggle("Win10Menu", "/usr/local/bin/Win10Menu")
    assert toggle.toggle() is ToggleResult.LAUNCHED
    process_table["running"].add("Win10Menu")
    assert toggle.toggle() is ToggleResult.STOPPED
    assert toggle.toggle() is ToggleResult.LAUNCHED


def test_failures_are_reported_not_raised(process_table, monkeypatch):
    process_table["running"].add("nmqt")
    process_table["kill_ok"] = False
    assert ProcessToggle("nmqt").toggle() is ToggleResult.FAILED

    monkeypatch.setattr(process_utils, "launch_detached", lambda program, args=(): False)
    assert ProcessToggle("other").toggle() is ToggleResult.FAILED


def test_panel_toggles(process_table):
    panel = PanelToggles({"nmqt": "/usr/bin/nmqt", "Win10Menu": "/usr/bin/Win10Menu"})
    emitted = []
    panel.toggled.connect(lambda name, result: emitted.append((name, result)))

    assert panel.names() == ["nmqt", "Win10Menu"]
    assert panel.toggle("nmqt") is ToggleResult.LAUNCHED
    assert panel.toggle("unknown") is ToggleResult.FAILED
    assert emitted == [("nmqt", "launched")]


def test_osd_control(monkeypatch, launches):
    monkeypatch.setattr(process_utils, "find_executable", lambda name, fallback=None: f"/usr/bin/{name}")
    osd = OsdControl()
    assert osd.vol_up()
    assert osd.disp_down()
    assert launches == [("/usr/bin/osd-client", ["--volup"]), ("/usr/bin/osd-client", ["--dispdown"])]


def test_osd_client_missing(monkeypatch, launches):
    monkeypatch.setattr(process_utils, "find_executable", lambda name, fallback=None: None)
    assert not OsdControl().vol_mute()
    assert launches == []
