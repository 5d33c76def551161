import json

import pytest

from hexpanel.core import config
from hexpanel.core.config import DEFAULTS, Config


@pytest.fixture(autouse=True)
def fresh_singleton(monkeypatch):
    monkeypatch.setattr(Config, "_instance", None)


def test_defaults_and_dirs():
    cfg = Config()
    assert cfg.get("poll_interval_ms") == 2000
    assert cfg.get("followup_delay_ms") == 120
    assert cfg.get("window_helper") == "list-windows"
    assert "blueman-manager" in cfg.get("toggles")
    assert config.CONFIG_DIR.is_dir()
    assert config.ICON_CACHE_DIR.is_dir()


def test_singleton():
    assert Config() is Config()


def test_saved_settings_override_defaults():
    config.CONFIG_DIR.mkdir(parents=True)
    config.SETTINGS_FILE.write_text(json.dumps({"poll_interval_ms": 500}))
    cfg = Config()
    assert cfg.get("poll_interval_ms") == 500
    assert cfg.get("warmup_delay_ms") == DEFAULTS["warmup_delay_ms"]


@pytest.mark.parametrize("payload", ["{oops", "[1, 2]"])
def test_bad_settings_fall_back_to_defaults(payload):
    config.CONFIG_DIR.mkdir(parents=True)
    config.SETTINGS_FILE.write_text(payload)
    assert Config().get("poll_interval_ms") == 2000


def test_set_persists_and_reset():
    cfg = Config()
    cfg.set("theme_icon_size", 48)
    assert json.loads(config.SETTINGS_FILE.read_text())["theme_icon_size"] == 48

    cfg.reset()
    assert cfg.get("theme_icon_size") == 64
    assert json.loads(config.SETTINGS_FILE.read_text())["theme_icon_size"] == 64
