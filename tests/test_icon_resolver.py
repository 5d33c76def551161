from types import SimpleNamespace

import pytest

from hexpanel.core import icon_resolver
from hexpanel.core.icon_resolver import PLACEHOLDER_ICON, cache_path, placeholder_uri, resolve_icon


@pytest.fixture
def theme_dirs(tmp_path, monkeypatch):
    big = tmp_path / "hicolor" / "256x256" / "apps"
    small = tmp_path / "hicolor" / "48x48" / "apps"
    big.mkdir(parents=True)
    small.mkdir(parents=True)
    monkeypatch.setattr(icon_resolver, "ICON_DIRS", [big, small])
    return big, small


def test_placeholder_ships_with_package():
    assert PLACEHOLDER_ICON.is_file()
    assert placeholder_uri().startswith("file://")


def test_empty_name_gives_placeholder():
    assert resolve_icon("") == placeholder_uri()


def test_exact_path_beats_theme_directory(tmp_path, theme_dirs):
    big, _ = theme_dirs
    (big / "firefox.png").write_bytes(b"theme")
    custom = tmp_path / "custom" / "firefox.png"
    custom.parent.mkdir()
    custom.write_bytes(b"custom")

    assert resolve_icon(str(custom)) == custom.as_uri()
    assert resolve_icon("firefox") == (big / "firefox.png").as_uri()


def test_missing_absolute_path_gives_placeholder(tmp_path):
    assert resolve_icon(str(tmp_path / "nope.png")) == placeholder_uri()


def test_png_before_svg_and_directory_order(theme_dirs):
    big, small = theme_dirs
    (big / "term.svg").write_text("<svg/>")
    (small / "term.png").write_bytes(b"png")
    (small / "other.svg").write_text("<svg/>")
    (small / "other.png").write_bytes(b"png")

    assert resolve_icon("term") == (big / "term.svg").as_uri()
    assert resolve_icon("other") == (small / "other.png").as_uri()


def test_unknown_name_gives_placeholder(theme_dirs):
    assert resolve_icon("does-not-exist") == placeholder_uri()
    assert resolve_icon("does-not-exist", use_theme=True) == placeholder_uri()


def test_theme_path_uses_cached_rasterization(theme_dirs):
    cached = cache_path("org.example.App", 64)
    cached.parent.mkdir(parents=True)
    cached.write_bytes(b"png")

    assert resolve_icon("org.example.App", use_theme=True, size=64) == cached.as_uri()
    # Without the theme path the cache is never consulted.
    assert resolve_icon("org.example.App") == placeholder_uri()


def test_cache_key_includes_size(isolated_paths):
    assert cache_path("app", 64).name == "app_64.png"
    assert cache_path("app", 32).name == "app_32.png"
    assert cache_path("app", 64).parent == isolated_paths / "cache" / "icons"


class FakePixmap:
    def __init__(self, null=False):
        self.null = null
        self.saved = []

    def isNull(self):
        return self.null

    def save(self, path, fmt):
        self.saved.append((path, fmt))
        with open(path, "wb") as f:
            f.write(b"\x89PNG")
        return True


class FakeIcon:
    def __init__(self, pixmap):
        self._pixmap = pixmap
        self.sizes = []

    def isNull(self):
        return self._pixmap is None

    def pixmap(self, width, height):
        self.sizes.append((width, height))
        return self._pixmap


@pytest.fixture
def fake_theme(monkeypatch):
    """Theme lookups served from a dict, with the GUI-application check satisfied."""
    from PyQt6.QtCore import QCoreApplication

    icons = {}
    lookups = []

    def from_theme(name):
        lookups.append(name)
        return icons.get(name, FakeIcon(None))

    monkeypatch.setattr(icon_resolver, "QGuiApplication", QCoreApplication)
    monkeypatch.setattr(icon_resolver, "QIcon", SimpleNamespace(fromTheme=from_theme))
    return icons, lookups


def test_theme_icon_is_rendered_once_then_reused(theme_dirs, fake_theme):
    icons, lookups = fake_theme
    pixmap = FakePixmap()
    icons["org.example.Viewer"] = icon = FakeIcon(pixmap)

    first = resolve_icon("org.example.Viewer", use_theme=True, size=48)
    second = resolve_icon("org.example.Viewer", use_theme=True, size=48)

    cached = cache_path("org.example.Viewer", 48)
    assert cached.name == "org.example.Viewer_48.png"
    assert first == second == cached.as_uri()
    assert cached.read_bytes() == b"\x89PNG"
    assert lookups == ["org.example.Viewer"]
    assert icon.sizes == [(48, 48)]
    assert pixmap.saved == [(str(cached), "PNG")]


def test_theme_miss_falls_back_to_placeholder(theme_dirs, fake_theme):
    icons, lookups = fake_theme
    icons["blank"] = FakeIcon(FakePixmap(null=True))

    assert resolve_icon("unknown-app", use_theme=True) == placeholder_uri()
    assert resolve_icon("blank", use_theme=True) == placeholder_uri()
    assert lookups == ["unknown-app", "blank"]
    assert not cache_path("blank").exists()


def test_theme_lookup_needs_gui_application(theme_dirs, monkeypatch):
    calls = []
    monkeypatch.setattr(icon_resolver, "QIcon", SimpleNamespace(fromTheme=calls.append))

    assert resolve_icon("org.example.App", use_theme=True) == placeholder_uri()
    assert calls == []
