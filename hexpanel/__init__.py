"""hexpanel - taskbar and launcher backend for a Wayland desktop shell."""

__app_name__ = "hexpanel"
__version__ = "0.3.0"
