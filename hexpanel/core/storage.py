"""JSON array persistence shared by the pinned-app catalog and the tile store."""

from __future__ import annotations

import json
import math
import os
import tempfile
from pathlib import Path
from typing import Any

from hexpanel.core.logger import get_logger

_log = get_logger("storage")


def load_json_array(path: Path) -> list[Any] | None:
    """Read a JSON array from ``path``.

    A missing file is an empty list. An unreadable file, invalid JSON, or a
    document that isn't an array returns None so callers keep what they have.
    """
    if not path.exists():
        _log.debug("No saved state at %s", path)
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (ValueError, RecursionError, OSError) as e:
        _log.warning("Ignoring unreadable %s: %s", path, e)
        return None
    if not isinstance(data, list):
        _log.warning("Ignoring %s: expected a JSON array, got %s", path, type(data).__name__)
        return None
    return data


def save_json_atomic(path: Path, data: Any, indent: int | None = None) -> bool:
    """Write ``data`` as JSON via a temp file in the same directory plus rename."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as e:
        _log.warning("Cannot write %s: %s", path, e)
        return False

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_path, path)
    except OSError as e:
        _log.warning("Cannot write %s: %s", path, e)
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        return False
    return True


def str_field(obj: dict, key: str) -> str:
    value = obj.get(key, "")
    return value if isinstance(value, str) else ""


def float_field(obj: dict, key: str, default: float = 0.0) -> float:
    value = obj.get(key, default)
    if isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return result if math.isfinite(result) else default
