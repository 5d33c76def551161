"""Process-table queries and detached launches.

Everything that touches the OS process table goes through this module so
the blocking calls (pgrep/pkill) can later move off the UI thread without
touching call sites. Launches are fire-and-forget.
"""

from __future__ import annotations

import os
import re
import shlex
import shutil
import subprocess
from typing import Sequence

from hexpanel.core.desktop_parser import strip_field_codes
from hexpanel.core.logger import get_logger

_log = get_logger("process_utils")

QUERY_TIMEOUT = 5
ENV_VAR_RE = re.compile(r"\$(\w+)|\$\{([^}]+)\}")


def find_executable(name: str, fallback: str | None = None) -> str | None:
    """Look ``name`` up on PATH, else return ``fallback`` unchecked."""
    return shutil.which(name) or fallback


def is_running(name: str) -> bool:
    """True if a process with exactly this name exists (``pgrep -x``)."""
    try:
        result = subprocess.run(
            ["pgrep", "-x", name],
            capture_output=True, text=True, timeout=QUERY_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        _log.warning("pgrep for %s failed: %s", name, e)
        return False
    return bool(result.stdout.strip())


def kill_by_name(name: str) -> bool:
    """Terminate every process with exactly this name (``pkill -x``)."""
    try:
        result = subprocess.run(
            ["pkill", "-x", name],
            capture_output=True, text=True, timeout=QUERY_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        _log.warning("pkill for %s failed: %s", name, e)
        return False
    if result.returncode != 0:
        _log.warning("pkill -x %s exited with code %s", name, result.returncode)
        return False
    return True


def launch_detached(program: str, args: Sequence[str] = ()) -> bool:
    """Start ``program`` in its own session with stdio on /dev/null. No exit status is tracked."""
    cmd = [program, *args]
    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
            close_fds=True,
        )
    except OSError as e:
        _log.warning("Failed to launch %s: %s", shlex.join(cmd), e)
        return False
    _log.info("Launched %s", shlex.join(cmd))
    return True


def _expand_env(command: str) -> str:
    def _sub(match: re.Match) -> str:
        value = os.environ.get(match.group(1) or match.group(2), "")
        return value or match.group(0)

    return ENV_VAR_RE.sub(_sub, command)


def expand_command(command: str) -> list[str]:
    """Turn an Exec-style command string into argv.

    Field codes are dropped, ``$VAR``/``${VAR}`` are expanded when set and
    non-empty (left alone otherwise), then the string is split shell-style.
    Returns an empty list for blank or unparsable input.
    """
    cmd = _expand_env(strip_field_codes(command.strip()))
    try:
        return shlex.split(cmd)
    except ValueError as e:
        _log.warning("Cannot parse command %r: %s", command, e)
        return []


def launch_command(command: str) -> bool:
    """Launch an Exec-style command detached. Returns False if nothing was started."""
    if not command or not command.strip():
        _log.warning("launch_command: empty command")
        return False

    parts = expand_command(command)
    if not parts:
        return False

    program, args = parts[0], parts[1:]
    program_path = program if os.path.exists(program) else shutil.which(program)
    if not program_path:
        _log.warning("launch_command: executable not found: %s", program)
        return False
    return launch_detached(program_path, args)
