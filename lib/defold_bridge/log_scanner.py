"""
Defold editor log scanning.

Every editor start announces its command server on the UI thread, e.g.:

  2024-05-01 10:00:00.000 INFO [JavaFX Application Thread] util.http-server -
      {:msg "Http server running", :local-url "http://localhost:51234"}

The scanner collects those ports from a log file, most recent first.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

UI_THREAD_MARKER = "[JavaFX Application Thread]"
HTTP_SERVER_MARKER = "util.http-server"
SERVER_RUNNING_MARKER = ':msg "Http server running"'

_LOCAL_URL_RE = re.compile(r':local-url "(?P<address>http://(?P<host>[^:"]+)):(?P<port>\d+)"')


@dataclass(frozen=True)
class LogAnnouncement:
    """One "Http server running" line."""
    address: str
    host: str
    port: str


def parse_announcement(line: str) -> Optional[LogAnnouncement]:
    if not line or UI_THREAD_MARKER not in line:
        return None
    if HTTP_SERVER_MARKER not in line or SERVER_RUNNING_MARKER not in line:
        return None
    match = _LOCAL_URL_RE.search(line)
    if not match:
        return None
    return LogAnnouncement(
        address=match.group("address"),
        host=match.group("host"),
        port=match.group("port"),
    )


def iter_announcements(log_file: str | Path) -> Iterator[LogAnnouncement]:
    """Yield announcements in file order. Raises OSError if the file can't be opened."""
    with open(log_file, "r", encoding="utf-8", errors="replace") as handle:
        for line in handle:
            announcement = parse_announcement(line)
            if announcement is not None:
                yield announcement


def scan_log_file(log_file: str | Path) -> List[str]:
    """Return announced ports, the most recently started editor first."""
    ports = [a.port for a in iter_announcements(log_file)]
    ports.reverse()
    return ports


def default_log_root() -> Path:
    env = (os.environ.get("DEFOLD_EDITOR_LOG_DIR") or "").strip()
    if env:
        return Path(env).expanduser()

    candidates: list[Path] = []
    if sys.platform == "darwin":
        candidates.append(Path.home() / "Library" / "Application Support" / "Defold")
    elif os.name == "nt":
        local_app_data = (os.environ.get("LOCALAPPDATA") or "").strip()
        if local_app_data:
            candidates.append(Path(local_app_data) / "Defold")
        app_data = (os.environ.get("APPDATA") or "").strip()
        if app_data:
            candidates.append(Path(app_data) / "Defold")
    else:
        xdg_state_home = (os.environ.get("XDG_STATE_HOME") or "").strip()
        if xdg_state_home:
            candidates.append(Path(xdg_state_home) / "Defold")
        candidates.append(Path.home() / ".local" / "state" / "Defold")
    candidates.append(Path.home() / ".Defold")

    for candidate in candidates:
        try:
            if candidate.exists():
                return candidate
        except Exception:
            continue

    return candidates[0]


def find_recent_log_file(root: Optional[Path] = None) -> Optional[Path]:
    """Newest *.log under root, or None."""
    root = Path(root).expanduser() if root else default_log_root()
    try:
        if not root.exists():
            return None
        paths = [p for p in root.glob("*.log") if p.is_file()]
    except Exception:
        return None
    if not paths:
        return None
    try:
        paths.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    except Exception:
        paths.sort()
    return paths[0]
