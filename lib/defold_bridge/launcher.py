"""
Starting a new Defold editor for a project.

The resolver only sees EditorLauncher; platform differences live in
SystemEditorLauncher.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_PROJECT_FILE


class EditorLauncher(ABC):
    @abstractmethod
    async def open_editor(self, project_file: str, platform: str) -> None:
        """Start a new editor instance for project_file."""


def find_project_file(start: Optional[Path] = None, name: str = DEFAULT_PROJECT_FILE) -> Optional[Path]:
    """Nearest `name` in start or one of its parents."""
    try:
        cwd = Path(start or Path.cwd()).expanduser().resolve()
    except Exception:
        cwd = Path.cwd()
    for candidate in [cwd, *cwd.parents]:
        project = candidate / name
        if project.is_file():
            return project
    return None


def build_open_command(project_file: str, platform: str, editor_path: str = "") -> List[str]:
    if editor_path:
        if platform == "darwin" and editor_path.endswith(".app"):
            return ["open", "-a", editor_path, project_file]
        return [editor_path, project_file]
    if platform == "darwin":
        return ["open", project_file]
    if platform.startswith("win"):
        return ["cmd", "/c", "start", "", project_file]
    opener = shutil.which("xdg-open") or "xdg-open"
    return [opener, project_file]


class SystemEditorLauncher(EditorLauncher):
    def __init__(self, editor_path: str = "", work_dir: Optional[Path] = None):
        self.editor_path = editor_path
        self.work_dir = work_dir

    async def open_editor(self, project_file: str, platform: str = sys.platform) -> None:
        path = Path(project_file)
        if not path.is_absolute():
            found = find_project_file(self.work_dir, path.name)
            if found is None:
                raise FileNotFoundError(f"{project_file} not found from {self.work_dir or Path.cwd()}")
            path = found
        cmd = build_open_command(str(path), platform, self.editor_path)
        kwargs = {
            "cwd": str(path.parent),
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
        }
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NO_WINDOW
        else:
            kwargs["start_new_session"] = True
        await asyncio.to_thread(subprocess.Popen, cmd, **kwargs)
        print(f"[launcher] Opening {path}", file=sys.stderr)
