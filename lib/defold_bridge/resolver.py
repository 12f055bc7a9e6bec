"""
Port resolution: cached port, then editor logs, then the user.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from .launcher import EditorLauncher
from .log_scanner import find_recent_log_file, scan_log_file
from .port_cache import PortCache
from .prompts import LAUNCH_FAILED_MESSAGE, NotFoundChoice, UserPrompt

ProbeFn = Callable[[str], Awaitable[bool]]
LogFileFinder = Callable[[], Optional[Path]]
LogScanner = Callable[[Path], List[str]]


def _log(message: str) -> None:
    print(f"[resolver] {message}", file=sys.stderr)


class PortResolver:
    """Finds the port of a running editor, or None.

    A port is only returned after it answered a liveness probe during the
    same resolve() call. A port typed by the user is stored and verified on
    the next pass of the loop, which skips the log scan.
    """

    def __init__(
        self,
        cache: PortCache,
        probe: ProbeFn,
        *,
        prompt: Optional[UserPrompt] = None,
        launcher: Optional[EditorLauncher] = None,
        show_not_found_prompt: bool = True,
        project_file: str = "game.project",
        platform: str = sys.platform,
        find_log_file: LogFileFinder = find_recent_log_file,
        scan_log: LogScanner = scan_log_file,
    ):
        self.cache = cache
        self._probe = probe
        self.prompt = prompt
        self.launcher = launcher
        self.show_not_found_prompt = show_not_found_prompt
        self.project_file = project_file
        self.platform = platform
        self._find_log_file = find_log_file
        self._scan_log = scan_log
        self.passes = 0

    async def resolve(self, allow_log_scan: bool = True) -> Optional[str]:
        self.passes = 0
        while True:
            self.passes += 1
            port = await self.cache.get()
            if port:
                await self.cache.set(port)
                return port

            if allow_log_scan:
                port = await self.find_port_in_logs()
                if port:
                    await self.cache.set(port)
                    return port

            await self.cache.set(None)
            if not self.show_not_found_prompt or self.prompt is None:
                return None

            port_from_user = await self._ask_user()
            if not port_from_user:
                return None
            await self.cache.set(port_from_user)
            allow_log_scan = False

    async def find_port_in_logs(self) -> Optional[str]:
        log_file = await asyncio.to_thread(self._find_log_file)
        if not log_file:
            return None
        try:
            ports = await asyncio.to_thread(self._scan_log, log_file)
        except OSError as e:
            _log(f"Cannot read {log_file}: {e}")
            return None
        for port in ports:
            if await self._probe(port):
                return port
        if ports:
            _log(f"None of {len(ports)} announced port(s) in {log_file} is live")
        return None

    async def _ask_user(self) -> Optional[str]:
        try:
            choice = await self.prompt.ask_not_found()
            if choice == NotFoundChoice.OPEN_EDITOR:
                if self.launcher is not None:
                    await self.launcher.open_editor(self.project_file, self.platform)
                return None
            if choice == NotFoundChoice.INPUT_PORT:
                port = await self.prompt.ask_port()
                return (port or "").strip() or None
            return None
        except Exception as e:
            _log(f"Prompt failed: {type(e).__name__}: {e}")
        try:
            await self.prompt.show_error(LAUNCH_FAILED_MESSAGE)
        except Exception as e:
            _log(f"Cannot show error: {type(e).__name__}: {e}")
        return None
