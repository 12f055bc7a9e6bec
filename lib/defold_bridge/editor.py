"""
DefoldEditor: resolve the running editor, then send it a command.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import httpx

from .commands import EditorCommand
from .config import BridgeConfig, load_config
from .dispatcher import execute_command
from .launcher import EditorLauncher, SystemEditorLauncher
from .log_scanner import find_recent_log_file
from .port_cache import PortCache
from .prober import is_editor_running
from .prompts import UserPrompt
from .resolver import PortResolver
from .state import KeyValueStore, open_default_store


class DefoldEditor:
    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        store: Optional[KeyValueStore] = None,
        prompt: Optional[UserPrompt] = None,
        launcher: Optional[EditorLauncher] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        platform: str = sys.platform,
    ):
        self.config = config or load_config()
        self.store = store if store is not None else open_default_store()
        self.prompt = prompt
        self.launcher = launcher or SystemEditorLauncher(self.config.editor.editor_path)
        self.platform = platform
        self.show_not_found_prompt = self.config.show_not_found_prompt
        self._transport = transport
        self.cache = PortCache(self.store, self.probe)

    async def probe(self, port: str) -> bool:
        return await is_editor_running(
            port,
            timeout=self.config.http.probe_timeout,
            transport=self._transport,
        )

    def _find_log_file(self) -> Optional[Path]:
        log_dir = self.config.editor.log_dir
        return find_recent_log_file(Path(log_dir) if log_dir else None)

    def resolver(self) -> PortResolver:
        return PortResolver(
            self.cache,
            self.probe,
            prompt=self.prompt,
            launcher=self.launcher,
            show_not_found_prompt=self.show_not_found_prompt,
            project_file=self.config.editor.project_file,
            platform=self.platform,
            find_log_file=self._find_log_file,
        )

    async def resolve_port(self) -> Optional[str]:
        return await self.resolver().resolve()

    async def send(self, port: str, command: EditorCommand) -> bool:
        return await execute_command(
            port,
            command,
            timeout=self.config.http.command_timeout,
            transport=self._transport,
        )

    async def call(self, command: EditorCommand) -> bool:
        port = await self.resolve_port()
        if not port:
            return False
        return await self.send(port, command)

    def with_prompt(self, enabled: bool) -> "DefoldEditor":
        """Copy sharing store, launcher and transport, with the prompt switched on or off."""
        clone = DefoldEditor(
            self.config,
            self.store,
            self.prompt,
            self.launcher,
            transport=self._transport,
            platform=self.platform,
        )
        clone.show_not_found_prompt = enabled
        return clone
