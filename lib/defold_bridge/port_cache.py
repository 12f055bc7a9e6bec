"""
Last known editor port, persisted across invocations.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from .state import KeyValueStore

PORT_KEY = "defoldEditorPort"

ProbeFn = Callable[[str], Awaitable[bool]]


class PortCache:
    """Stored port that is only trusted after a fresh liveness probe."""

    def __init__(self, store: KeyValueStore, probe: ProbeFn, *, key: str = PORT_KEY):
        self.store = store
        self.key = key
        self._probe = probe

    def peek(self) -> Optional[str]:
        """Stored port without probing it."""
        value = self.store.get(self.key, "")
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    async def get(self) -> Optional[str]:
        port = await asyncio.to_thread(self.peek)
        if port and await self._probe(port):
            return port
        # Stale value stays in the store until the next set().
        return None

    async def set(self, port: Optional[str | int]) -> None:
        value = str(port).strip() if port is not None else None
        await asyncio.to_thread(self.store.set, self.key, value or None)
