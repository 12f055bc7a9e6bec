"""
Sends one command to an already resolved editor port.
"""

from __future__ import annotations

import sys
from typing import Optional

import httpx

from .commands import EditorCommand
from .prober import COMMAND_PATH, editor_url

COMMAND_TIMEOUT = 2.0


async def execute_command(
    port: str | int,
    command: EditorCommand | str,
    *,
    timeout: float = COMMAND_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """POST /command/<id> with no body. True iff the editor answers 2xx."""
    command_id = command.value if isinstance(command, EditorCommand) else str(command)
    url = editor_url(str(port).strip(), f"{COMMAND_PATH}{command_id}")
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url)
        if 200 <= response.status_code < 300:
            return True
        print(f"[dispatch] {command_id} -> HTTP {response.status_code}", file=sys.stderr)
        return False
    except Exception as e:
        print(f"[dispatch] {command_id} failed: {type(e).__name__}: {e}", file=sys.stderr)
        return False
