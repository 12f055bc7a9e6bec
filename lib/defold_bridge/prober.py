"""
Liveness probe for the editor's local command server.
"""

from __future__ import annotations

from typing import Optional

import httpx

EDITOR_BASE_URL = "http://localhost"
COMMAND_PATH = "/command/"
PROBE_TIMEOUT = 1.5


def editor_url(port: str | int, path: str = COMMAND_PATH) -> str:
    return f"{EDITOR_BASE_URL}:{port}{path}"


def _is_valid_port(port: str | int | None) -> bool:
    try:
        value = int(str(port).strip())
    except (TypeError, ValueError):
        return False
    return 0 < value < 65536


async def is_editor_running(
    port: str | int | None,
    *,
    timeout: float = PROBE_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """True iff GET /command/ answers 2xx within timeout. Never raises."""
    if not _is_valid_port(port):
        return False
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(editor_url(str(port).strip()))
        return 200 <= response.status_code < 300
    except Exception:
        return False
