"""
Editor command API routes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ...commands import COMMAND_DESCRIPTIONS, EditorCommand, parse_command
from ...editor import DefoldEditor
from ...errors import BridgeError
from ...triggers import HotReloadOnSave
from ..auth import require_auth

router = APIRouter()


class EditorStatus(BaseModel):
    """Editor discovery status."""
    running: bool
    port: Optional[str] = None
    cached_port: Optional[str] = None


class CommandInfo(BaseModel):
    id: str
    description: str


class CommandResult(BaseModel):
    """Command dispatch result."""
    command: str
    success: bool
    port: Optional[str] = None


class SavedFile(BaseModel):
    path: str


class SavedResult(BaseModel):
    path: str
    matched: bool
    success: bool = False


def get_editor(request: Request) -> DefoldEditor:
    return request.app.state.editor


@router.get("/status")
async def editor_status(
    editor: DefoldEditor = Depends(get_editor),
    user: dict = Depends(require_auth),
) -> EditorStatus:
    """Resolve the editor without prompting and report what was found."""
    port = await editor.resolve_port()
    return EditorStatus(running=port is not None, port=port, cached_port=editor.cache.peek())


@router.get("/commands")
async def list_commands(user: dict = Depends(require_auth)) -> List[CommandInfo]:
    return [CommandInfo(id=c.value, description=COMMAND_DESCRIPTIONS.get(c, "")) for c in EditorCommand]


@router.post("/commands/{command}")
async def run_command(
    command: str,
    editor: DefoldEditor = Depends(get_editor),
    user: dict = Depends(require_auth),
) -> CommandResult:
    try:
        parsed = parse_command(command)
    except BridgeError as e:
        raise HTTPException(status_code=404, detail=str(e))

    port = await editor.resolve_port()
    if not port:
        return CommandResult(command=parsed.value, success=False)
    success = await editor.send(port, parsed)
    return CommandResult(command=parsed.value, success=success, port=port)


@router.post("/saved")
async def file_saved(
    saved: SavedFile,
    editor: DefoldEditor = Depends(get_editor),
    user: dict = Depends(require_auth),
) -> SavedResult:
    """Save hook for extensions that observe saves themselves."""
    reloader = HotReloadOnSave(editor)
    result = await reloader.on_saved(saved.path)
    return SavedResult(path=saved.path, matched=result is not None, success=bool(result))
