"""
Defold Bridge Web Controller - FastAPI Application.

Lets a code-editor extension trigger editor commands over local HTTP
instead of spawning the CLI for every save.
"""

import secrets
from typing import Optional

from fastapi import FastAPI

from ..editor import DefoldEditor
from .routes import editor as editor_routes

APP_NAME = "Defold Bridge Web Controller"
APP_VERSION = "1.0.0"


def create_app(
    editor: Optional[DefoldEditor] = None,
    local_only: bool = True,
    auth_token: Optional[str] = None,
) -> FastAPI:
    """Create the FastAPI application."""

    app = FastAPI(
        title=APP_NAME,
        version=APP_VERSION,
        docs_url="/api/docs" if not local_only else None,
        redoc_url=None,
    )

    app.state.local_only = local_only
    app.state.auth_token = auth_token
    # Requests never block on a terminal prompt.
    app.state.editor = (editor or DefoldEditor()).with_prompt(False)

    app.include_router(editor_routes.router, prefix="/api/editor", tags=["editor"])

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": APP_VERSION}

    return app


def generate_token() -> str:
    """Generate a secure access token."""
    return secrets.token_urlsafe(32)
