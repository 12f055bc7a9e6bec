"""
Authentication dependencies for the bridge web controller.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

security = HTTPBearer(auto_error=False)

LOCAL_HOSTS = ("127.0.0.1", "localhost", "::1")


async def verify_local_access(request: Request) -> bool:
    """Verify the peer address is localhost. X-Forwarded-For is not trusted."""
    client_host = request.client.host if request.client else None
    return client_host in LOCAL_HOSTS


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Authenticate the request.

    - Local requests: No auth required
    - Remote requests: Bearer token required (and only when not local-only)
    """
    app = request.app

    if await verify_local_access(request):
        return {"type": "local", "authenticated": True}

    if app.state.local_only:
        raise HTTPException(
            status_code=403,
            detail="Remote access not allowed in local-only mode",
        )

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not app.state.auth_token or credentials.credentials != app.state.auth_token:
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token",
        )

    return {"type": "token", "authenticated": True}


def require_auth(user: dict = Depends(get_current_user)) -> dict:
    """Dependency to require authentication."""
    if not user.get("authenticated"):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
