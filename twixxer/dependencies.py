"""
Authentication Dependencies for FastAPI Routes

This module provides dependency injection functions for authentication.
The logged-in identity comes straight from the signed session cookie,
so no database lookup is needed to gate a page.
"""

from fastapi import Request

from twixxer.exceptions import LoginRequired
from twixxer.services.auth import SESSION_COOKIE_NAME, SessionUser, read_session_token


def _requested_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


async def get_optional_user(request: Request) -> SessionUser | None:
    """
    Dependency that returns the logged-in user, or None for visitors.

    Usage in routes:
        @router.get("/")
        async def home(user: SessionUser | None = Depends(get_optional_user)):
            ...
    """
    return read_session_token(request.cookies.get(SESSION_COOKIE_NAME))


async def get_current_user(request: Request) -> SessionUser:
    """
    Dependency that requires a logged-in user.

    Raises:
        LoginRequired: No valid session. The handler in main.py redirects
                       to /login and comes back here afterwards.
    """
    user = await get_optional_user(request)
    if user is None:
        # Only GET pages are worth returning to; a form POST isn't
        redirect_to = _requested_path(request) if request.method == "GET" else "/"
        raise LoginRequired(redirect_to=redirect_to)
    return user
