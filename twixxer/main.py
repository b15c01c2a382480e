"""
Main Application Entry Point

This module sets up the FastAPI application with:
- Logging and database initialization on startup
- Static file serving
- Rate limiting
- Exception handlers that turn application errors into pages/redirects
- Route registration
- The public homepage

Run with:
    uvicorn twixxer.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import urlencode

from fastapi import Depends, FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from twixxer.config import settings
from twixxer.database import engine, init_models
from twixxer.dependencies import get_optional_user
from twixxer.exceptions import LoginRequired, NotFoundError, PermissionDenied
from twixxer.limiter import limiter
from twixxer.routes import auth, feed, profile
from twixxer.services.auth import SessionUser, clear_session_cookie
from twixxer.templating import templates


logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def setup_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - runs on startup and shutdown.

    Startup tasks:
    - Configure logging
    - Create database tables if they don't exist

    Shutdown tasks:
    - Close pooled database connections
    """
    setup_logging()
    await init_models()
    logger.info(f"Twixxer started ({settings.ENVIRONMENT})")

    yield

    await engine.dispose()


app = FastAPI(title="Twixxer", lifespan=lifespan)

# Files in twixxer/static/ are served at /static/...
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# slowapi looks the limiter up on app.state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(auth.router)
app.include_router(feed.router)
app.include_router(profile.router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    """Send anonymous visitors to the login page, then back where they were."""
    query = urlencode({"redirect_to": exc.redirect_to})
    response = RedirectResponse(url=f"/login?{query}", status_code=303)
    if exc.clear_session:
        clear_session_cookie(response)
    return response


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    user = await get_optional_user(request)
    return templates.TemplateResponse(
        request, "error.html", {"user": user, "title": "Not found", "message": exc.message}, status_code=404
    )


@app.exception_handler(PermissionDenied)
async def permission_denied_handler(request: Request, exc: PermissionDenied):
    user = await get_optional_user(request)
    return templates.TemplateResponse(
        request, "error.html", {"user": user, "title": "Forbidden", "message": exc.message}, status_code=403
    )


@app.get("/")
async def root(request: Request, user: SessionUser | None = Depends(get_optional_user)):
    """
    Homepage route - the public welcome page.

    Logged-in users get a link to their feed instead of signup/login.
    """
    return templates.TemplateResponse(request, "home.html", {"user": user})
