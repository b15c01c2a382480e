"""
Feed Routes - Posting Chirps and Infinite Scroll

This module handles the feed:
- GET /feed: Chirp form and the newest page of chirps
- POST /feed: Post a new chirp
- GET /feed/chirps: Older pages for infinite scroll (HTMX partial)

The feed page renders page 1 on the server. When there are more chirps the
list ends with a sentinel element; HTMX requests the next page when it
scrolls into view and swaps the sentinel for the returned partial, which
carries its own sentinel if there is yet another page.
"""

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from twixxer.config import settings
from twixxer.database import get_db
from twixxer.dependencies import get_current_user
from twixxer.exceptions import LoginRequired
from twixxer.forms import ChirpForm, parse_form
from twixxer.limiter import limiter
from twixxer.services.auth import SessionUser
from twixxer.services.chirps import create_chirp, feed_page
from twixxer.services.profiles import find_by_id
from twixxer.templating import templates


router = APIRouter(prefix="/feed", tags=["feed"])

MORE_URL = "/feed/chirps"


async def _render_feed(request, db, user, errors=None, values=None, success=False, status_code=200):
    page = await feed_page(db, 1, settings.FEED_PAGE_SIZE)
    return templates.TemplateResponse(request, "feed.html", {
        "user": user,
        "page": page,
        "more_url": MORE_URL,
        "errors": errors or {},
        "values": values or {},
        "success": success
    }, status_code=status_code)


@router.get("")
async def show_feed(
    request: Request,
    success: bool = False,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Feed page for logged-in users.

    Args:
        success: Set by the redirect after posting to show a notice
    """
    return await _render_feed(request, db, user, success=success)


@router.post("")
@limiter.limit("10/minute")
async def post_chirp(
    request: Request,
    content: str = Form(""),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new chirp.

    Returns:
        303 redirect back to the feed (POST/redirect/GET), or the feed with
        form errors (400)
    """
    form, errors = parse_form(ChirpForm, {"content": content})
    if errors:
        return await _render_feed(
            request, db, user, errors=errors, values={"content": content}, status_code=400
        )

    # The cookie can outlive the account
    profile = await find_by_id(db, user.user_id)
    if not profile:
        raise LoginRequired(redirect_to="/feed", clear_session=True)

    await create_chirp(db, profile.id, form.content)
    return RedirectResponse(url="/feed?success=true", status_code=303)


@router.get("/chirps")
async def more_chirps(
    request: Request,
    page: int = Query(1),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    One page of the feed as an HTML fragment, for infinite scroll.

    Args:
        page: 1-based page number
    """
    result = await feed_page(db, page, settings.FEED_PAGE_SIZE)
    return templates.TemplateResponse(request, "partials/chirp_page.html", {
        "page": result,
        "more_url": MORE_URL
    })
