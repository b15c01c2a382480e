"""
Profile Routes

- GET /profile: Redirect to the logged-in user's own profile
- GET /profile/{username}: Profile card and that user's chirps
- POST /profile/{username}: Edit "about" and avatar URL (owner only)
- GET /profile/{username}/chirps: Older chirps for infinite scroll
"""

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from twixxer.config import settings
from twixxer.database import get_db
from twixxer.dependencies import get_current_user
from twixxer.exceptions import NotFoundError, PermissionDenied
from twixxer.forms import ProfileEditForm, parse_form
from twixxer.services.auth import SessionUser
from twixxer.services.chirps import profile_chirps_page
from twixxer.services.profiles import find_by_username, update_profile
from twixxer.templating import templates


router = APIRouter(prefix="/profile", tags=["profile"])


async def _get_profile_or_404(db, username):
    profile = await find_by_username(db, username)
    if not profile:
        raise NotFoundError("profile")
    return profile


@router.get("")
async def own_profile(user: SessionUser = Depends(get_current_user)):
    return RedirectResponse(url=f"/profile/{user.username}", status_code=303)


@router.get("/{username}")
async def show_profile(
    request: Request,
    username: str,
    success: bool = False,
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Profile page.

    Everyone logged in can view any profile; only the owner sees the edit
    form.
    """
    profile = await _get_profile_or_404(db, username)
    page = await profile_chirps_page(db, profile.id, 1, settings.FEED_PAGE_SIZE)

    return templates.TemplateResponse(request, "profile.html", {
        "user": user,
        "profile": profile,
        "page": page,
        "more_url": f"/profile/{profile.username}/chirps",
        "is_own_profile": str(profile.id) == user.user_id,
        "errors": {},
        "values": {"about": profile.about or "", "image_url": profile.image_url or ""},
        "success": success
    })


@router.post("/{username}")
async def edit_profile(
    request: Request,
    username: str,
    about: str = Form(""),
    image_url: str = Form(""),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Save profile edits.

    Raises:
        PermissionDenied: Editing someone else's profile
        NotFoundError: Unknown username
    """
    profile = await _get_profile_or_404(db, username)
    if str(profile.id) != user.user_id:
        raise PermissionDenied("You can only edit your own profile")

    form, errors = parse_form(ProfileEditForm, {"about": about, "image_url": image_url})
    if errors:
        page = await profile_chirps_page(db, profile.id, 1, settings.FEED_PAGE_SIZE)
        return templates.TemplateResponse(request, "profile.html", {
            "user": user,
            "profile": profile,
            "page": page,
            "more_url": f"/profile/{profile.username}/chirps",
            "is_own_profile": True,
            "errors": errors,
            "values": {"about": about, "image_url": image_url},
            "success": False
        }, status_code=400)

    await update_profile(db, profile, form.about, form.image_url)
    return RedirectResponse(url=f"/profile/{profile.username}?success=true", status_code=303)


@router.get("/{username}/chirps")
async def more_profile_chirps(
    request: Request,
    username: str,
    page: int = Query(1),
    user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """One page of a profile's chirps as an HTML fragment."""
    profile = await _get_profile_or_404(db, username)
    result = await profile_chirps_page(db, profile.id, page, settings.FEED_PAGE_SIZE)
    return templates.TemplateResponse(request, "partials/chirp_page.html", {
        "page": result,
        "more_url": f"/profile/{profile.username}/chirps"
    })
