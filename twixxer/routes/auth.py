"""
Authentication Routes

This module implements password authentication with email verification.
The flow:
1. User signs up with username, email and password
2. System emails a one-time verification link (valid for 24 hours)
3. User clicks the link; the profile is marked verified
4. User logs in with email or username and password
5. A signed session cookie keeps them logged in for 7 days

Unverified profiles can't log in; they can ask for a new link at
/resend-verification.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from twixxer.database import get_db
from twixxer.dependencies import get_optional_user
from twixxer.exceptions import DuplicateProfile, EmailDeliveryError
from twixxer.forms import LoginForm, ResendVerificationForm, SignupForm, parse_form
from twixxer.limiter import limiter
from twixxer.services.auth import SessionUser, clear_session_cookie, set_session_cookie
from twixxer.services.email import send_verification_email
from twixxer.services.profiles import (
    find_by_email,
    find_by_login,
    register_profile,
    reissue_verification_token,
    verify_profile,
)
from twixxer.services.security import verify_password
from twixxer.templating import templates
from twixxer.utils.validators import safe_redirect_target


logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS = "Invalid username/email or password"


@router.get("/signup")
async def signup_page(request: Request, user: SessionUser | None = Depends(get_optional_user)):
    if user:
        return RedirectResponse(url="/feed", status_code=303)
    return templates.TemplateResponse(request, "signup.html", {"user": None, "errors": {}, "values": {}})


@router.post("/signup")
@limiter.limit("5/minute")
async def signup(
    request: Request,
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    db: AsyncSession = Depends(get_db)
):
    """
    Create an unverified profile and email the verification link.

    Returns:
        "Check your email" page, or the signup form with errors (400)
    """
    # Passwords are never echoed back into the form
    values = {"username": username, "email": email}

    form, errors = parse_form(SignupForm, {
        "username": username,
        "email": email,
        "password": password,
        "confirm_password": confirm_password,
    })
    if errors:
        return templates.TemplateResponse(
            request, "signup.html", {"user": None, "errors": errors, "values": values}, status_code=400
        )

    try:
        profile = await register_profile(db, form)
    except DuplicateProfile as e:
        return templates.TemplateResponse(
            request,
            "signup.html",
            {"user": None, "errors": {e.field: e.message}, "values": values},
            status_code=400
        )

    # The profile exists at this point; a delivery failure only means the
    # user has to ask for a new link
    email_sent = True
    try:
        await send_verification_email(profile.email, profile.username, profile.activation_token)
    except EmailDeliveryError:
        email_sent = False

    return templates.TemplateResponse(request, "signup_success.html", {
        "user": None,
        "email": profile.email,
        "email_sent": email_sent
    })


@router.get("/verify")
async def verify(request: Request, token: str = None, db: AsyncSession = Depends(get_db)):
    """Exchange a verification token from the emailed link."""
    result = await verify_profile(db, token)
    return templates.TemplateResponse(request, "verify.html", {"user": None, "result": result})


@router.get("/resend-verification")
async def resend_verification_page(request: Request, email: str = ""):
    return templates.TemplateResponse(
        request, "resend_verification.html", {"user": None, "errors": {}, "values": {"email": email}}
    )


@router.post("/resend-verification")
@limiter.limit("3/minute")
async def resend_verification(
    request: Request,
    email: str = Form(""),
    db: AsyncSession = Depends(get_db)
):
    """
    Issue a new verification token and email it.

    The response never reveals whether an address is registered.
    """
    form, errors = parse_form(ResendVerificationForm, {"email": email})
    if errors:
        return templates.TemplateResponse(
            request,
            "resend_verification.html",
            {"user": None, "errors": errors, "values": {"email": email}},
            status_code=400
        )

    context = {"user": None, "errors": {}, "values": {"email": form.email}}

    profile = await find_by_email(db, form.email)
    if not profile:
        context["message"] = "If your email is registered, a new verification link has been sent."
        return templates.TemplateResponse(request, "resend_verification.html", context)

    if profile.verified:
        context["message"] = "Your email is already verified. You can now log in."
        return templates.TemplateResponse(request, "resend_verification.html", context)

    token = await reissue_verification_token(db, profile)
    try:
        await send_verification_email(profile.email, profile.username, token)
    except EmailDeliveryError:
        context["form_error"] = (
            "An error occurred while resending the verification email. Please try again later."
        )
        return templates.TemplateResponse(request, "resend_verification.html", context, status_code=502)

    context["message"] = "A new verification link has been sent to your email."
    return templates.TemplateResponse(request, "resend_verification.html", context)


@router.get("/login")
async def login_page(
    request: Request,
    redirect_to: str = "/",
    user: SessionUser | None = Depends(get_optional_user)
):
    if user:
        return RedirectResponse(url=safe_redirect_target(redirect_to), status_code=303)
    return templates.TemplateResponse(request, "login.html", {
        "user": None,
        "errors": {},
        "values": {"redirect_to": safe_redirect_target(redirect_to)}
    })


@router.post("/login")
@limiter.limit("10/minute")
async def login(
    request: Request,
    email_or_username: str = Form(""),
    password: str = Form(""),
    redirect_to: str = Form("/"),
    db: AsyncSession = Depends(get_db)
):
    """
    Check credentials and start a session.

    Returns:
        303 redirect to redirect_to with the session cookie set, or the
        login form with an error
    """
    values = {"email_or_username": email_or_username, "redirect_to": safe_redirect_target(redirect_to)}

    form, errors = parse_form(LoginForm, {
        "email_or_username": email_or_username,
        "password": password,
        "redirect_to": redirect_to,
    })
    if errors:
        return templates.TemplateResponse(
            request, "login.html", {"user": None, "errors": errors, "values": values}, status_code=400
        )

    profile = await find_by_login(db, form.email_or_username)
    if not profile or not verify_password(form.password, profile.password_hash):
        logger.info(f"Failed login for {form.email_or_username!r}")
        return templates.TemplateResponse(
            request,
            "login.html",
            {"user": None, "errors": {}, "values": values, "form_error": INVALID_CREDENTIALS},
            status_code=400
        )

    if not profile.verified:
        return templates.TemplateResponse(
            request,
            "login.html",
            {
                "user": None,
                "errors": {},
                "values": values,
                "verification_needed": True,
                "email": profile.email
            },
            status_code=403
        )

    response = RedirectResponse(url=form.redirect_to, status_code=303)
    set_session_cookie(response, SessionUser(
        user_id=str(profile.id),
        username=profile.username,
        email=profile.email
    ))
    logger.info(f"Login: {profile.username}")
    return response


@router.post("/logout")
async def logout():
    """Log the user out by deleting the session cookie."""
    response = RedirectResponse(url="/", status_code=303)
    clear_session_cookie(response)
    return response


@router.get("/logout")
async def logout_page():
    # Logging out changes state, so it only happens on POST
    return RedirectResponse(url="/", status_code=303)
