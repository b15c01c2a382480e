"""
Session Cookie Service

This module creates and reads the signed session cookie that keeps a user
logged in. The cookie value is a JSON Web Token carrying the user's id,
username and email, signed with HMAC-SHA256 using SECRET_KEY.

Key concepts:
- The token is tamper-proof: changing any claim invalidates the signature
- The token carries its own expiry ("exp"), matching the cookie's Max-Age
- No database lookup is needed to know who is logged in
"""

from dataclasses import dataclass
from datetime import timedelta

from fastapi import Response
from jose import JWTError, jwt

from twixxer.config import settings
from twixxer.utils.text import utcnow


# HMAC-SHA256 symmetric signing (same key signs and verifies)
ALGORITHM = "HS256"

SESSION_COOKIE_NAME = "__twixxer_session"


@dataclass(frozen=True)
class SessionUser:
    """The identity stored in the session cookie."""
    user_id: str
    username: str
    email: str


def create_session_token(user: SessionUser, expires_delta: timedelta | None = None) -> str:
    """
    Encode a SessionUser as a signed JWT.

    Args:
        user: Identity to store in the session
        expires_delta: Token lifetime; defaults to SESSION_MAX_AGE

    Returns:
        Encoded JWT string, used as the cookie value

    Example:
        token = create_session_token(SessionUser("3f2b...", "jane", "jane@example.com"))
        # Returns: "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
    """
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.SESSION_MAX_AGE)

    # "sub" is the standard JWT claim for the subject (the user id)
    to_encode = {
        "sub": user.user_id,
        "username": user.username,
        "email": user.email,
        "exp": utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def read_session_token(token: str | None) -> SessionUser | None:
    """
    Verify and decode a session token.

    Returns:
        SessionUser if the signature is valid, the token hasn't expired and
        all three identity claims are present; None otherwise
    """
    if not token:
        return None

    try:
        # Raises JWTError for a bad signature, expired token or malformed input
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None

    user_id = payload.get("sub")
    username = payload.get("username")
    email = payload.get("email")
    if not user_id or not username or not email:
        return None

    return SessionUser(user_id=user_id, username=username, email=email)


def set_session_cookie(response: Response, user: SessionUser) -> None:
    """Attach a fresh session cookie for user to the response."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user),
        httponly=True,  # JavaScript can't read it
        max_age=settings.SESSION_MAX_AGE,
        path="/",
        samesite="lax",
        secure=settings.is_production,  # HTTPS only in production
    )


def clear_session_cookie(response: Response) -> None:
    """Remove the session cookie, logging the user out."""
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
