"""
Profile Service

Account lifecycle for profiles:
1. register_profile: Create an unverified profile with an activation token
2. verify_profile: Exchange the token once to mark the profile verified
3. reissue_verification_token: New token for "resend verification"
4. update_profile: Edit the public "about" text and avatar URL

Lookups used by login and the profile pages live here too.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from twixxer.config import settings
from twixxer.exceptions import DuplicateProfile
from twixxer.forms import SignupForm
from twixxer.models import Profile
from twixxer.services.security import (
    calculate_token_expiry,
    generate_verification_token,
    hash_password,
    is_token_expired,
)


logger = logging.getLogger(__name__)


# Verification outcomes, shown on the /verify page
VERIFY_SUCCESS = "success"
VERIFY_ALREADY = "verified"
VERIFY_EXPIRED = "expired"
VERIFY_ERROR = "error"


@dataclass(frozen=True)
class VerificationResult:
    status: str
    message: str


async def find_by_id(db: AsyncSession, profile_id: uuid.UUID | str) -> Profile | None:
    if isinstance(profile_id, str):
        try:
            profile_id = uuid.UUID(profile_id)
        except ValueError:
            return None
    result = await db.execute(select(Profile).filter(Profile.id == profile_id))
    return result.scalars().first()


async def find_by_username(db: AsyncSession, username: str) -> Profile | None:
    result = await db.execute(select(Profile).filter(Profile.username == username))
    return result.scalars().first()


async def find_by_email(db: AsyncSession, email: str) -> Profile | None:
    """Case-insensitive match: Jane@X.com and jane@x.com are one mailbox."""
    result = await db.execute(select(Profile).filter(func.lower(Profile.email) == email.lower()))
    return result.scalars().first()


async def find_by_login(db: AsyncSession, email_or_username: str) -> Profile | None:
    """
    Find the profile whose email or username matches the login field.

    Emails compare case-insensitively, like find_by_email; usernames match exactly.
    """
    result = await db.execute(
        select(Profile).filter(
            or_(
                func.lower(Profile.email) == email_or_username.lower(),
                Profile.username == email_or_username
            )
        )
    )
    return result.scalars().first()


async def find_by_activation_token(db: AsyncSession, token: str) -> Profile | None:
    result = await db.execute(select(Profile).filter(Profile.activation_token == token))
    return result.scalars().first()


async def register_profile(db: AsyncSession, form: SignupForm) -> Profile:
    """
    Create a new, unverified profile.

    Args:
        db: Database session
        form: Validated signup form

    Returns:
        The saved Profile, carrying the activation token to email

    Raises:
        DuplicateProfile: If the username or email is already registered
    """
    if await find_by_username(db, form.username):
        raise DuplicateProfile("username")
    if await find_by_email(db, form.email):
        raise DuplicateProfile("email")

    profile = Profile(
        username=form.username,
        email=form.email,
        password_hash=hash_password(form.password),
        verified=False,
        activation_token=generate_verification_token(),
        token_expiry=calculate_token_expiry(settings.VERIFICATION_TOKEN_HOURS),
    )
    db.add(profile)

    try:
        await db.commit()
    except IntegrityError:
        # Another signup took the username or email between our check and insert
        await db.rollback()
        logger.warning(f"Concurrent signup conflict for {form.username} / {form.email}")
        field = "username" if await find_by_username(db, form.username) else "email"
        raise DuplicateProfile(field)

    await db.refresh(profile)
    logger.info(f"Profile created: {profile.username} ({profile.id})")
    return profile


async def verify_profile(db: AsyncSession, token: str | None) -> VerificationResult:
    """
    Exchange a verification token.

    Checks run in order: missing token, unknown token, expired token,
    already verified. Only a fresh token for an unverified profile succeeds,
    and success clears the token so it can't be used again.
    """
    if not token:
        return VerificationResult(VERIFY_ERROR, "No verification token provided.")

    profile = await find_by_activation_token(db, token)
    if not profile:
        return VerificationResult(VERIFY_ERROR, "Invalid verification token.")

    if is_token_expired(profile.token_expiry):
        return VerificationResult(
            VERIFY_EXPIRED,
            "Verification link has expired. Please request a new one."
        )

    if profile.verified:
        return VerificationResult(
            VERIFY_ALREADY,
            "Your email is already verified. You can now log in."
        )

    profile.verified = True
    profile.activation_token = None
    profile.token_expiry = None
    await db.commit()

    logger.info(f"Profile verified: {profile.username}")
    return VerificationResult(
        VERIFY_SUCCESS,
        "Your email has been verified successfully! You can now log in."
    )


async def reissue_verification_token(db: AsyncSession, profile: Profile) -> str:
    """Replace the profile's activation token and expiry; returns the new token."""
    profile.activation_token = generate_verification_token()
    profile.token_expiry = calculate_token_expiry(settings.VERIFICATION_TOKEN_HOURS)
    await db.commit()
    return profile.activation_token


async def update_profile(db: AsyncSession, profile: Profile, about: str, image_url: str) -> Profile:
    """Save the editable profile fields; empty strings are stored as NULL."""
    profile.about = about or None
    profile.image_url = image_url or None
    await db.commit()
    logger.info(f"Profile updated: {profile.username}")
    return profile
