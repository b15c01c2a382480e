"""
Password and Verification Token Helpers

Password hashing uses bcrypt, which salts every hash and is deliberately
slow to compute. Verification tokens are random hex strings with an expiry
timestamp stored next to them on the profile.
"""

import logging
import secrets
from datetime import datetime, timedelta

import bcrypt

from twixxer.utils.text import as_utc, utcnow


logger = logging.getLogger(__name__)

# Random bytes per verification token (32 hex characters)
TOKEN_BYTES = 16


def hash_password(password: str) -> str:
    """Hash a password with bcrypt using a fresh salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a password against a stored bcrypt hash.

    Never raises: a corrupt hash is logged and treated as a mismatch so
    the login form shows the usual "invalid credentials" message.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError) as e:
        logger.error(f"Error verifying password: {e}")
        return False


def generate_verification_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def calculate_token_expiry(hours: int = 24) -> datetime:
    """Expiry timestamp `hours` from now (UTC)."""
    return utcnow() + timedelta(hours=hours)


def is_token_expired(expiry: datetime | None) -> bool:
    """
    Check whether a verification token has expired.

    A missing expiry counts as expired.
    """
    if expiry is None:
        return True
    return utcnow() > as_utc(expiry)
