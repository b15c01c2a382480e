"""
Database Models for Twixxer

This module defines the SQLAlchemy ORM models for the application:
- Profile: A user account (credentials, verification state, public profile)
- Chirp: A short post written by one profile

Timestamps are stored as timezone-aware UTC values.
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship

from twixxer.utils.text import utcnow


# Base class for all ORM models
Base = declarative_base()


# Column sizes shared with form validation
USERNAME_MAX_LENGTH = 127
EMAIL_MAX_LENGTH = 255
ABOUT_MAX_LENGTH = 255
IMAGE_URL_MAX_LENGTH = 255
CHIRP_MAX_LENGTH = 280


class Profile(Base):
    """
    Profile model representing a Twixxer account.

    A profile starts unverified with an activation token and expiry.
    Exchanging the token (see services.profiles.verify_profile) marks the
    profile verified and clears both columns.
    """
    __tablename__ = "profile"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Both login identifiers are unique
    username = Column(String(USERNAME_MAX_LENGTH), unique=True, nullable=False, index=True)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, nullable=False, index=True)

    # bcrypt hash, never the plain password
    password_hash = Column(String(255), nullable=False)

    about = Column(String(ABOUT_MAX_LENGTH), nullable=True)
    image_url = Column(String(IMAGE_URL_MAX_LENGTH), nullable=True)

    verified = Column(Boolean, nullable=False, default=False)

    # 32 hex characters; NULL once the profile is verified
    activation_token = Column(String(32), nullable=True, index=True)
    token_expiry = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    # One-to-many: profile.chirps / chirp.profile
    # cascade="all, delete-orphan": deleting a profile deletes its chirps
    chirps = relationship("Chirp", back_populates="profile", cascade="all, delete-orphan")


class Chirp(Base):
    """A short post (at most 280 characters) owned by one profile."""
    __tablename__ = "chirp"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    profile_id = Column(Uuid, ForeignKey("profile.id"), nullable=False, index=True)

    content = Column(Text, nullable=False)

    # Feed ordering key
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    profile = relationship("Profile", back_populates="chirps")
