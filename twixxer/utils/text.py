"""
Text and Time Display Utilities

This module provides small helpers used when storing and rendering chirps:
1. utcnow / as_utc: Timezone-aware timestamps
2. format_timestamp: Human-readable chirp dates
3. avatar_initial: Fallback avatar letter for profiles without an image
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Attach UTC to a naive datetime.

    SQLite hands timestamps back without tzinfo even when the column is
    declared with timezone=True. We always write UTC, so a naive value
    read back is UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_timestamp(value: datetime | None) -> str:
    """
    Format a chirp date for display.

    Example:
        >>> format_timestamp(datetime(2024, 5, 1, 14, 3, tzinfo=timezone.utc))
        'May 1, 2024 · 14:03 UTC'
    """
    if value is None:
        return ""
    value = as_utc(value)
    return f"{value.strftime('%b')} {value.day}, {value.year} · {value.strftime('%H:%M')} UTC"


def avatar_initial(username: str) -> str:
    """First letter of a username, uppercased, for the placeholder avatar."""
    return username[:1].upper() if username else "?"
