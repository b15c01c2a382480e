"""Display helpers."""

from datetime import datetime, timezone

from twixxer.utils.text import as_utc, avatar_initial, format_timestamp


def test_format_timestamp():
    value = datetime(2024, 5, 1, 14, 3, tzinfo=timezone.utc)
    assert format_timestamp(value) == "May 1, 2024 · 14:03 UTC"


def test_format_timestamp_none():
    assert format_timestamp(None) == ""


def test_as_utc_leaves_aware_values_alone():
    value = datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert as_utc(value) is value
    assert as_utc(datetime(2024, 5, 1)).tzinfo is timezone.utc


def test_avatar_initial():
    assert avatar_initial("alice") == "A"
    assert avatar_initial("") == "?"
