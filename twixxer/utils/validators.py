"""
Input Validation Utilities

This module provides validation functions for user input:
1. is_valid_username: Usernames are short handles safe to put in URLs
2. is_valid_image_url: Profile images must be http(s) links
3. safe_redirect_target: Keeps post-login redirects on this site

These are shared by the form models in twixxer.forms.
"""

import re
from urllib.parse import urlparse


# Letters, digits and underscore; length is checked separately
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")


def is_valid_username(username: str) -> bool:
    """
    Check that a username only uses URL-safe handle characters.

    Examples:
        >>> is_valid_username("jane_doe42")
        True
        >>> is_valid_username("jane doe")
        False
    """
    return bool(USERNAME_PATTERN.match(username))


def is_valid_image_url(url: str) -> bool:
    """
    Check if a string is an absolute http(s) URL with a host.

    Examples:
        >>> is_valid_image_url("https://example.com/me.png")
        True
        >>> is_valid_image_url("javascript:alert(1)")
        False
    """
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def safe_redirect_target(target: str | None, default: str = "/") -> str:
    """
    Return target if it is a local absolute path, otherwise default.

    Rejects absolute URLs and scheme-relative paths ("//evil.example")
    so a crafted login link can't bounce the user to another site.

    Examples:
        >>> safe_redirect_target("/feed")
        '/feed'
        >>> safe_redirect_target("https://evil.example/")
        '/'
    """
    if not target or not target.startswith("/") or target.startswith("//"):
        return default
    if "\\" in target:
        return default
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc:
        return default
    return target
