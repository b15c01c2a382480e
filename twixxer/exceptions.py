"""
Application Exceptions

Custom exceptions raised by services and dependencies. Global handlers
registered in main.py turn them into redirects or error pages, so route
handlers don't need to build those responses themselves.

Hierarchy:
    TwixxerError (base)
    ├── LoginRequired       → 303 redirect to /login
    ├── NotFoundError       → 404 page
    ├── PermissionDenied    → 403 page
    ├── DuplicateProfile    → shown on the signup form
    └── EmailDeliveryError  → logged; signup/resend show a fallback message
"""


class TwixxerError(Exception):
    """Base exception for all Twixxer application errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class LoginRequired(TwixxerError):
    """
    Raised when an anonymous visitor requests a page that needs a session.

    Attributes:
        redirect_to: Path to return to after logging in
        clear_session: The visitor's session cookie is stale (e.g. its
                       profile was deleted) and must be dropped
    """

    def __init__(self, redirect_to: str = "/", clear_session: bool = False):
        super().__init__("You must be logged in to view this page")
        self.redirect_to = redirect_to
        self.clear_session = clear_session


class NotFoundError(TwixxerError):
    def __init__(self, resource: str = "page"):
        super().__init__(f"The requested {resource} was not found")
        self.resource = resource


class PermissionDenied(TwixxerError):
    def __init__(self, message: str = "You are not allowed to do that"):
        super().__init__(message)


class DuplicateProfile(TwixxerError):
    """
    Raised when signing up with a username or email that is already taken.

    Attributes:
        field: Form field to attach the error to ("username" or "email")
    """

    def __init__(self, field: str):
        label = "username" if field == "username" else "email address"
        super().__init__(f"That {label} is already in use")
        self.field = field


class EmailDeliveryError(TwixxerError):
    def __init__(self, to_email: str):
        super().__init__(f"Could not send email to {to_email}")
        self.to_email = to_email
