"""
Form Models

Pydantic models for every form the site accepts. Route handlers build one
of these from the submitted fields with `parse_form`; on failure they
re-render the page with the returned field -> message mapping.
"""

from typing import TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator

from twixxer.models import (
    ABOUT_MAX_LENGTH,
    CHIRP_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    IMAGE_URL_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
)
from twixxer.utils.validators import is_valid_image_url, is_valid_username, safe_redirect_target


FormT = TypeVar("FormT", bound=BaseModel)

USERNAME_MIN_LENGTH = 2
PASSWORD_MIN_LENGTH = 8


def _check_email(value: str) -> str:
    value = value.strip()
    if len(value) > EMAIL_MAX_LENGTH:
        raise ValueError("Email cannot exceed 255 characters")
    try:
        result = validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Invalid email address")
    return result.normalized


class SignupForm(BaseModel):
    username: str
    email: str
    password: str
    confirm_password: str

    @field_validator("username")
    def check_username(cls, value):
        value = value.strip()
        if len(value) < USERNAME_MIN_LENGTH:
            raise ValueError("Username must be at least 2 characters")
        if len(value) > USERNAME_MAX_LENGTH:
            raise ValueError("Username cannot exceed 127 characters")
        if not is_valid_username(value):
            raise ValueError("Username can only contain letters, numbers and underscores")
        return value

    @field_validator("email")
    def check_email(cls, value):
        return _check_email(value)

    @field_validator("password")
    def check_password(cls, value):
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError("Password must be at least 8 characters")
        return value

    @field_validator("confirm_password")
    def check_passwords_match(cls, value, info: ValidationInfo):
        # password is absent from info.data when it failed its own check
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("Passwords don't match")
        return value


class LoginForm(BaseModel):
    email_or_username: str
    password: str
    redirect_to: str = "/"

    @field_validator("email_or_username")
    def check_identifier(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Email or username is required")
        if "@" in value:
            # Same normalization signup stored the address with
            try:
                return _check_email(value)
            except ValueError:
                return value
        return value

    @field_validator("password")
    def check_password(cls, value):
        if not value:
            raise ValueError("Password is required")
        return value

    @field_validator("redirect_to", mode="before")
    def check_redirect(cls, value):
        return safe_redirect_target(value)


class ResendVerificationForm(BaseModel):
    email: str

    @field_validator("email")
    def check_email(cls, value):
        return _check_email(value)


class ChirpForm(BaseModel):
    content: str

    @field_validator("content")
    def check_content(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Chirp content is required")
        if len(value) > CHIRP_MAX_LENGTH:
            raise ValueError("Chirp cannot exceed 280 characters")
        return value


class ProfileEditForm(BaseModel):
    about: str = ""
    image_url: str = ""

    @field_validator("about")
    def check_about(cls, value):
        value = value.strip()
        if len(value) > ABOUT_MAX_LENGTH:
            raise ValueError("About cannot exceed 255 characters")
        return value

    @field_validator("image_url")
    def check_image_url(cls, value):
        value = value.strip()
        if not value:
            return value
        if len(value) > IMAGE_URL_MAX_LENGTH:
            raise ValueError("URL cannot exceed 255 characters")
        if not is_valid_image_url(value):
            raise ValueError("Please enter a valid URL")
        return value


def _errors_from(exc: ValidationError) -> dict[str, str]:
    """Flatten a pydantic ValidationError into {field: first message}."""
    errors = {}
    for error in exc.errors():
        message = error["msg"].removeprefix("Value error, ")
        field = str(error["loc"][0]) if error["loc"] else "form"
        if error["type"] == "missing":
            message = "This field is required"
        errors.setdefault(field, message)
    return errors


def parse_form(form_cls: type[FormT], data: dict) -> tuple[FormT | None, dict[str, str]]:
    """
    Validate submitted form data.

    Args:
        form_cls: One of the form models above
        data: Raw submitted fields; None values are dropped so defaults apply

    Returns:
        (form, {}) on success, (None, errors) on failure

    Example:
        form, errors = parse_form(ChirpForm, {"content": ""})
        # form is None, errors == {"content": "Chirp content is required"}
    """
    cleaned = {key: value for key, value in data.items() if value is not None}
    try:
        return form_cls(**cleaned), {}
    except ValidationError as exc:
        return None, _errors_from(exc)
