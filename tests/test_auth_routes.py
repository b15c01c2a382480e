"""Signup, verification, login and logout over HTTP."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from twixxer.exceptions import EmailDeliveryError
from twixxer.services.auth import SESSION_COOKIE_NAME
from twixxer.utils.text import utcnow

from tests.conftest import PASSWORD, get_profile, make_profile


SIGNUP = {
    "username": "alice",
    "email": "alice@example.com",
    "password": "long-enough",
    "confirm_password": "long-enough",
}


@pytest.mark.asyncio
async def test_signup_page_renders(client):
    response = await client.get("/signup")
    assert response.status_code == 200
    assert 'name="confirm_password"' in response.text


@pytest.mark.asyncio
async def test_signup_creates_profile_and_sends_email(client):
    with patch("twixxer.routes.auth.send_verification_email", new=AsyncMock()) as send:
        response = await client.post("/signup", data=SIGNUP)

    assert response.status_code == 200
    assert "alice@example.com" in response.text

    profile = await get_profile("alice")
    assert profile.verified is False
    send.assert_awaited_once_with("alice@example.com", "alice", profile.activation_token)


@pytest.mark.asyncio
async def test_signup_validation_errors_rerender_form(client):
    response = await client.post("/signup", data={**SIGNUP, "confirm_password": "mismatch!"})

    assert response.status_code == 400
    assert "Passwords don&#39;t match" in response.text
    assert await get_profile("alice") is None


@pytest.mark.asyncio
async def test_signup_duplicate_username(client):
    await make_profile("alice", "first@example.com")

    response = await client.post("/signup", data=SIGNUP)

    assert response.status_code == 400
    assert "That username is already in use" in response.text


@pytest.mark.asyncio
async def test_signup_duplicate_email(client):
    await make_profile("someone", "alice@example.com")

    response = await client.post("/signup", data=SIGNUP)

    assert response.status_code == 400
    assert "That email address is already in use" in response.text


@pytest.mark.asyncio
async def test_signup_survives_email_failure(client):
    failing = AsyncMock(side_effect=EmailDeliveryError("alice@example.com"))
    with patch("twixxer.routes.auth.send_verification_email", new=failing):
        response = await client.post("/signup", data=SIGNUP)

    assert response.status_code == 200
    assert "couldn't send the verification email" in response.text
    assert await get_profile("alice") is not None


@pytest.mark.asyncio
async def test_full_signup_verify_login_flow(client):
    await client.post("/signup", data=SIGNUP)
    token = (await get_profile("alice")).activation_token

    # Unverified accounts can't log in yet
    response = await client.post("/login", data={"email_or_username": "alice", "password": "long-enough"})
    assert response.status_code == 403
    assert "Please verify your email" in response.text

    response = await client.get("/verify", params={"token": token})
    assert response.status_code == 200
    assert "verified successfully" in response.text
    assert (await get_profile("alice")).verified is True

    response = await client.post("/login", data={"email_or_username": "alice@example.com", "password": "long-enough"})
    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert SESSION_COOKIE_NAME in response.cookies

    response = await client.get("/feed")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_verify_reports_expired_link(client):
    await make_profile(
        "alice", "alice@example.com", verified=False,
        activation_token="e" * 32, token_expiry=utcnow() - timedelta(hours=1)
    )

    response = await client.get("/verify", params={"token": "e" * 32})

    assert 'data-status="expired"' in response.text
    assert "Request a new link" in response.text


@pytest.mark.asyncio
async def test_verify_without_token(client):
    response = await client.get("/verify")
    assert "No verification token provided." in response.text


@pytest.mark.asyncio
async def test_login_wrong_password(client):
    await make_profile("alice", "alice@example.com")

    response = await client.post("/login", data={"email_or_username": "alice", "password": "nope-nope"})

    assert response.status_code == 400
    assert "Invalid username/email or password" in response.text
    assert SESSION_COOKIE_NAME not in response.cookies


@pytest.mark.asyncio
async def test_login_unknown_user_gets_same_message(client):
    response = await client.post("/login", data={"email_or_username": "ghost", "password": "whatever1"})

    assert response.status_code == 400
    assert "Invalid username/email or password" in response.text


@pytest.mark.asyncio
async def test_login_wrong_password_does_not_reveal_verification_state(client):
    await make_profile("alice", "alice@example.com", verified=False)

    response = await client.post("/login", data={"email_or_username": "alice", "password": "nope-nope"})

    assert response.status_code == 400
    assert "Please verify your email" not in response.text


@pytest.mark.asyncio
async def test_login_follows_local_redirect_only(client):
    await make_profile("alice", "alice@example.com")

    response = await client.post("/login", data={
        "email_or_username": "alice", "password": PASSWORD, "redirect_to": "/profile/alice"
    })
    assert response.headers["location"] == "/profile/alice"

    response = await client.post("/login", data={
        "email_or_username": "alice", "password": PASSWORD, "redirect_to": "https://evil.example/"
    })
    assert response.headers["location"] == "/"


@pytest.mark.asyncio
async def test_login_page_redirects_when_already_logged_in(auth_client):
    response = await auth_client.get("/login", params={"redirect_to": "/feed"})
    assert response.status_code == 303
    assert response.headers["location"] == "/feed"


@pytest.mark.asyncio
async def test_logout_clears_session(auth_client):
    response = await auth_client.post("/logout")
    assert response.status_code == 303
    assert response.headers["location"] == "/"

    response = await auth_client.get("/feed")
    assert response.status_code == 303
    assert response.headers["location"].startswith("/login")


@pytest.mark.asyncio
async def test_get_logout_only_redirects(auth_client):
    response = await auth_client.get("/logout")
    assert response.status_code == 303

    response = await auth_client.get("/feed")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_tampered_cookie_is_treated_as_anonymous(client):
    client.cookies.set(SESSION_COOKIE_NAME, "not.a.token")
    response = await client.get("/feed")
    assert response.status_code == 303


class TestResendVerification:

    @pytest.mark.asyncio
    async def test_unknown_email_gets_generic_message(self, client):
        with patch("twixxer.routes.auth.send_verification_email", new=AsyncMock()) as send:
            response = await client.post("/resend-verification", data={"email": "ghost@example.com"})

        assert response.status_code == 200
        assert "If your email is registered" in response.text
        send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_already_verified(self, client):
        await make_profile("alice", "alice@example.com", verified=True)

        response = await client.post("/resend-verification", data={"email": "alice@example.com"})

        assert "Your email is already verified" in response.text

    @pytest.mark.asyncio
    async def test_issues_new_token(self, client):
        await make_profile("alice", "alice@example.com", verified=False, activation_token="f" * 32)

        with patch("twixxer.routes.auth.send_verification_email", new=AsyncMock()) as send:
            response = await client.post("/resend-verification", data={"email": "alice@example.com"})

        assert "A new verification link has been sent" in response.text
        profile = await get_profile("alice")
        assert profile.activation_token != "f" * 32
        assert profile.token_expiry is not None
        send.assert_awaited_once_with("alice@example.com", "alice", profile.activation_token)

    @pytest.mark.asyncio
    async def test_invalid_email(self, client):
        response = await client.post("/resend-verification", data={"email": "nope"})
        assert response.status_code == 400
        assert "Invalid email address" in response.text


@pytest.mark.asyncio
async def test_login_with_mixed_case_email_as_typed_at_signup(client):
    await client.post("/signup", data={**SIGNUP, "email": "Alice@Example.COM"})
    token = (await get_profile("alice")).activation_token
    await client.get("/verify", params={"token": token})

    response = await client.post("/login", data={
        "email_or_username": "Alice@Example.COM", "password": "long-enough"
    })
    assert response.status_code == 303

    response = await client.post("/login", data={
        "email_or_username": "alice@example.com", "password": "long-enough"
    })
    assert response.status_code == 303


@pytest.mark.asyncio
async def test_signup_email_differing_only_in_case_is_taken(client):
    await make_profile("jane", "Jane@x.com")

    response = await client.post("/signup", data={**SIGNUP, "email": "jane@X.COM"})

    assert response.status_code == 400
    assert "That email address is already in use" in response.text
