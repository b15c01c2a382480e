"""
Email Service for Account Verification

This module sends the verification email issued at signup (and on
"resend verification") using the Resend API.

When RESEND_API_KEY is not configured the email is not sent; the
verification link is written to the log instead so local development
works without an email provider.
"""

import asyncio
import logging
from datetime import datetime

import resend

from twixxer.config import settings
from twixxer.exceptions import EmailDeliveryError


logger = logging.getLogger(__name__)

SUBJECT = "Verify your Twixxer account"


def build_verification_url(token: str) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/verify?token={token}"


def _text_body(name: str, url: str) -> str:
    return (
        f"Hello {name}!\n\n"
        "Please verify your Twixxer account by clicking the link below:\n\n"
        f"{url}\n\n"
        f"This link will expire in {settings.VERIFICATION_TOKEN_HOURS} hours.\n\n"
        "If you did not create a Twixxer account, please ignore this email."
    )


def _html_body(name: str, url: str) -> str:
    return f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #1DA1F2;">Welcome to Twixxer!</h2>
        <p>Hello {name}!</p>
        <p>Please verify your Twixxer account by clicking the button below:</p>
        <div style="text-align: center; margin: 25px 0;">
          <a href="{url}"
             style="background-color: #1DA1F2; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px; font-weight: bold;">
            Verify Email Address
          </a>
        </div>
        <p>Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #505050;">{url}</p>
        <p>This link will expire in {settings.VERIFICATION_TOKEN_HOURS} hours.</p>
        <p>If you did not create a Twixxer account, please ignore this email.</p>
        <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #eee; font-size: 12px; color: #888;">
          &copy; {datetime.now().year} Twixxer. All rights reserved.
        </div>
      </div>
    """


async def send_verification_email(to_email: str, name: str, token: str):
    """
    Send the account verification email.

    Args:
        to_email: Recipient's email address
        name: Username to greet
        token: Verification token to embed in the link

    Raises:
        EmailDeliveryError: If the Resend API call fails
    """
    url = build_verification_url(token)

    if not settings.RESEND_API_KEY:
        logger.warning(f"RESEND_API_KEY not configured. Verification link for {to_email}: {url}")
        return

    params = {
        "from": f"Twixxer <{settings.FROM_EMAIL}>",
        "to": [to_email],
        "subject": SUBJECT,
        "text": _text_body(name, url),
        "html": _html_body(name, url),
    }

    def _send_sync():
        resend.api_key = settings.RESEND_API_KEY
        return resend.Emails.send(params)

    try:
        # The Resend SDK is blocking; keep it off the event loop
        email = await asyncio.to_thread(_send_sync)
    except Exception as e:
        logger.error(f"Error sending email to {to_email}: {e}")
        raise EmailDeliveryError(to_email) from e

    logger.info(f"Verification email sent to {to_email}: {email}")
