"""
Rate Limiting Configuration

This module sets up the slowapi Limiter used to throttle the form posts
that are worth abusing (signup, login, resend verification, posting).
Counters live in Redis in production (REDIS_URL=redis://...) and in
process memory during development and tests.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from twixxer.config import settings

# key_func=get_remote_address: one budget per client IP address
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.REDIS_URL,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)
