"""
Shared pytest fixtures.

The app reads its settings at import time, so the environment is pointed
at a throwaway SQLite database (and email/rate limiting are switched off)
before anything from twixxer is imported.

Fixtures:
    db           Fresh tables for one test (dropped afterwards)
    db_session   An AsyncSession on those tables, for service tests
    client       httpx AsyncClient talking to the app in-process
    auth_client  client with a logged-in, verified user ("alice")
"""

import os
import tempfile
from datetime import timedelta

_tmpdir = tempfile.mkdtemp(prefix="twixxer_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmpdir}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RESEND_API_KEY"] = ""
os.environ["BASE_URL"] = "http://testserver"
os.environ["REDIS_URL"] = "memory://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["FEED_PAGE_SIZE"] = "5"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.future import select

from twixxer.database import AsyncSessionLocal, engine
from twixxer.models import Base, Chirp, Profile
from twixxer.services.security import hash_password
from twixxer.utils.text import utcnow


PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture
async def db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db):
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(db):
    from twixxer.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def auth_client(client):
    await make_profile("alice", "alice@example.com")
    response = await client.post("/login", data={
        "email_or_username": "alice",
        "password": PASSWORD,
    })
    assert response.status_code == 303
    return client


async def make_profile(username, email, password=PASSWORD, verified=True, **fields):
    """Insert a profile directly, bypassing signup."""
    async with AsyncSessionLocal() as session:
        profile = Profile(
            username=username,
            email=email,
            password_hash=hash_password(password),
            verified=verified,
            **fields
        )
        session.add(profile)
        await session.commit()
        await session.refresh(profile)
        return profile


async def get_profile(username):
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Profile).filter(Profile.username == username))
        return result.scalars().first()


async def make_chirps(profile, count, start=None):
    """
    Insert `count` chirps for profile, one minute apart.

    The last one inserted is the newest; its content is f"chirp {count - 1}".
    """
    start = start or utcnow() - timedelta(days=1)
    async with AsyncSessionLocal() as session:
        for i in range(count):
            session.add(Chirp(
                profile_id=profile.id,
                content=f"chirp {i}",
                date=start + timedelta(minutes=i)
            ))
        await session.commit()
