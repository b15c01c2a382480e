"""
Database Connection and Session Management

This module sets up SQLAlchemy's async database engine and provides
a dependency injection function for FastAPI routes to access database sessions.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from twixxer.config import settings
from twixxer.models import Base


# Create async database engine
# The driver comes from the URL scheme: asyncpg in production, aiosqlite in tests
engine = create_async_engine(settings.DATABASE_URL, echo=False)


# Session factory for creating database sessions
# - expire_on_commit=False: objects stay readable after commit, since
#   async sessions can't lazily refresh attributes
AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def init_models():
    """Create tables for all models that don't exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    """
    Database session dependency for FastAPI routes.

    Yields one session per request and closes it when the request
    is complete, even if an exception occurs during request handling.

    Usage in FastAPI routes:
        @router.get("/endpoint")
        async def route(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Profile))
    """
    async with AsyncSessionLocal() as session:
        yield session
