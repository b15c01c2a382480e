"""
Chirp Service

Creating chirps and loading them newest-first for the feed and for
profile pages.
"""

import logging
import uuid

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from twixxer.models import Chirp
from twixxer.services.pagination import Page, paginate


logger = logging.getLogger(__name__)


def _newest_first():
    # Eagerly load the author so templates don't lazy-load in async code
    # (that raises MissingGreenlet). Ties on date break on id so pages
    # never overlap or skip rows.
    return (
        select(Chirp)
        .options(selectinload(Chirp.profile))
        .order_by(desc(Chirp.date), desc(Chirp.id))
    )


async def create_chirp(db: AsyncSession, profile_id: uuid.UUID, content: str) -> Chirp:
    chirp = Chirp(profile_id=profile_id, content=content)
    db.add(chirp)
    await db.commit()
    await db.refresh(chirp)
    logger.info(f"Chirp {chirp.id} created by profile {profile_id}")
    return chirp


async def feed_page(db: AsyncSession, page: int, page_size: int) -> Page:
    """All chirps, newest first."""
    return await paginate(db, _newest_first(), page, page_size)


async def profile_chirps_page(
    db: AsyncSession,
    profile_id: uuid.UUID,
    page: int,
    page_size: int
) -> Page:
    """Chirps written by one profile, newest first."""
    query = _newest_first().filter(Chirp.profile_id == profile_id)
    return await paginate(db, query, page, page_size)
