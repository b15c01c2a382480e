"""
Offset Pagination with Lookahead

The feed and profile pages load chirps in fixed-size pages for infinite
scroll. Each query asks for one row more than the page size; if that extra
row comes back there is another page to load. This avoids a separate
COUNT(*) query.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession


# Largest value a BIGINT OFFSET/LIMIT parameter can carry
MAX_SQL_INTEGER = 2**63 - 1


@dataclass
class Page:
    """One page of results plus what the client needs to fetch the next."""
    items: list[Any] = field(default_factory=list)
    page: int = 1
    page_size: int = 20
    has_more: bool = False

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_more else None


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    """
    Offset and limit for a page, including the lookahead row.

    Examples:
        >>> page_bounds(1, 20)
        (0, 21)
        >>> page_bounds(3, 20)
        (40, 21)
    """
    return (page - 1) * page_size, page_size + 1


async def paginate(db: AsyncSession, query: Select, page: int, page_size: int) -> Page:
    """
    Run `query` for a single page.

    Args:
        db: Database session
        query: An ordered select; ordering must be stable for pages not to
               overlap (e.g. tie-break on the primary key)
        page: 1-based page number; anything below 1 is treated as 1
        page_size: Rows per page (must be positive)

    Returns:
        Page with at most page_size items
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")
    page = max(page, 1)

    offset, limit = page_bounds(page, page_size)
    if offset + limit > MAX_SQL_INTEGER:
        # Far past any real table; the driver can't bind the offset
        return Page(page=page, page_size=page_size)
    result = await db.execute(query.offset(offset).limit(limit))
    rows = list(result.scalars().all())

    return Page(
        items=rows[:page_size],
        page=page,
        page_size=page_size,
        has_more=len(rows) > page_size,
    )
