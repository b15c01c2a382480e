"""Offset pagination with a lookahead row, through the chirp service."""

import pytest

from twixxer.services.chirps import create_chirp, feed_page, profile_chirps_page
from twixxer.services.pagination import Page, page_bounds

from tests.conftest import make_chirps, make_profile


def test_page_bounds_include_lookahead_row():
    assert page_bounds(1, 20) == (0, 21)
    assert page_bounds(2, 20) == (20, 21)
    assert page_bounds(5, 3) == (12, 4)


def test_next_page():
    assert Page(page=2, has_more=True).next_page == 3
    assert Page(page=2, has_more=False).next_page is None


@pytest.mark.asyncio
async def test_empty_feed(db_session):
    page = await feed_page(db_session, 1, 5)
    assert page.items == []
    assert page.has_more is False


@pytest.mark.asyncio
async def test_exactly_one_full_page_has_no_more(db_session):
    alice = await make_profile("alice", "alice@example.com")
    await make_chirps(alice, 5)

    page = await feed_page(db_session, 1, 5)

    assert len(page.items) == 5
    assert page.has_more is False


@pytest.mark.asyncio
async def test_pages_walk_newest_first_without_overlap(db_session):
    alice = await make_profile("alice", "alice@example.com")
    await make_chirps(alice, 12)

    first = await feed_page(db_session, 1, 5)
    second = await feed_page(db_session, 2, 5)
    third = await feed_page(db_session, 3, 5)

    assert [c.content for c in first.items] == [f"chirp {i}" for i in range(11, 6, -1)]
    assert [c.content for c in second.items] == [f"chirp {i}" for i in range(6, 1, -1)]
    assert [c.content for c in third.items] == ["chirp 1", "chirp 0"]
    assert (first.has_more, second.has_more, third.has_more) == (True, True, False)
    assert first.next_page == 2


@pytest.mark.asyncio
async def test_page_below_one_is_clamped(db_session):
    alice = await make_profile("alice", "alice@example.com")
    await make_chirps(alice, 3)

    page = await feed_page(db_session, 0, 5)

    assert page.page == 1
    assert len(page.items) == 3


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(db_session):
    alice = await make_profile("alice", "alice@example.com")
    await make_chirps(alice, 3)

    page = await feed_page(db_session, 4, 5)

    assert page.items == []
    assert page.has_more is False


@pytest.mark.asyncio
async def test_profile_page_only_has_that_profiles_chirps(db_session):
    alice = await make_profile("alice", "alice@example.com")
    bob = await make_profile("bob", "bob@example.com")
    await make_chirps(alice, 3)
    await make_chirps(bob, 2)

    page = await profile_chirps_page(db_session, bob.id, 1, 5)

    assert len(page.items) == 2
    assert {c.profile.username for c in page.items} == {"bob"}


@pytest.mark.asyncio
async def test_created_chirp_is_newest(db_session):
    alice = await make_profile("alice", "alice@example.com")
    await make_chirps(alice, 3)

    chirp = await create_chirp(db_session, alice.id, "fresh")
    page = await feed_page(db_session, 1, 5)

    assert page.items[0].id == chirp.id
    assert page.items[0].content == "fresh"


@pytest.mark.asyncio
async def test_invalid_page_size(db_session):
    with pytest.raises(ValueError):
        await feed_page(db_session, 1, 0)


@pytest.mark.asyncio
async def test_page_beyond_integer_range_is_empty(db_session):
    alice = await make_profile("alice", "alice@example.com")
    await make_chirps(alice, 3)

    page = await feed_page(db_session, 10**19, 5)

    assert page.items == []
    assert page.has_more is False
