"""Tests for the SQL inventory ledger."""

import asyncio

import pytest

from artmarket.domain.exceptions import InsufficientStock, NotFound
from artmarket.infrastructure.database import create_uow


async def _reserve(session_factory, listing_id, quantity, commit=True):
    async with create_uow(session_factory) as uow:
        remaining = await uow.inventory.reserve(listing_id, quantity)
        if commit:
            await uow.commit()
        return remaining


@pytest.mark.asyncio
async def test_reserve_decrements_stock(session_factory, seed_listing, stock_of):
    await seed_listing("art-1", quantity=5)

    remaining = await _reserve(session_factory, "art-1", 2)

    assert remaining == 3
    assert await stock_of("art-1") == 3


@pytest.mark.asyncio
async def test_reserve_more_than_available(session_factory, seed_listing, stock_of):
    await seed_listing("art-1", quantity=1)

    with pytest.raises(InsufficientStock) as exc_info:
        await _reserve(session_factory, "art-1", 2)

    assert exc_info.value.context["available"] == 1
    assert await stock_of("art-1") == 1


@pytest.mark.asyncio
async def test_reserve_unknown_listing(session_factory):
    with pytest.raises(NotFound):
        await _reserve(session_factory, "missing", 1)


@pytest.mark.asyncio
async def test_reserve_rejects_non_positive_quantity(session_factory, seed_listing):
    await seed_listing("art-1")
    with pytest.raises(ValueError):
        await _reserve(session_factory, "art-1", 0)


@pytest.mark.asyncio
async def test_uncommitted_reservation_is_rolled_back(session_factory, seed_listing, stock_of):
    await seed_listing("art-1", quantity=4)

    await _reserve(session_factory, "art-1", 3, commit=False)

    assert await stock_of("art-1") == 4


@pytest.mark.asyncio
async def test_release_has_no_upper_bound(session_factory, seed_listing, stock_of):
    await seed_listing("art-1", quantity=1)

    async with create_uow(session_factory) as uow:
        await uow.inventory.release("art-1", 10)
        await uow.commit()

    assert await stock_of("art-1") == 11


@pytest.mark.asyncio
async def test_release_unknown_listing(session_factory):
    async with create_uow(session_factory) as uow:
        with pytest.raises(NotFound):
            await uow.inventory.release("missing", 1)


@pytest.mark.asyncio
async def test_concurrent_reservations_never_oversell(session_factory, seed_listing, stock_of):
    await seed_listing("art-1", quantity=5)

    results = await asyncio.gather(
        *(_reserve(session_factory, "art-1", 1) for _ in range(8)),
        return_exceptions=True,
    )

    successes = [r for r in results if isinstance(r, int)]
    failures = [r for r in results if isinstance(r, InsufficientStock)]
    assert len(successes) == 5
    assert len(failures) == 3
    assert await stock_of("art-1") == 0
