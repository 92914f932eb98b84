"""Tests for referral commission balances."""

from decimal import Decimal

import pytest

from artmarket.infrastructure.database import create_uow


@pytest.mark.asyncio
async def test_credit_adds_to_balance(session_factory):
    async with create_uow(session_factory) as uow:
        await uow.referrals.open("ABC123")
        await uow.commit()

    for amount in ("200.00", "50.25"):
        async with create_uow(session_factory) as uow:
            assert await uow.referrals.credit("ABC123", Decimal(amount)) is True
            await uow.commit()

    async with create_uow(session_factory) as uow:
        assert await uow.referrals.balance("ABC123") == Decimal("250.25")
        referral = await uow.referrals.get("ABC123")
    assert referral.balance.amount == Decimal("250.25")


@pytest.mark.asyncio
async def test_credit_unknown_code_is_not_an_error(session_factory):
    async with create_uow(session_factory) as uow:
        assert await uow.referrals.credit("NOPE", Decimal("10")) is False
        assert await uow.referrals.balance("NOPE") is None
