"""Tests for CheckoutService."""

from decimal import Decimal

import pytest

from artmarket.domain.exceptions import (
    InvalidStateTransition,
    NotFound,
    Unauthorized,
    UpstreamUnavailable,
)


@pytest.mark.asyncio
async def test_checkout_stores_quote_and_delivery(checked_out_order, shipping_rates):
    order = await checked_out_order(referral_code="ABC123")

    assert order.status == "CHECKOUT_READY"
    assert order.shipping_cost == Decimal("500.00")
    assert order.city == "Lagos"
    assert order.zip_code == "100001"
    assert order.referral_code == "ABC123"

    detail = shipping_rates.quote.await_args[0][0]
    assert detail["receiverDetail"]["country"] == "NG"
    assert detail["items"] == [{"listingId": "art-1", "quantity": 2}]


@pytest.mark.asyncio
async def test_checkout_again_replaces_address(checked_out_order, checkout_service, checkout_request, shipping_rates, customer):
    order = await checked_out_order()
    shipping_rates.quote.return_value = Decimal("800")

    request = checkout_request().model_copy(update={"city": "Abuja"})
    updated = await checkout_service.checkout(order.id, request, customer)

    assert updated.status == "CHECKOUT_READY"
    assert updated.city == "Abuja"
    assert updated.shipping_cost == Decimal("800.00")


@pytest.mark.asyncio
async def test_rate_failure_leaves_order_untouched(
    order_service, checkout_service, seed_listing, checkout_request, shipping_rates, customer
):
    await seed_listing("art-1")
    order, _ = await order_service.get_or_create_open_order(customer.profile_id)
    await order_service.add_item(order.id, "art-1", 1, customer)
    shipping_rates.quote.side_effect = UpstreamUnavailable("Topship", "request timed out")

    with pytest.raises(UpstreamUnavailable):
        await checkout_service.checkout(order.id, checkout_request(), customer)

    stored = await order_service.get_order(order.id)
    assert stored.status == "PENDING"
    assert stored.shipping_cost is None
    assert stored.delivery_address is None


@pytest.mark.asyncio
async def test_empty_order_cannot_check_out(order_service, checkout_service, checkout_request, shipping_rates, customer):
    order, _ = await order_service.get_or_create_open_order(customer.profile_id)

    with pytest.raises(InvalidStateTransition):
        await checkout_service.checkout(order.id, checkout_request(), customer)

    shipping_rates.quote.assert_not_awaited()


@pytest.mark.asyncio
async def test_checkout_requires_owner(checked_out_order, checkout_service, checkout_request, other_customer):
    order = await checked_out_order()

    with pytest.raises(Unauthorized):
        await checkout_service.checkout(order.id, checkout_request(), other_customer)


@pytest.mark.asyncio
async def test_checkout_unknown_order(checkout_service, checkout_request, customer):
    with pytest.raises(NotFound):
        await checkout_service.checkout("missing", checkout_request(), customer)


@pytest.mark.asyncio
async def test_canceled_order_cannot_check_out(order_service, checkout_service, seed_listing, checkout_request, customer):
    await seed_listing("art-1")
    order, _ = await order_service.get_or_create_open_order(customer.profile_id)
    await order_service.add_item(order.id, "art-1", 1, customer)
    await order_service.cancel(order.id, customer.profile_id)

    with pytest.raises(InvalidStateTransition):
        await checkout_service.checkout(order.id, checkout_request(), customer)


@pytest.mark.asyncio
async def test_items_added_during_quote_discard_the_quote(
    order_service, checkout_service, seed_listing, stock_of, checkout_request, shipping_rates, customer
):
    await seed_listing("art-1", quantity=10)
    order, _ = await order_service.get_or_create_open_order(customer.profile_id)
    await order_service.add_item(order.id, "art-1", 1, customer)

    async def quote_while_cart_grows(detail):
        await order_service.add_item(order.id, "art-1", 5, customer)
        return Decimal("100") * sum(item["quantity"] for item in detail["items"])

    shipping_rates.quote.side_effect = quote_while_cart_grows

    with pytest.raises(InvalidStateTransition):
        await checkout_service.checkout(order.id, checkout_request(), customer)

    stored = await order_service.get_order(order.id)
    assert stored.status == "PENDING"
    assert stored.shipping_cost is None
    assert sum(item.quantity for item in stored.items) == 6
    assert await stock_of("art-1") == 4

    shipping_rates.quote.side_effect = None
    shipping_rates.quote.return_value = Decimal("600")
    retried = await checkout_service.checkout(order.id, checkout_request(), customer)
    assert retried.status == "CHECKOUT_READY"
    assert retried.shipping_cost == Decimal("600.00")
