"""Fixtures that drive an order through the cart and checkout steps."""

import pytest

from artmarket.application.dtos import CheckoutRequest


@pytest.fixture
def checkout_request():
    def _request(referral_code=None) -> CheckoutRequest:
        return CheckoutRequest(
            delivery_address="12 Broad Street",
            city="Lagos",
            zip_code="100001",
            country="NG",
            referral_code=referral_code,
        )

    return _request


@pytest.fixture
def checked_out_order(order_service, checkout_service, seed_listing, checkout_request, customer):
    """Order for `customer` with 2 x listing at `price`, checked out with shipping 500."""

    async def _make(price: str = "1000.00", quantity: int = 2, referral_code=None):
        listing_id = await seed_listing("art-1", price=price, quantity=5)
        order, _ = await order_service.get_or_create_open_order(customer.profile_id)
        await order_service.add_item(order.id, listing_id, quantity, customer)
        return await checkout_service.checkout(order.id, checkout_request(referral_code), customer)

    return _make
