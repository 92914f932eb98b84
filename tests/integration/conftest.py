"""Pytest configuration and fixtures for API integration tests."""

import asyncio
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from api import dependencies
from api.main import app
from artmarket.application.services import (
    CheckoutService,
    OrderApplicationService,
    PaymentSettlementService,
)
from artmarket.domain.entities import Listing
from artmarket.domain.value_objects import Money
from artmarket.infrastructure.database import create_engine, create_uow, get_session_factory, init_database


WEBHOOK_SECRET = "sk_test_webhook"


@pytest.fixture
def engine(tmp_path):
    """Sync variant: TestClient drives the app on its own event loop."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}", poolclass=NullPool)
    asyncio.run(init_database(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def seed(session_factory):
    def _seed(listing_id="art-1", price="1000.00", quantity=5, referral_code=None):
        async def _insert():
            async with create_uow(session_factory) as uow:
                await uow.listings.add(
                    Listing(id=listing_id, title="Harmattan", unit_price=Money(Decimal(price)), quantity=quantity)
                )
                if referral_code:
                    await uow.referrals.open(referral_code)
                await uow.commit()

        asyncio.run(_insert())
        return listing_id

    return _seed


@pytest.fixture
def test_client(session_factory, gateway, shipping_rates, carrier, notifier):
    """FastAPI test client wired to the test database and fake collaborators."""
    order_service = OrderApplicationService(session_factory)
    checkout_service = CheckoutService(session_factory, shipping_rates)
    payment_service = PaymentSettlementService(
        session_factory,
        gateway=gateway,
        carrier=carrier,
        notification_service=notifier,
        referral_percentage=Decimal("10"),
    )

    app.dependency_overrides[dependencies.get_db_session_factory] = lambda: session_factory
    app.dependency_overrides[dependencies.get_order_service] = lambda: order_service
    app.dependency_overrides[dependencies.get_checkout_service] = lambda: checkout_service
    app.dependency_overrides[dependencies.get_payment_service] = lambda: payment_service
    app.dependency_overrides[dependencies.get_webhook_secret] = lambda: WEBHOOK_SECRET

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
    dependencies.reset_dependencies()


@pytest.fixture
def auth_headers():
    """Actor headers as set by the authenticating proxy."""

    def _headers(profile_id="profile-1", role="CUSTOMER", email="buyer@example.com"):
        return {
            "X-Profile-Id": profile_id,
            "X-User-Id": f"user-{profile_id}",
            "X-User-Role": role,
            "X-User-Email": email,
        }

    return _headers
