"""Shared fixtures: a throwaway SQLite database per test plus fake collaborators."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.pool import NullPool

from artmarket.application.interfaces import (
    GatewayTransaction,
    ICarrierPaymentService,
    IPaymentGateway,
    IShippingRateService,
)
from artmarket.application.services import (
    CheckoutService,
    OrderApplicationService,
    PaymentSettlementService,
)
from artmarket.domain.entities import Listing
from artmarket.domain.enums import Role
from artmarket.domain.value_objects import Actor, Money
from artmarket.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from artmarket.infrastructure.database import create_engine, create_uow, get_session_factory, init_database
from artmarket.infrastructure.event_bus import InMemoryEventBus


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite so concurrent units of work get their own connections."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'artmarket.db'}", poolclass=NullPool)
    await init_database(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_session_factory(engine)


@pytest.fixture
def seed_listing(session_factory):
    """Insert a listing and return its id."""

    async def _seed(listing_id: str = "art-1", price: str = "1000.00", quantity: int = 5) -> str:
        async with create_uow(session_factory) as uow:
            await uow.listings.add(
                Listing(id=listing_id, title=f"Artwork {listing_id}", unit_price=Money(Decimal(price)), quantity=quantity)
            )
            await uow.commit()
        return listing_id

    return _seed


@pytest.fixture
def stock_of(session_factory):
    async def _stock(listing_id: str) -> int:
        async with create_uow(session_factory) as uow:
            return await uow.inventory.available(listing_id)

    return _stock


@pytest.fixture
def customer() -> Actor:
    return Actor(profile_id="profile-1", user_id="user-1", role=Role.CUSTOMER, email="buyer@example.com")


@pytest.fixture
def other_customer() -> Actor:
    return Actor(profile_id="profile-2", user_id="user-2", role=Role.CUSTOMER, email="other@example.com")


@pytest.fixture
def admin() -> Actor:
    return Actor(profile_id="profile-admin", user_id="admin-1", role=Role.ADMIN, email="admin@example.com")


@pytest.fixture
def gateway():
    gateway = AsyncMock(spec=IPaymentGateway)
    gateway.initialize_transaction.return_value = GatewayTransaction(
        reference="ref-123",
        redirect_url="https://checkout.paystack.com/ref-123",
    )
    gateway.verify_transaction.return_value = "success"
    return gateway


@pytest.fixture
def shipping_rates():
    rates = AsyncMock(spec=IShippingRateService)
    rates.quote.return_value = Decimal("500")
    return rates


@pytest.fixture
def carrier():
    return AsyncMock(spec=ICarrierPaymentService)


@pytest.fixture
def notifier() -> MockNotificationService:
    return MockNotificationService()


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def published_events(event_bus) -> list:
    """Events seen by a recording subscriber on the test bus."""
    received = []
    event_bus.subscribe(received.append)
    return received


@pytest.fixture
def order_service(session_factory, event_bus) -> OrderApplicationService:
    return OrderApplicationService(session_factory, event_bus=event_bus)


@pytest.fixture
def checkout_service(session_factory, shipping_rates, event_bus) -> CheckoutService:
    return CheckoutService(session_factory, shipping_rates, event_bus=event_bus)


@pytest.fixture
def payment_service(session_factory, gateway, carrier, notifier, event_bus) -> PaymentSettlementService:
    return PaymentSettlementService(
        session_factory,
        gateway=gateway,
        carrier=carrier,
        notification_service=notifier,
        referral_percentage=Decimal("10"),
        currency="NGN",
        event_bus=event_bus,
    )
