"""Tests for InMemoryEventBus."""

from decimal import Decimal

import pytest

from artmarket.domain.events import OrderCreatedEvent, ReferralCreditedEvent
from artmarket.infrastructure.event_bus import InMemoryEventBus, get_event_bus


@pytest.mark.asyncio
async def test_publish_reaches_sync_and_async_subscribers():
    bus = InMemoryEventBus()
    seen_sync, seen_async = [], []

    def sync_handler(event):
        seen_sync.append(event.event_type)

    async def async_handler(event):
        seen_async.append(event.aggregate_id)

    bus.subscribe(sync_handler)
    bus.subscribe(async_handler)

    await bus.publish(OrderCreatedEvent(order_id="order-1", profile_id="profile-1"))

    assert seen_sync == ["OrderCreatedEvent"]
    assert seen_async == ["order-1"]


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_stop_others():
    bus = InMemoryEventBus()
    received = []

    async def broken(event):
        raise RuntimeError("subscriber down")

    async def healthy(event):
        received.append(event)

    bus.subscribe(broken)
    bus.subscribe(healthy)

    await bus.publish_all([
        OrderCreatedEvent(order_id="order-1", profile_id="p"),
        OrderCreatedEvent(order_id="order-2", profile_id="p"),
    ])

    assert [e.order_id for e in received] == ["order-1", "order-2"]


@pytest.mark.asyncio
async def test_unsubscribe():
    bus = InMemoryEventBus()
    received = []
    bus.subscribe(received.append)
    bus.unsubscribe(received.append)

    await bus.publish(OrderCreatedEvent(order_id="order-1", profile_id="p"))

    assert received == []


def test_event_to_dict_carries_aggregate():
    data = OrderCreatedEvent(order_id="order-1", profile_id="p").to_dict()
    assert data["aggregate_type"] == "Order"
    assert data["aggregate_id"] == "order-1"
    assert data["data"]["profile_id"] == "p"


def test_global_bus_is_a_singleton():
    assert get_event_bus() is get_event_bus()


@pytest.mark.asyncio
async def test_bus_keeps_no_history_of_published_events():
    bus = InMemoryEventBus()

    await bus.publish_all([
        ReferralCreditedEvent(referral_code="ABC123", order_id=f"order-{i}", amount=Decimal("1"))
        for i in range(100)
    ])

    assert vars(bus) == {"_subscribers": []}
