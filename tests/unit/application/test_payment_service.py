"""Tests for PaymentSettlementService: initiate, reconcile, ship."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from artmarket.application.dtos import ShipOrderRequest
from artmarket.application.interfaces import GatewayTransaction, INotificationService
from artmarket.application.services import PaymentSettlementService
from artmarket.domain.enums import PaymentStatus
from artmarket.domain.events import PaymentCompletedEvent, ReferralCreditedEvent
from artmarket.domain.exceptions import (
    AmountMismatch,
    InvalidStateTransition,
    NotFound,
    Unauthorized,
    UpstreamUnavailable,
)
from artmarket.domain.value_objects import Actor
from artmarket.infrastructure.database import create_uow


def charge_success(reference: str = "ref-123") -> dict:
    return {"event": "charge.success", "data": {"reference": reference, "status": "success"}}


async def _open_referral(session_factory, code: str = "ABC123") -> None:
    async with create_uow(session_factory) as uow:
        await uow.referrals.open(code)
        await uow.commit()


async def _payment(session_factory, reference: str = "ref-123"):
    async with create_uow(session_factory) as uow:
        return await uow.payments.get_by_reference(reference)


async def _paid_order(checked_out_order, payment_service, customer, **kwargs):
    order = await checked_out_order(**kwargs)
    await payment_service.initiate(order.id, customer, order.total_price + order.shipping_cost)
    await payment_service.reconcile(charge_success())
    return order


def _ship_request(order_id: str) -> ShipOrderRequest:
    return ShipOrderRequest(order_id=order_id, shipment_id="ship-77", tracking_id="TRK-77")


# =============================================================================
# INITIATE
# =============================================================================

@pytest.mark.asyncio
async def test_initiate_records_payment_and_returns_redirect(
    checked_out_order, payment_service, gateway, session_factory, stock_of, customer
):
    order = await checked_out_order()

    result = await payment_service.initiate(order.id, customer, Decimal("2500"))

    assert result.reference == "ref-123"
    assert result.redirect_url.startswith("https://checkout.paystack.com/")
    gateway.initialize_transaction.assert_awaited_once_with("buyer@example.com", 250000, "NGN")

    payment = await _payment(session_factory)
    assert payment.status == PaymentStatus.INITIATED
    assert payment.amount.amount == Decimal("2500.00")
    assert payment.order_id == order.id
    # stock was reserved when items were added, not at payment time
    assert await stock_of("art-1") == 3


@pytest.mark.asyncio
async def test_initiate_below_amount_due(checked_out_order, payment_service, gateway, session_factory, customer):
    order = await checked_out_order(price="2500.00", quantity=2)

    with pytest.raises(AmountMismatch):
        await payment_service.initiate(order.id, customer, Decimal("5000"))

    gateway.initialize_transaction.assert_not_awaited()
    assert await _payment(session_factory) is None


@pytest.mark.asyncio
async def test_overpayment_is_accepted(checked_out_order, payment_service, customer):
    order = await checked_out_order()
    result = await payment_service.initiate(order.id, customer, Decimal("9999"))
    assert result.reference == "ref-123"


@pytest.mark.asyncio
async def test_gateway_failure_persists_nothing(checked_out_order, payment_service, gateway, session_factory, customer):
    order = await checked_out_order()
    gateway.initialize_transaction.side_effect = UpstreamUnavailable("Paystack", "HTTP 503")

    with pytest.raises(UpstreamUnavailable):
        await payment_service.initiate(order.id, customer, Decimal("2500"))

    assert await _payment(session_factory) is None


@pytest.mark.asyncio
async def test_initiate_requires_checkout(order_service, payment_service, seed_listing, gateway, customer):
    await seed_listing("art-1")
    order, _ = await order_service.get_or_create_open_order(customer.profile_id)
    await order_service.add_item(order.id, "art-1", 1, customer)

    with pytest.raises(InvalidStateTransition):
        await payment_service.initiate(order.id, customer, Decimal("1000"))
    gateway.initialize_transaction.assert_not_awaited()


@pytest.mark.asyncio
async def test_initiate_requires_owner(checked_out_order, payment_service, other_customer):
    order = await checked_out_order()
    with pytest.raises(Unauthorized):
        await payment_service.initiate(order.id, other_customer, Decimal("2500"))


@pytest.mark.asyncio
async def test_initiate_unknown_order(payment_service, customer):
    with pytest.raises(NotFound):
        await payment_service.initiate("missing", customer, Decimal("1"))


# =============================================================================
# RECONCILE
# =============================================================================

@pytest.mark.asyncio
async def test_reconcile_marks_paid_and_credits_referral(
    checked_out_order, payment_service, order_service, session_factory, notifier, published_events, customer
):
    await _open_referral(session_factory, "ABC123")
    order = await checked_out_order(price="1000.00", quantity=2, referral_code="ABC123")
    await payment_service.initiate(order.id, customer, Decimal("2500"))

    result = await payment_service.reconcile(charge_success())

    assert result.status == "completed"
    assert result.referral_credited == Decimal("200.00")
    assert (await order_service.get_order(order.id)).status == "PAID"
    assert (await _payment(session_factory)).status == PaymentStatus.COMPLETED
    async with create_uow(session_factory) as uow:
        assert await uow.referrals.balance("ABC123") == Decimal("200.00")

    sent = [(n["type"], n.get("email")) for n in notifier.get_notifications()]
    assert sent == [("payment_received", "buyer@example.com"), ("admin_payment_complete", None)]

    published = [type(e) for e in published_events]
    assert PaymentCompletedEvent in published
    assert ReferralCreditedEvent in published


@pytest.mark.asyncio
async def test_reconcile_twice_is_a_no_op(checked_out_order, payment_service, session_factory, notifier, customer):
    await _open_referral(session_factory, "ABC123")
    order = await checked_out_order(referral_code="ABC123")
    await payment_service.initiate(order.id, customer, Decimal("2500"))

    await payment_service.reconcile(charge_success())
    again = await payment_service.reconcile(charge_success())

    assert again.status == "already_completed"
    async with create_uow(session_factory) as uow:
        assert await uow.referrals.balance("ABC123") == Decimal("200.00")
    assert len(notifier.get_notifications()) == 2


@pytest.mark.asyncio
async def test_concurrent_deliveries_credit_referral_once(
    checked_out_order, payment_service, order_service, session_factory, notifier, customer
):
    await _open_referral(session_factory, "ABC123")
    order = await checked_out_order(referral_code="ABC123")
    await payment_service.initiate(order.id, customer, Decimal("2500"))

    results = await asyncio.gather(
        payment_service.reconcile(charge_success()),
        payment_service.reconcile(charge_success()),
    )

    assert sorted(r.status for r in results) == ["already_completed", "completed"]
    assert (await order_service.get_order(order.id)).status == "PAID"
    async with create_uow(session_factory) as uow:
        assert await uow.referrals.balance("ABC123") == Decimal("200.00")
    assert len(notifier.get_notifications()) == 2


@pytest.mark.asyncio
async def test_numeric_reference_is_matched_as_text(
    checked_out_order, payment_service, order_service, gateway, customer
):
    gateway.initialize_transaction.return_value = GatewayTransaction(
        reference="4099260516",
        redirect_url="https://checkout.paystack.com/4099260516",
    )
    order = await checked_out_order()
    await payment_service.initiate(order.id, customer, Decimal("2500"))

    result = await payment_service.reconcile({"event": "charge.success", "data": {"reference": 4099260516}})

    assert result.status == "completed"
    assert result.reference == "4099260516"
    assert (await order_service.get_order(order.id)).status == "PAID"


@pytest.mark.asyncio
async def test_numeric_unknown_reference_is_not_found(payment_service):
    with pytest.raises(NotFound):
        await payment_service.reconcile({"event": "charge.success", "data": {"reference": 12345}})


@pytest.mark.asyncio
async def test_reconcile_with_unknown_referral_code(checked_out_order, payment_service, order_service, customer):
    order = await checked_out_order(referral_code="NOBODY")
    await payment_service.initiate(order.id, customer, Decimal("2500"))

    result = await payment_service.reconcile(charge_success())

    assert result.referral_credited is None
    assert (await order_service.get_order(order.id)).status == "PAID"


@pytest.mark.asyncio
@pytest.mark.parametrize("event", ["charge.failed", "transfer.success", "subscription.create"])
async def test_other_events_are_ignored(checked_out_order, payment_service, session_factory, customer, event):
    order = await checked_out_order()
    await payment_service.initiate(order.id, customer, Decimal("2500"))

    result = await payment_service.reconcile({"event": event, "data": {"reference": "ref-123"}})

    assert result.status == "ignored"
    assert (await _payment(session_factory)).status == PaymentStatus.INITIATED


@pytest.mark.asyncio
async def test_reconcile_unknown_reference(payment_service):
    with pytest.raises(NotFound):
        await payment_service.reconcile(charge_success("nope"))


@pytest.mark.asyncio
async def test_notification_failure_does_not_roll_back(
    checked_out_order, session_factory, gateway, carrier, order_service, customer
):
    failing = AsyncMock(spec=INotificationService)
    failing.notify_payment_received.side_effect = RuntimeError("SMTP down")
    failing.notify_admin_payment_complete.side_effect = RuntimeError("SMTP down")
    service = PaymentSettlementService(session_factory, gateway, carrier, notification_service=failing)
    order = await checked_out_order()
    await service.initiate(order.id, customer, Decimal("2500"))

    result = await service.reconcile(charge_success())

    assert result.status == "completed"
    assert (await order_service.get_order(order.id)).status == "PAID"
    failing.notify_admin_payment_complete.assert_awaited_once_with(order.id)


@pytest.mark.asyncio
async def test_payment_for_canceled_order_alerts_operator(
    checked_out_order, payment_service, order_service, session_factory, notifier, customer
):
    await _open_referral(session_factory, "ABC123")
    order = await checked_out_order(referral_code="ABC123")
    await payment_service.initiate(order.id, customer, Decimal("2500"))
    await order_service.cancel(order.id, customer.profile_id)

    result = await payment_service.reconcile(charge_success())

    assert result.status == "completed"
    assert result.referral_credited is None
    assert (await order_service.get_order(order.id)).status == "CANCELED"
    assert (await _payment(session_factory)).status == PaymentStatus.COMPLETED
    async with create_uow(session_factory) as uow:
        assert await uow.referrals.balance("ABC123") == Decimal("0.00")
    alerts = notifier.get_notifications()
    assert [n["type"] for n in alerts] == ["generic"]
    assert alerts[0]["severity"] == 80


@pytest.mark.asyncio
async def test_verified_webhooks_skip_unconfirmed_charges(
    checked_out_order, session_factory, gateway, carrier, notifier, customer
):
    service = PaymentSettlementService(
        session_factory, gateway, carrier, notification_service=notifier, verify_webhooks=True
    )
    order = await checked_out_order()
    await service.initiate(order.id, customer, Decimal("2500"))
    gateway.verify_transaction.return_value = "abandoned"

    result = await service.reconcile(charge_success())

    assert result.status == "ignored"
    gateway.verify_transaction.assert_awaited_once_with("ref-123")
    assert (await _payment(session_factory)).status == PaymentStatus.INITIATED


@pytest.mark.asyncio
async def test_verify_payment_passthrough(payment_service, gateway):
    assert await payment_service.verify_payment("ref-123") == "success"
    gateway.verify_transaction.assert_awaited_once_with("ref-123")


# =============================================================================
# SHIPPING
# =============================================================================

@pytest.mark.asyncio
async def test_ship_order(checked_out_order, payment_service, carrier, session_factory, notifier, customer, admin):
    order = await _paid_order(checked_out_order, payment_service, customer)
    notifier.clear()

    shipped = await payment_service.ship_order(admin, _ship_request(order.id))

    assert shipped.status == "SHIPPED"
    carrier.pay_from_wallet.assert_awaited_once_with("ship-77")
    async with create_uow(session_factory) as uow:
        shipment = await uow.shipments.get_for_order(order.id)
    assert shipment.is_paid is True
    assert shipment.tracking_id == "TRK-77"
    assert notifier.get_notifications() == [
        {"type": "order_shipped", "email": "buyer@example.com", "order_id": order.id, "tracking_id": "TRK-77"}
    ]


@pytest.mark.asyncio
async def test_ship_requires_admin(checked_out_order, payment_service, carrier, customer):
    order = await _paid_order(checked_out_order, payment_service, customer)

    with pytest.raises(Unauthorized):
        await payment_service.ship_order(customer, _ship_request(order.id))
    carrier.pay_from_wallet.assert_not_awaited()


@pytest.mark.asyncio
async def test_ship_requires_paid_order(checked_out_order, payment_service, carrier, admin):
    order = await checked_out_order()

    with pytest.raises(InvalidStateTransition):
        await payment_service.ship_order(admin, _ship_request(order.id))
    carrier.pay_from_wallet.assert_not_awaited()


@pytest.mark.asyncio
async def test_carrier_failure_leaves_order_paid(
    checked_out_order, payment_service, order_service, carrier, session_factory, customer, admin
):
    order = await _paid_order(checked_out_order, payment_service, customer)
    carrier.pay_from_wallet.side_effect = UpstreamUnavailable("Topship", "HTTP 500")

    with pytest.raises(UpstreamUnavailable):
        await payment_service.ship_order(admin, _ship_request(order.id))

    assert (await order_service.get_order(order.id)).status == "PAID"
    async with create_uow(session_factory) as uow:
        assert await uow.shipments.get_for_order(order.id) is None


@pytest.mark.asyncio
async def test_cancel_shipped_order_is_rejected(
    checked_out_order, payment_service, order_service, stock_of, customer, admin
):
    order = await _paid_order(checked_out_order, payment_service, customer)
    await payment_service.ship_order(admin, _ship_request(order.id))
    stock_before = await stock_of("art-1")

    with pytest.raises(InvalidStateTransition):
        await order_service.cancel(order.id, customer.profile_id)

    assert (await order_service.get_order(order.id)).status == "SHIPPED"
    assert await stock_of("art-1") == stock_before


@pytest.mark.asyncio
async def test_ship_unknown_order(payment_service, admin):
    with pytest.raises(NotFound):
        await payment_service.ship_order(admin, _ship_request("missing"))


@pytest.mark.asyncio
async def test_initiate_without_email_is_rejected(checked_out_order, payment_service, gateway, customer):
    order = await checked_out_order()
    no_email = Actor(profile_id=customer.profile_id, user_id=customer.user_id)

    with pytest.raises(Unauthorized):
        await payment_service.initiate(order.id, no_email, Decimal("2500"))
    gateway.initialize_transaction.assert_not_awaited()
