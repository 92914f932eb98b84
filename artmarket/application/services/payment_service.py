"""
Payment settlement service.

Starts gateway payments, reconciles gateway webhooks, credits referral
commission and ships paid orders.
"""
from decimal import Decimal
from typing import Any, Awaitable, Dict, Optional, Union
import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from artmarket.application.dtos.order_dto import OrderDTO, ShipOrderRequest
from artmarket.application.dtos.payment_dto import (
    PaymentInitiationDTO,
    ReconcileResultDTO,
    WebhookPayload,
)
from artmarket.application.interfaces import (
    ICarrierPaymentService,
    INotificationService,
    IPaymentGateway,
)
from artmarket.application.services.order_service import order_to_dto, publish_committed
from artmarket.domain.entities import Payment, Shipment
from artmarket.domain.enums import OrderStatus
from artmarket.domain.event_bus import EventBus
from artmarket.domain.events import ReferralCreditedEvent
from artmarket.domain.exceptions import (
    AmountMismatch,
    InvalidStateTransition,
    NotFound,
    Unauthorized,
)
from artmarket.domain.value_objects import DEFAULT_CURRENCY, Actor, Money
from artmarket.infrastructure.database.unit_of_work import create_uow


logger = logging.getLogger(__name__)

CHARGE_SUCCESS = "charge.success"


class PaymentSettlementService:
    """
    Payment settlement orchestration.

    Outbound calls (gateway, carrier) run before the write transaction
    they gate. Notifications run after commit and can never undo it.

    Usage:
        service = PaymentSettlementService(session_factory, gateway, carrier, notifier)
        redirect = await service.initiate(order_id, actor, Decimal("5500"))
        result = await service.reconcile(webhook_body)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        gateway: IPaymentGateway,
        carrier: ICarrierPaymentService,
        notification_service: Optional[INotificationService] = None,
        referral_percentage: Decimal = Decimal("10"),
        currency: str = DEFAULT_CURRENCY,
        event_bus: Optional[EventBus] = None,
        verify_webhooks: bool = False,
    ) -> None:
        """
        Initialize settlement service.

        Args:
            session_factory: SQLAlchemy async session factory
            gateway: Payment gateway adapter
            carrier: Carrier wallet payment adapter
            notification_service: Customer/operator notifications
            referral_percentage: Commission percentage of the items total
            currency: Currency sent to the gateway
            event_bus: Receives domain events after each commit
            verify_webhooks: Re-check charge.success events with the gateway
        """
        self._session_factory = session_factory
        self._gateway = gateway
        self._carrier = carrier
        self._notification_service = notification_service
        self._referral_percentage = Decimal(str(referral_percentage))
        self._currency = currency
        self._event_bus = event_bus
        self._verify_webhooks = verify_webhooks

    # =========================================================================
    # INITIATE
    # =========================================================================

    async def initiate(self, order_id: str, actor: Actor, amount: Decimal) -> PaymentInitiationDTO:
        """
        Open a gateway transaction for a checked-out order.

        Raises:
            NotFound: Order does not exist
            Unauthorized: Actor does not own the order or has no email
            InvalidStateTransition: Order is not CHECKOUT_READY
            AmountMismatch: Amount is below total price plus shipping
            UpstreamUnavailable: Gateway failed (no Payment is recorded)
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id)
            if order is None:
                raise NotFound("Order", order_id)
            order.ensure_owned_by(actor.profile_id, "pay for")
            self._ensure_payable(order.status, order_id)

            due = order.amount_due()
            paid = Money(amount=amount, currency=due.currency)
            if paid < due:
                logger.warning(
                    f"Payment amount {paid} below amount due {due} for order {order_id} "
                    f"(profile={actor.profile_id})"
                )
                raise AmountMismatch(
                    "You did not input the correct amount",
                    order_id=order_id,
                    amount=str(paid.amount),
                    amount_due=str(due.amount),
                )

        if not actor.email:
            raise Unauthorized("An email address is required to pay", profile_id=actor.profile_id)

        transaction = await self._gateway.initialize_transaction(
            actor.email,
            paid.to_minor_units(),
            self._currency,
        )

        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id, for_update=True)
            if order is None:
                raise NotFound("Order", order_id)
            self._ensure_payable(order.status, order_id)

            payment = Payment.initiate(
                order_id=order_id,
                transaction_reference=transaction.reference,
                payee_email=actor.email,
                amount=paid,
            )
            await uow.payments.add(payment)
            await uow.commit()

            logger.info(
                f"[exec={uow.execution_id}] ✅ Payment {transaction.reference} initiated "
                f"for order {order_id} ({paid})"
            )
            await publish_committed(self._event_bus, payment.get_domain_events(), uow.execution_id)

        return PaymentInitiationDTO(reference=transaction.reference, redirect_url=transaction.redirect_url)

    @staticmethod
    def _ensure_payable(status: OrderStatus, order_id: str) -> None:
        if status != OrderStatus.CHECKOUT_READY:
            raise InvalidStateTransition(
                status.value,
                "pay",
                reason=f"order {order_id} must be checked out first",
            )

    # =========================================================================
    # RECONCILE
    # =========================================================================

    async def reconcile(self, payload: Union[WebhookPayload, Dict[str, Any]]) -> ReconcileResultDTO:
        """
        Apply a gateway webhook.

        Only charge.success changes state. Redelivery of an already
        applied event is a no-op.

        Raises:
            NotFound: No payment has the event's reference
        """
        if isinstance(payload, dict):
            payload = WebhookPayload.model_validate(payload)

        if payload.event != CHARGE_SUCCESS:
            logger.info(f"Ignoring gateway event {payload.event}")
            return ReconcileResultDTO(status="ignored", event=payload.event)

        reference = payload.reference
        if not reference:
            raise NotFound("Payment", None)

        if self._verify_webhooks:
            gateway_status = await self._gateway.verify_transaction(reference)
            if gateway_status != "success":
                logger.warning(f"Gateway reports {reference} as {gateway_status}; webhook not applied")
                return ReconcileResultDTO(status="ignored", event=payload.event, reference=reference)

        referral_credited: Optional[Decimal] = None

        uow = create_uow(self._session_factory)
        async with uow:
            payment = await uow.payments.get_by_reference(reference, for_update=True)
            if payment is None:
                logger.warning(f"Webhook for unknown payment reference {reference}")
                raise NotFound("Payment", reference)

            if payment.is_completed:
                logger.info(f"Payment {reference} already completed; redelivery ignored")
                return ReconcileResultDTO(
                    status="already_completed",
                    event=payload.event,
                    reference=reference,
                    order_id=payment.order_id,
                )

            order = await uow.orders.get(payment.order_id, for_update=True)
            if order is None:
                raise NotFound("Order", payment.order_id)

            payment.complete()
            if not await uow.payments.mark_completed(payment):
                logger.info(f"Payment {reference} completed concurrently; nothing to do")
                return ReconcileResultDTO(
                    status="already_completed",
                    event=payload.event,
                    reference=reference,
                    order_id=order.id,
                )

            settled = order.can_be_paid()
            events = payment.get_domain_events()
            if settled:
                order.mark_paid()
                await uow.orders.save(order)

                if order.referral_code:
                    commission = order.total_price.percentage(self._referral_percentage)
                    if await uow.referrals.credit(order.referral_code, commission.amount):
                        referral_credited = commission.amount
                        events.append(
                            ReferralCreditedEvent(
                                referral_code=order.referral_code,
                                order_id=order.id,
                                amount=commission.amount,
                            )
                        )
                events.extend(order.get_domain_events())
            else:
                logger.warning(
                    f"[exec={uow.execution_id}] Payment {reference} completed for order {order.id} "
                    f"in status {order.status.value}; order left unchanged"
                )

            await uow.commit()
            logger.info(f"[exec={uow.execution_id}] ✅ Reconciled payment {reference} for order {order.id}")
            await publish_committed(self._event_bus, events, uow.execution_id)

        if settled:
            await self._notify(
                "payment received",
                lambda n: n.notify_payment_received(payment.payee_email, order.id),
            )
            await self._notify(
                "admin payment complete",
                lambda n: n.notify_admin_payment_complete(order.id),
            )
        else:
            await self._notify(
                "refund alert",
                lambda n: n.notify(
                    f"Payment {reference} ({payment.amount}) completed for order {order.id} "
                    f"which is {order.status.value}. Refund manually.",
                    severity=80,
                ),
            )

        return ReconcileResultDTO(
            status="completed",
            event=payload.event,
            reference=reference,
            order_id=order.id,
            referral_credited=referral_credited,
        )

    # =========================================================================
    # SHIPPING
    # =========================================================================

    async def ship_order(self, actor: Actor, request: ShipOrderRequest) -> OrderDTO:
        """
        Pay the carrier and mark a PAID order SHIPPED.

        Raises:
            Unauthorized: Actor is not an administrator
            NotFound: Order does not exist
            InvalidStateTransition: Order is not PAID
            UpstreamUnavailable: Carrier payment failed (order stays PAID)
        """
        if not actor.is_admin:
            logger.warning(f"Profile {actor.profile_id} tried to ship order {request.order_id} without admin role")
            raise Unauthorized("Only administrators can ship orders", order_id=request.order_id)

        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(request.order_id)
            if order is None:
                raise NotFound("Order", request.order_id)
            order.ensure_can_ship()

        try:
            await self._carrier.pay_from_wallet(request.shipment_id)
        except Exception as e:
            logger.error(f"❌ Carrier payment failed for order {request.order_id} (user={actor.user_id}): {e}")
            raise

        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(request.order_id, for_update=True)
            if order is None:
                raise NotFound("Order", request.order_id)
            order.mark_shipped()

            shipment = await uow.shipments.get_for_order(order.id) or Shipment(order_id=order.id)
            shipment.record_dispatch(request.shipment_id, request.tracking_id)
            await uow.shipments.save(shipment)
            await uow.orders.save(order)

            payment = await uow.payments.find_completed_for_order(order.id)
            await uow.commit()

            logger.info(f"[exec={uow.execution_id}] ✅ Order {order.id} shipped (tracking={request.tracking_id})")
            await publish_committed(self._event_bus, order.get_domain_events(), uow.execution_id)

        if payment is None:
            logger.warning(f"No completed payment on order {order.id}; shipping email not sent")
        else:
            await self._notify(
                "order shipped",
                lambda n: n.notify_order_shipped(payment.payee_email, order.id, request.tracking_id),
            )

        return order_to_dto(order)

    async def verify_payment(self, reference: str) -> str:
        """Ask the gateway for a transaction's current status."""
        return await self._gateway.verify_transaction(reference)

    async def _notify(self, description: str, send) -> None:
        """Run a notification; failures are logged, never raised."""
        if self._notification_service is None:
            return
        try:
            call: Awaitable[None] = send(self._notification_service)
            await call
        except Exception as e:
            logger.error(f"❌ Notification '{description}' failed: {e}", exc_info=True)
