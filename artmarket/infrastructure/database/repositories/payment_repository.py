"""
SQLAlchemy repositories for payments, referrals and shipments.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import logging
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from artmarket.domain.entities import Payment, Referral, Shipment
from artmarket.domain.enums import PaymentStatus
from artmarket.domain.repositories import PaymentRepository, ReferralLedger, ShipmentRepository
from artmarket.domain.value_objects import Money
from artmarket.infrastructure.database.models import PaymentModel, ReferralModel, ShipmentModel


logger = logging.getLogger(__name__)


class SQLAlchemyPaymentRepository(PaymentRepository):
    """Payments keyed by gateway transaction reference."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, payment: Payment) -> None:
        self.session.add(
            PaymentModel(
                id=payment.id,
                order_id=payment.order_id,
                transaction_reference=payment.transaction_reference,
                payee_email=payment.payee_email,
                amount=payment.amount.amount,
                payment_status=payment.status.value,
            )
        )
        await self.session.flush()
        logger.info(f"✅ Recorded payment {payment.transaction_reference} for order {payment.order_id}")

    async def get_by_reference(self, reference: str, for_update: bool = False) -> Optional[Payment]:
        stmt = select(PaymentModel).where(PaymentModel.transaction_reference == reference)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain_entity(model) if model else None

    async def mark_completed(self, payment: Payment) -> bool:
        """
        Conditionally flip the payment to COMPLETED.

        The WHERE clause on the current status makes concurrent webhook
        deliveries race safely: only one of them sees a changed row.
        """
        result = await self.session.execute(
            update(PaymentModel)
            .where(
                PaymentModel.transaction_reference == payment.transaction_reference,
                PaymentModel.payment_status == PaymentStatus.INITIATED.value,
            )
            .values(
                payment_status=PaymentStatus.COMPLETED.value,
                completed_at=payment.completed_at or datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def find_completed_for_order(self, order_id: str) -> Optional[Payment]:
        result = await self.session.execute(
            select(PaymentModel)
            .where(
                PaymentModel.order_id == order_id,
                PaymentModel.payment_status == PaymentStatus.COMPLETED.value,
            )
            .order_by(PaymentModel.completed_at.desc())
            .limit(1)
        )
        model = result.scalar_one_or_none()
        return self._to_domain_entity(model) if model else None

    def _to_domain_entity(self, model: PaymentModel) -> Payment:
        return Payment(
            id=model.id,
            order_id=model.order_id,
            transaction_reference=model.transaction_reference,
            payee_email=model.payee_email,
            amount=Money(amount=Decimal(str(model.amount))),
            status=PaymentStatus(model.payment_status),
            created_at=model.created_at,
            completed_at=model.completed_at,
        )


class SQLAlchemyReferralLedger(ReferralLedger):
    """Referral balances; credits are atomic increments."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def credit(self, code: str, amount: Decimal) -> bool:
        result = await self.session.execute(
            update(ReferralModel)
            .where(ReferralModel.code == code)
            .values(balance=ReferralModel.balance + amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.warning(f"Unknown referral code {code}; commission of {amount} not credited")
            return False
        logger.info(f"Credited {amount} to referral {code}")
        return True

    async def get(self, code: str) -> Optional[Referral]:
        result = await self.session.execute(
            select(ReferralModel.id, ReferralModel.code, ReferralModel.balance)
            .where(ReferralModel.code == code)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return Referral(id=row.id, code=row.code, balance=Money(amount=Decimal(str(row.balance))))

    async def balance(self, code: str) -> Optional[Decimal]:
        result = await self.session.execute(
            select(ReferralModel.balance).where(ReferralModel.code == code)
        )
        value = result.scalar_one_or_none()
        return Decimal(str(value)) if value is not None else None

    async def open(self, code: str) -> Referral:
        referral = Referral(code=code)
        self.session.add(ReferralModel(id=referral.id, code=code, balance=referral.balance.amount))
        await self.session.flush()
        return referral


class SQLAlchemyShipmentRepository(ShipmentRepository):
    """One shipment row per order."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_order(self, order_id: str) -> Optional[Shipment]:
        result = await self.session.execute(
            select(ShipmentModel).where(ShipmentModel.order_id == order_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return Shipment(
            id=model.id,
            order_id=model.order_id,
            carrier_shipment_id=model.carrier_shipment_id,
            tracking_id=model.tracking_id,
            cost=Money(amount=Decimal(str(model.cost))) if model.cost is not None else None,
            is_paid=model.is_paid,
        )

    async def save(self, shipment: Shipment) -> None:
        model = await self.session.get(ShipmentModel, shipment.id)
        if model is None:
            model = ShipmentModel(id=shipment.id, order_id=shipment.order_id)
            self.session.add(model)

        model.carrier_shipment_id = shipment.carrier_shipment_id
        model.tracking_id = shipment.tracking_id
        model.cost = shipment.cost.amount if shipment.cost else None
        model.is_paid = shipment.is_paid

        await self.session.flush()
