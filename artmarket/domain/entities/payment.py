"""Payment entity."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
import uuid

from ..enums import PaymentStatus
from ..events.base import DomainEvent
from ..events.payment_events import PaymentCompletedEvent, PaymentInitiatedEvent
from ..value_objects import Money


@dataclass
class Payment:
    """
    Gateway transaction recorded against an order.

    Keyed by the gateway-issued `transaction_reference`. Moves from
    INITIATED to COMPLETED exactly once.
    """
    order_id: str
    transaction_reference: str
    payee_email: str
    amount: Money
    status: PaymentStatus = PaymentStatus.INITIATED
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def initiate(
        cls,
        order_id: str,
        transaction_reference: str,
        payee_email: str,
        amount: Money,
    ) -> "Payment":
        payment = cls(
            order_id=order_id,
            transaction_reference=transaction_reference,
            payee_email=payee_email,
            amount=amount,
        )
        payment._domain_events.append(
            PaymentInitiatedEvent(
                transaction_reference=transaction_reference,
                order_id=order_id,
                amount=amount.amount,
            )
        )
        return payment

    @property
    def is_completed(self) -> bool:
        return self.status == PaymentStatus.COMPLETED

    def complete(self) -> bool:
        """
        Mark the payment completed.

        Returns:
            False when the payment was already completed (nothing changed)
        """
        if self.is_completed:
            return False
        self.status = PaymentStatus.COMPLETED
        self.completed_at = datetime.now(timezone.utc)
        self._domain_events.append(
            PaymentCompletedEvent(
                transaction_reference=self.transaction_reference,
                order_id=self.order_id,
                amount=self.amount.amount,
            )
        )
        return True

    def get_domain_events(self) -> List[DomainEvent]:
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        self._domain_events.clear()
