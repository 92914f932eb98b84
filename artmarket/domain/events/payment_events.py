"""Payment settlement and referral accrual events."""
from dataclasses import dataclass
from decimal import Decimal

from .base import DomainEvent


@dataclass
class PaymentInitiatedEvent(DomainEvent):
    """A gateway transaction was opened for an order."""

    transaction_reference: str = ""
    order_id: str = ""
    amount: Decimal = Decimal("0")

    def __post_init__(self):
        if not self.aggregate_id and self.transaction_reference:
            object.__setattr__(self, 'aggregate_id', self.transaction_reference)
        super().__post_init__()


@dataclass
class PaymentCompletedEvent(DomainEvent):
    """The gateway confirmed the charge."""

    transaction_reference: str = ""
    order_id: str = ""
    amount: Decimal = Decimal("0")

    def __post_init__(self):
        if not self.aggregate_id and self.transaction_reference:
            object.__setattr__(self, 'aggregate_id', self.transaction_reference)
        super().__post_init__()


@dataclass
class ReferralCreditedEvent(DomainEvent):
    """Commission was added to a referral balance."""

    referral_code: str = ""
    order_id: str = ""
    amount: Decimal = Decimal("0")

    def __post_init__(self):
        if not self.aggregate_id and self.referral_code:
            object.__setattr__(self, 'aggregate_id', self.referral_code)
        super().__post_init__()
