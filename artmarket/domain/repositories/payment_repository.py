"""Repository interfaces for payments, referrals and shipments."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ..entities.payment import Payment
from ..entities.referral import Referral
from ..entities.shipment import Shipment


class PaymentRepository(ABC):
    """Persistence for gateway payments."""

    @abstractmethod
    async def add(self, payment: Payment) -> None:
        pass

    @abstractmethod
    async def get_by_reference(self, reference: str, for_update: bool = False) -> Optional[Payment]:
        pass

    @abstractmethod
    async def mark_completed(self, payment: Payment) -> bool:
        """Flip INITIATED -> COMPLETED.

        Returns:
            False if another unit of work already completed the payment
        """
        pass

    @abstractmethod
    async def find_completed_for_order(self, order_id: str) -> Optional[Payment]:
        pass


class ReferralLedger(ABC):
    """Commission balances keyed by referral code."""

    @abstractmethod
    async def credit(self, code: str, amount: Decimal) -> bool:
        """Add `amount` to the code's balance.

        Returns:
            False if the code is unknown (not an error)
        """
        pass

    @abstractmethod
    async def get(self, code: str) -> Optional[Referral]:
        pass

    @abstractmethod
    async def balance(self, code: str) -> Optional[Decimal]:
        """Current balance, or None for an unknown code."""
        pass

    @abstractmethod
    async def open(self, code: str) -> Referral:
        """Create a zero-balance referral account."""
        pass


class ShipmentRepository(ABC):
    """Persistence for carrier shipments."""

    @abstractmethod
    async def get_for_order(self, order_id: str) -> Optional[Shipment]:
        pass

    @abstractmethod
    async def save(self, shipment: Shipment) -> None:
        pass
