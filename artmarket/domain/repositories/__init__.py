"""Repository interfaces."""

from .inventory import InventoryLedger, ListingRepository
from .order_repository import OrderRepository
from .payment_repository import PaymentRepository, ReferralLedger, ShipmentRepository

__all__ = [
    "InventoryLedger",
    "ListingRepository",
    "OrderRepository",
    "PaymentRepository",
    "ReferralLedger",
    "ShipmentRepository",
]
