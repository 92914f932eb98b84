"""SQLAlchemy repository implementations."""

from .inventory_ledger import SQLAlchemyInventoryLedger, SQLAlchemyListingRepository
from .order_repository import SQLAlchemyOrderRepository
from .payment_repository import (
    SQLAlchemyPaymentRepository,
    SQLAlchemyReferralLedger,
    SQLAlchemyShipmentRepository,
)

__all__ = [
    "SQLAlchemyInventoryLedger",
    "SQLAlchemyListingRepository",
    "SQLAlchemyOrderRepository",
    "SQLAlchemyPaymentRepository",
    "SQLAlchemyReferralLedger",
    "SQLAlchemyShipmentRepository",
]
