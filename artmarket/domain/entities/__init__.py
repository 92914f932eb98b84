"""Domain entities."""

from .listing import Listing
from .order import Order, OrderItem
from .payment import Payment
from .referral import Referral
from .shipment import Shipment

__all__ = [
    "Listing",
    "Order",
    "OrderItem",
    "Payment",
    "Referral",
    "Shipment",
]
