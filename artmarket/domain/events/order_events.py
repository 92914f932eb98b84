"""
Order Domain Events.

Events that occur during the order lifecycle: cart creation, line item
changes, checkout and status transitions.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .base import DomainEvent


@dataclass
class _OrderEvent(DomainEvent):
    order_id: str = ""

    def __post_init__(self):
        """Set aggregate_id to order_id."""
        if not self.aggregate_id and self.order_id:
            object.__setattr__(self, 'aggregate_id', self.order_id)
        super().__post_init__()


@dataclass
class OrderCreatedEvent(_OrderEvent):
    """A profile opened a new cart."""

    profile_id: str = ""


@dataclass
class OrderItemAddedEvent(_OrderEvent):
    """Stock was reserved and a line item added to the order."""

    order_item_id: str = ""
    listing_id: str = ""
    quantity: int = 0
    price: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")


@dataclass
class OrderItemRemovedEvent(_OrderEvent):
    """A line item was removed and its stock released."""

    order_item_id: str = ""
    listing_id: str = ""
    quantity: int = 0
    total_price: Decimal = Decimal("0")


@dataclass
class OrderCheckedOutEvent(_OrderEvent):
    """Delivery details and a shipping quote were attached to the order."""

    shipping_cost: Decimal = Decimal("0")
    country: str = ""
    referral_code: Optional[str] = None


@dataclass
class OrderStatusChangedEvent(_OrderEvent):
    """
    Order status changed.

    Tracks every transition (PENDING -> CHECKOUT_READY -> PAID -> SHIPPED,
    or to CANCELED).
    """

    previous_status: str = ""
    new_status: str = ""
    reason: Optional[str] = None
