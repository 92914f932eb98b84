"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional
import uuid

from ..enums import OrderStatus
from ..events.base import DomainEvent
from ..events.order_events import (
    OrderCheckedOutEvent,
    OrderCreatedEvent,
    OrderItemAddedEvent,
    OrderItemRemovedEvent,
    OrderStatusChangedEvent,
)
from ..exceptions import InvalidStateTransition, NotFound, Unauthorized
from ..value_objects import Money
from .listing import Listing


# Allowed status transitions. CHECKOUT_READY -> CHECKOUT_READY is a re-checkout.
_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CHECKOUT_READY, OrderStatus.CANCELED}),
    OrderStatus.CHECKOUT_READY: frozenset(
        {OrderStatus.CHECKOUT_READY, OrderStatus.PAID, OrderStatus.CANCELED}
    ),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}


@dataclass
class OrderItem:
    """
    Line item within an order.

    `price` is unit price x quantity at the moment the item was added and
    is never recomputed from the catalog afterwards.
    """
    order_id: str
    listing_id: str
    quantity: int
    price: Money
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def snapshot(cls, order_id: str, listing: Listing, quantity: int) -> "OrderItem":
        """Create an item priced from the listing's current unit price."""
        if quantity <= 0:
            raise ValueError(f"Quantity must be positive, got: {quantity}")
        return cls(
            order_id=order_id,
            listing_id=listing.id,
            quantity=quantity,
            price=listing.unit_price.times(quantity),
        )


@dataclass
class Order:
    """
    Order aggregate root.

    Owns its line items and keeps `total_price` equal to the sum of their
    prices. Status changes go through `_transition`, which enforces the
    lifecycle table above.
    """
    id: str
    profile_id: str
    status: OrderStatus = OrderStatus.PENDING
    items: List[OrderItem] = field(default_factory=list)
    total_price: Money = field(default_factory=Money.zero)

    # Checkout details
    shipping_cost: Optional[Money] = None
    delivery_address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    referral_code: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def create(cls, profile_id: str) -> "Order":
        """Open a new empty cart for a profile."""
        order = cls(id=str(uuid.uuid4()), profile_id=profile_id)
        order._record_event(OrderCreatedEvent(order_id=order.id, profile_id=profile_id))
        return order

    # =========================================================================
    # OWNERSHIP
    # =========================================================================

    def is_owned_by(self, profile_id: str) -> bool:
        return self.profile_id == profile_id

    def ensure_owned_by(self, profile_id: str, action: str) -> None:
        """
        Raise Unauthorized unless `profile_id` owns this order.

        Args:
            profile_id: Profile of the acting user
            action: Human readable action for the error message
        """
        if not self.is_owned_by(profile_id):
            raise Unauthorized(
                f"You cannot {action} an order that is not yours",
                order_id=self.id,
                profile_id=profile_id,
            )

    # =========================================================================
    # LINE ITEMS
    # =========================================================================

    def ensure_items_mutable(self) -> None:
        if self.status != OrderStatus.PENDING:
            raise InvalidStateTransition(
                self.status.value,
                "change items",
                reason="items can only change while the order is PENDING",
            )

    def add_item(self, item: OrderItem) -> None:
        """Add item and recalculate order total."""
        self.ensure_items_mutable()
        self.items.append(item)
        self.recalculate_total()
        self._record_event(
            OrderItemAddedEvent(
                order_id=self.id,
                order_item_id=item.id,
                listing_id=item.listing_id,
                quantity=item.quantity,
                price=item.price.amount,
                total_price=self.total_price.amount,
            )
        )

    def remove_item(self, order_item_id: str) -> OrderItem:
        """Remove item by id and recalculate order total."""
        self.ensure_items_mutable()
        item = self.get_item(order_item_id)
        self.items.remove(item)
        self.recalculate_total()
        self._record_event(
            OrderItemRemovedEvent(
                order_id=self.id,
                order_item_id=item.id,
                listing_id=item.listing_id,
                quantity=item.quantity,
                total_price=self.total_price.amount,
            )
        )
        return item

    def get_item(self, order_item_id: str) -> OrderItem:
        for item in self.items:
            if item.id == order_item_id:
                return item
        raise NotFound("Order item", order_item_id)

    def recalculate_total(self) -> None:
        """Sum all stored item prices."""
        total = Money.zero(self.total_price.currency)
        for item in self.items:
            total = total + item.price
        self.total_price = total

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def amount_due(self) -> Money:
        """Total price plus the quoted shipping cost."""
        if self.shipping_cost is None:
            raise InvalidStateTransition(
                self.status.value,
                "pay",
                reason="order has not been checked out",
            )
        return self.total_price + self.shipping_cost

    def checkout(
        self,
        delivery_address: str,
        city: str,
        zip_code: str,
        country: str,
        referral_code: Optional[str],
        shipping_cost: Money,
    ) -> None:
        """Attach delivery details and the quoted shipping cost."""
        self.ensure_can_checkout()
        self.delivery_address = delivery_address
        self.city = city
        self.zip_code = zip_code
        self.country = country
        self.referral_code = referral_code
        self.shipping_cost = shipping_cost
        self._transition(OrderStatus.CHECKOUT_READY, "Checked out")
        self._record_event(
            OrderCheckedOutEvent(
                order_id=self.id,
                shipping_cost=shipping_cost.amount,
                country=country,
                referral_code=referral_code,
            )
        )

    def ensure_can_checkout(self) -> None:
        self._ensure_transition(OrderStatus.CHECKOUT_READY)
        if not self.items:
            raise InvalidStateTransition(
                self.status.value,
                "check out",
                reason="order has no items",
            )

    def cancel(self) -> List[OrderItem]:
        """
        Cancel the order.

        Returns:
            Items whose reserved stock must be released
        """
        self._transition(OrderStatus.CANCELED, "Canceled by owner")
        return list(self.items)

    def can_be_paid(self) -> bool:
        return OrderStatus.PAID in _TRANSITIONS[self.status]

    def mark_paid(self) -> None:
        self._transition(OrderStatus.PAID, "Payment confirmed by gateway")

    def ensure_can_ship(self) -> None:
        self._ensure_transition(OrderStatus.SHIPPED)

    def mark_shipped(self) -> None:
        self._transition(OrderStatus.SHIPPED, "Carrier paid and shipment dispatched")

    def _ensure_transition(self, target: OrderStatus) -> None:
        if target not in _TRANSITIONS[self.status]:
            raise InvalidStateTransition(self.status.value, f"move order to {target.value}")

    def _transition(self, target: OrderStatus, reason: str) -> None:
        self._ensure_transition(target)
        previous = self.status
        self.status = target
        if previous != target:
            self._record_event(
                OrderStatusChangedEvent(
                    order_id=self.id,
                    previous_status=previous.value,
                    new_status=target.value,
                    reason=reason,
                )
            )

    # =========================================================================
    # EVENT COLLECTION
    # =========================================================================

    def get_domain_events(self) -> List[DomainEvent]:
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        """Clear all collected domain events (after publishing)."""
        self._domain_events.clear()

    def _record_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)
