"""Domain events."""

from .base import DomainEvent
from .order_events import (
    OrderCheckedOutEvent,
    OrderCreatedEvent,
    OrderItemAddedEvent,
    OrderItemRemovedEvent,
    OrderStatusChangedEvent,
)
from .payment_events import (
    PaymentCompletedEvent,
    PaymentInitiatedEvent,
    ReferralCreditedEvent,
)

__all__ = [
    "DomainEvent",
    "OrderCheckedOutEvent",
    "OrderCreatedEvent",
    "OrderItemAddedEvent",
    "OrderItemRemovedEvent",
    "OrderStatusChangedEvent",
    "PaymentCompletedEvent",
    "PaymentInitiatedEvent",
    "ReferralCreditedEvent",
]
