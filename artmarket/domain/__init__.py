"""Domain layer - pure domain models and interfaces."""

from .entities import Listing, Order, OrderItem, Payment, Referral, Shipment
from .enums import OrderStatus, PaymentStatus, Role
from .exceptions import (
    AmountMismatch,
    InsufficientStock,
    InvalidStateTransition,
    MarketplaceError,
    NotFound,
    Unauthorized,
    UpstreamUnavailable,
)
from .value_objects import Actor, ExecutionID, Money

__all__ = [
    "Actor",
    "AmountMismatch",
    "ExecutionID",
    "InsufficientStock",
    "InvalidStateTransition",
    "Listing",
    "MarketplaceError",
    "Money",
    "NotFound",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Payment",
    "PaymentStatus",
    "Referral",
    "Role",
    "Shipment",
    "Unauthorized",
    "UpstreamUnavailable",
]
