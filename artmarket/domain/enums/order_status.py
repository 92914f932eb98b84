"""Status enums for orders, payments and actor roles."""

from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status."""

    PENDING = "PENDING"
    CHECKOUT_READY = "CHECKOUT_READY"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    CANCELED = "CANCELED"


class PaymentStatus(str, Enum):
    """Payment settlement status."""

    INITIATED = "INITIATED"
    COMPLETED = "COMPLETED"


class Role(str, Enum):
    """Role of an authenticated actor."""

    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"
