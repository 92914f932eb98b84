"""Domain enums."""

from .order_status import OrderStatus, PaymentStatus, Role

__all__ = ["OrderStatus", "PaymentStatus", "Role"]
