"""Application DTOs."""

from .order_dto import (
    AddOrderItemRequest,
    CheckoutRequest,
    OrderDTO,
    OrderItemDTO,
    OrderListDTO,
    ShipOrderRequest,
)
from .payment_dto import (
    InitiatePaymentRequest,
    PaymentInitiationDTO,
    ReconcileResultDTO,
    WebhookPayload,
)

__all__ = [
    "AddOrderItemRequest",
    "CheckoutRequest",
    "InitiatePaymentRequest",
    "OrderDTO",
    "OrderItemDTO",
    "OrderListDTO",
    "PaymentInitiationDTO",
    "ReconcileResultDTO",
    "ShipOrderRequest",
    "WebhookPayload",
]
