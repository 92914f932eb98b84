"""Application services."""
from .checkout_service import CheckoutService
from .order_service import OrderApplicationService
from .payment_service import PaymentSettlementService

__all__ = ["CheckoutService", "OrderApplicationService", "PaymentSettlementService"]
