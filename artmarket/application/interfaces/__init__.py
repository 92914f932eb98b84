"""Application layer interfaces for external collaborators."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict


@dataclass(frozen=True)
class GatewayTransaction:
    """Transaction opened by the payment gateway."""
    reference: str
    redirect_url: str


class IPaymentGateway(ABC):
    """
    Interface for the third-party payment gateway.

    Implementations raise UpstreamUnavailable for transport errors,
    timeouts and unexpected response shapes.
    """

    @abstractmethod
    async def initialize_transaction(
        self,
        email: str,
        amount_minor_units: int,
        currency: str
    ) -> GatewayTransaction:
        """
        Open a transaction the customer is redirected to.

        Args:
            email: Payer email
            amount_minor_units: Amount in kobo/cents
            currency: ISO currency code

        Returns:
            Gateway-issued reference and redirect URL
        """
        pass

    @abstractmethod
    async def verify_transaction(self, reference: str) -> str:
        """
        Look up a transaction's status (e.g. "success", "abandoned").

        Args:
            reference: Gateway transaction reference
        """
        pass


class IShippingRateService(ABC):
    """Interface for the shipping-rate quote service."""

    @abstractmethod
    async def quote(self, shipment_detail: Dict[str, Any]) -> Decimal:
        """
        Quote the cost of shipping an order.

        Args:
            shipment_detail: Receiver address and parcel summary

        Returns:
            Non-negative shipping cost
        """
        pass


class ICarrierPaymentService(ABC):
    """Interface for paying the carrier for a shipment."""

    @abstractmethod
    async def pay_from_wallet(self, shipment_id: str) -> None:
        """
        Pay for a shipment from the merchant's carrier wallet.

        Args:
            shipment_id: Carrier shipment identifier
        """
        pass


class INotificationService(ABC):
    """
    Interface for notification service operations.

    Calls are fire-and-forget for the order engine: callers log failures
    and never roll back state because of them.
    """

    @abstractmethod
    async def notify_order_shipped(self, email: str, order_id: str, tracking_id: str) -> None:
        """
        Tell the customer their order is on its way.

        Args:
            email: Customer email
            order_id: Order ID
            tracking_id: Carrier tracking ID
        """
        pass

    @abstractmethod
    async def notify_admin_payment_complete(self, order_id: str) -> None:
        """
        Tell the operator an order has been paid and is ready to ship.

        Args:
            order_id: Order ID
        """
        pass

    @abstractmethod
    async def notify_payment_received(self, email: str, order_id: str) -> None:
        """
        Confirm receipt of payment to the order owner.

        Args:
            email: Customer email
            order_id: Order ID
        """
        pass

    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic operator notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        # Default implementation - can be overridden
        pass


__all__ = [
    "GatewayTransaction",
    "ICarrierPaymentService",
    "INotificationService",
    "IPaymentGateway",
    "IShippingRateService",
]
