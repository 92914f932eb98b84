"""
Domain errors.

Every error a caller can recover from is a MarketplaceError subclass.
Storage failures are not wrapped and propagate unchanged.
"""
from typing import Any, Dict, Optional


class MarketplaceError(Exception):
    """Base class for recoverable marketplace errors."""

    code: str = "marketplace_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error for API responses and structured logs."""
        return {"error": self.code, "detail": self.message, **self.context}


class NotFound(MarketplaceError):
    """Referenced order, order item, listing or payment does not exist."""

    code = "not_found"

    def __init__(self, resource: str, identifier: Optional[str]) -> None:
        super().__init__(
            f"{resource} not found: {identifier}",
            resource=resource,
            identifier=identifier,
        )


class Unauthorized(MarketplaceError):
    """Actor does not own the resource or lacks the required role."""

    code = "unauthorized"


class InsufficientStock(MarketplaceError):
    """Requested quantity exceeds what the listing has available."""

    code = "insufficient_stock"

    def __init__(self, listing_id: str, requested: int, available: Optional[int] = None) -> None:
        if available is None:
            message = f"Listing {listing_id} cannot supply {requested} unit(s)"
        else:
            message = f"There are only {available} available in the store for listing {listing_id}"
        super().__init__(
            message,
            listing_id=listing_id,
            requested=requested,
            available=available,
        )


class InvalidStateTransition(MarketplaceError):
    """Order cannot move from its current status to the requested one."""

    code = "invalid_state_transition"

    def __init__(self, current: str, action: str, reason: Optional[str] = None) -> None:
        message = f"Cannot {action} while order is {current}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, current=current, action=action)


class AmountMismatch(MarketplaceError):
    """Payment amount is below what the order requires."""

    code = "amount_mismatch"


class UpstreamUnavailable(MarketplaceError):
    """Gateway, carrier or shipping-rate call failed or returned an unexpected shape."""

    code = "upstream_unavailable"

    def __init__(self, service: str, reason: str) -> None:
        super().__init__(f"{service} unavailable: {reason}", service=service)


__all__ = [
    "AmountMismatch",
    "InsufficientStock",
    "InvalidStateTransition",
    "MarketplaceError",
    "NotFound",
    "Unauthorized",
    "UpstreamUnavailable",
]
