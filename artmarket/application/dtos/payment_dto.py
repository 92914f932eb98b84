"""Application DTOs for payment settlement."""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class InitiatePaymentRequest(BaseModel):
    """Request DTO for starting payment of an order."""

    order_id: str = Field(..., description="Order ID")
    amount: Decimal = Field(..., gt=0, description="Amount the customer pays")

    model_config = {"frozen": True}


class PaymentInitiationDTO(BaseModel):
    """Where to send the customer to complete payment."""

    reference: str = Field(..., description="Gateway transaction reference")
    redirect_url: str = Field(..., description="Gateway authorization URL")

    model_config = {"frozen": True}


class WebhookPayload(BaseModel):
    """Inbound gateway event."""

    event: str = Field(..., description="Gateway event type, e.g. charge.success")
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def reference(self) -> Optional[str]:
        """Transaction reference as text; gateways may send it as a number."""
        value = self.data.get("reference")
        if value is None or value == "":
            return None
        return str(value)


class ReconcileResultDTO(BaseModel):
    """Outcome of processing one webhook delivery."""

    status: str = Field(..., description="ignored | completed | already_completed")
    event: str
    reference: Optional[str] = None
    order_id: Optional[str] = None
    referral_credited: Optional[Decimal] = None

    model_config = {"frozen": True}
