"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderItemDTO(BaseModel):
    """DTO for order item."""

    id: str = Field(..., description="Order item ID")
    listing_id: str = Field(..., description="Artwork listing ID")
    quantity: int = Field(..., gt=0, description="Quantity ordered")
    price: Decimal = Field(..., ge=0, description="Unit price x quantity at add time")

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: str = Field(..., description="Order ID")
    profile_id: str = Field(..., description="Owning profile ID")
    status: str = Field(..., description="Order status")
    items: List[OrderItemDTO] = Field(default_factory=list, description="Order items")
    total_price: Decimal = Field(..., ge=0, description="Sum of item prices")
    shipping_cost: Optional[Decimal] = Field(None, description="Quoted shipping cost")
    delivery_address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    referral_code: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    total: int = Field(..., ge=0, description="Total count")

    model_config = {"frozen": True}


class AddOrderItemRequest(BaseModel):
    """Request DTO for adding an artwork to an order."""

    order_id: str = Field(..., description="Order ID")
    listing_id: str = Field(..., description="Artwork listing ID")
    quantity: int = Field(..., gt=0, description="Quantity to reserve")

    model_config = {"frozen": True}


class CheckoutRequest(BaseModel):
    """Request DTO for checking out an order."""

    delivery_address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1, alias="zip")
    country: str = Field(..., min_length=1)
    referral_code: Optional[str] = Field(None, alias="referrerCode")

    model_config = {"frozen": True, "populate_by_name": True}


class ShipOrderRequest(BaseModel):
    """Request DTO for shipping a paid order."""

    order_id: str = Field(..., description="Order ID")
    shipment_id: str = Field(..., description="Carrier shipment ID")
    tracking_id: str = Field(..., description="Carrier tracking ID")

    model_config = {"frozen": True}
