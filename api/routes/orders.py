"""
Orders endpoints.

Cart management, checkout and shipping. Domain errors are translated to
HTTP responses by the handler registered in api.main.
"""
from fastapi import APIRouter, Depends, Query, Response, status
import logging

from api.dependencies import (
    get_actor,
    get_checkout_service,
    get_order_service,
    get_payment_service,
)
from artmarket.application.dtos import (
    AddOrderItemRequest,
    CheckoutRequest,
    OrderDTO,
    OrderItemDTO,
    OrderListDTO,
    ShipOrderRequest,
)
from artmarket.domain.value_objects import Actor


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# CART
# =============================================================================

@router.post(
    "",
    response_model=OrderDTO,
    summary="Get or create the open order",
    description="Returns the caller's PENDING order, creating one if none exists",
)
async def create_order(
    response: Response,
    actor: Actor = Depends(get_actor),
    service=Depends(get_order_service),
):
    order, created = await service.get_or_create_open_order(actor.profile_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return order


@router.get(
    "/profile",
    response_model=OrderListDTO,
    summary="List the caller's orders",
)
async def list_profile_orders(
    limit: int = Query(default=100, ge=1, le=1000, description="Maximum number of orders to return"),
    actor: Actor = Depends(get_actor),
    service=Depends(get_order_service),
):
    return await service.list_profile_orders(actor.profile_id, limit=limit)


@router.get(
    "/{order_id}",
    response_model=OrderDTO,
    summary="Get order by ID",
)
async def get_order(order_id: str, service=Depends(get_order_service)):
    return await service.get_order(order_id)


@router.post(
    "/order-item",
    response_model=OrderItemDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Add an artwork to an order",
    description="Reserves stock and adds a line item priced at the listing's current price",
)
async def add_order_item(
    request: AddOrderItemRequest,
    actor: Actor = Depends(get_actor),
    service=Depends(get_order_service),
):
    return await service.add_item(request.order_id, request.listing_id, request.quantity, actor)


@router.patch(
    "/remove-order-item/{order_item_id}",
    response_model=OrderDTO,
    summary="Remove a line item",
)
async def remove_order_item(
    order_item_id: str,
    actor: Actor = Depends(get_actor),
    service=Depends(get_order_service),
):
    return await service.remove_item(actor.profile_id, order_item_id)


@router.patch(
    "/cancel/{order_id}",
    response_model=OrderDTO,
    summary="Cancel an order",
    description="Cancels a PENDING or CHECKOUT_READY order and returns its stock",
)
async def cancel_order(
    order_id: str,
    actor: Actor = Depends(get_actor),
    service=Depends(get_order_service),
):
    return await service.cancel(order_id, actor.profile_id)


# =============================================================================
# CHECKOUT & SHIPPING
# =============================================================================

@router.patch(
    "/checkout/{order_id}",
    response_model=OrderDTO,
    summary="Check out an order",
    description="Quotes shipping and stores delivery details",
)
async def checkout_order(
    order_id: str,
    request: CheckoutRequest,
    actor: Actor = Depends(get_actor),
    service=Depends(get_checkout_service),
):
    return await service.checkout(order_id, request, actor)


@router.post(
    "/ship",
    response_model=OrderDTO,
    summary="Ship a paid order (admin)",
)
async def ship_order(
    request: ShipOrderRequest,
    actor: Actor = Depends(get_actor),
    service=Depends(get_payment_service),
):
    return await service.ship_order(actor, request)
