"""Checkout: attach delivery details and a shipping quote to an order."""

from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from artmarket.application.dtos.order_dto import CheckoutRequest, OrderDTO
from artmarket.application.interfaces import IShippingRateService
from artmarket.application.services.order_service import order_to_dto, publish_committed
from artmarket.domain.entities import Order
from artmarket.domain.event_bus import EventBus
from artmarket.domain.exceptions import InvalidStateTransition, NotFound
from artmarket.domain.value_objects import Actor, Money
from artmarket.infrastructure.database.unit_of_work import create_uow


logger = logging.getLogger(__name__)


def quoted_items(order: Order) -> List[Tuple[str, int]]:
    """Listing and quantity pairs a shipping quote was priced for."""
    return sorted((item.listing_id, item.quantity) for item in order.items)


def build_shipment_detail(order: Order, request: CheckoutRequest) -> Dict[str, Any]:
    """Rate request body for the carrier."""
    return {
        "receiverDetail": {
            "addressLine1": request.delivery_address,
            "city": request.city,
            "postalCode": request.zip_code,
            "country": request.country,
        },
        "items": [
            {"listingId": item.listing_id, "quantity": item.quantity}
            for item in order.items
        ],
        "totalValue": str(order.total_price.amount),
    }


class CheckoutService:
    """
    Checks out an order.

    The shipping quote is fetched before any write; if the carrier fails
    the order is left exactly as it was.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        shipping_rates: IShippingRateService,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._session_factory = session_factory
        self._shipping_rates = shipping_rates
        self._event_bus = event_bus

    async def checkout(self, order_id: str, request: CheckoutRequest, actor: Actor) -> OrderDTO:
        """
        Quote shipping and move the order to CHECKOUT_READY.

        Args:
            order_id: Order to check out
            request: Delivery details and optional referral code
            actor: Acting user (must own the order)

        Raises:
            NotFound: Order does not exist
            Unauthorized: Actor does not own the order
            InvalidStateTransition: Order is empty or not PENDING/CHECKOUT_READY
            UpstreamUnavailable: Shipping-rate service failed
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id)
            if order is None:
                raise NotFound("Order", order_id)
            order.ensure_owned_by(actor.profile_id, "check out")
            order.ensure_can_checkout()
            quoted = quoted_items(order)

        try:
            cost = await self._shipping_rates.quote(build_shipment_detail(order, request))
        except Exception as e:
            logger.error(f"❌ Shipping quote failed for order {order_id} (profile={actor.profile_id}): {e}")
            raise

        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id, for_update=True)
            if order is None:
                raise NotFound("Order", order_id)
            order.ensure_owned_by(actor.profile_id, "check out")
            if quoted_items(order) != quoted:
                logger.warning(
                    f"[exec={uow.execution_id}] Items of order {order_id} changed while quoting shipping "
                    f"(profile={actor.profile_id}); quote discarded"
                )
                raise InvalidStateTransition(
                    order.status.value,
                    "check out",
                    reason="items changed while shipping was being quoted",
                )

            order.checkout(
                delivery_address=request.delivery_address,
                city=request.city,
                zip_code=request.zip_code,
                country=request.country,
                referral_code=request.referral_code,
                shipping_cost=Money(amount=cost, currency=order.total_price.currency),
            )
            await uow.orders.save(order)
            await uow.commit()

            logger.info(f"[exec={uow.execution_id}] ✅ Order {order_id} checked out (shipping={cost})")
            await publish_committed(self._event_bus, order.get_domain_events(), uow.execution_id)

        return order_to_dto(order)
