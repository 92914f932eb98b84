"""Application service for Order (cart) operations."""

from typing import List, Optional, Tuple
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from artmarket.application.dtos.order_dto import OrderDTO, OrderItemDTO, OrderListDTO
from artmarket.domain.entities import Order, OrderItem
from artmarket.domain.event_bus import EventBus
from artmarket.domain.events.base import DomainEvent
from artmarket.domain.exceptions import NotFound
from artmarket.domain.value_objects import Actor, ExecutionID
from artmarket.infrastructure.database.unit_of_work import create_uow


logger = logging.getLogger(__name__)


def order_to_dto(order: Order) -> OrderDTO:
    """Transform Order domain entity to OrderDTO."""
    items = [
        OrderItemDTO(
            id=item.id,
            listing_id=item.listing_id,
            quantity=item.quantity,
            price=item.price.amount,
        )
        for item in order.items
    ]

    return OrderDTO(
        id=order.id,
        profile_id=order.profile_id,
        status=order.status.value,
        items=items,
        total_price=order.total_price.amount,
        shipping_cost=order.shipping_cost.amount if order.shipping_cost else None,
        delivery_address=order.delivery_address,
        city=order.city,
        zip_code=order.zip_code,
        country=order.country,
        referral_code=order.referral_code,
        created_at=order.created_at,
    )


async def publish_committed(
    event_bus: Optional[EventBus],
    events: List[DomainEvent],
    execution_id: ExecutionID,
) -> None:
    """Publish events recorded during a committed unit of work."""
    if event_bus is None or not events:
        return
    for event in events:
        event.execution_id = str(execution_id)
    await event_bus.publish_all(events)


class OrderApplicationService:
    """
    Application service for orchestrating cart operations.

    Responsibilities:
    - Coordinate domain + infrastructure
    - Handle transactions via UoW (stock and order change together or not at all)
    - Propagate ExecutionID for tracing
    - Transform domain entities to DTOs
    """

    def __init__(self, session_factory: async_sessionmaker, event_bus: Optional[EventBus] = None) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
            event_bus: Receives domain events after each commit
        """
        self._session_factory = session_factory
        self._event_bus = event_bus

    async def get_or_create_open_order(self, profile_id: str) -> Tuple[OrderDTO, bool]:
        """Return the profile's PENDING order, creating it if needed.

        Args:
            profile_id: Owning profile

        Returns:
            (order, created) where created is False for an existing cart
        """
        try:
            uow = create_uow(self._session_factory)
            async with uow:
                existing = await uow.orders.find_open_for_profile(profile_id)
                if existing:
                    return order_to_dto(existing), False

                order = Order.create(profile_id)
                await uow.orders.add(order)
                await uow.commit()
                events = order.get_domain_events()
                execution_id = uow.execution_id
        except IntegrityError:
            # Another request created the cart between our read and insert
            logger.info(f"Concurrent cart creation for profile {profile_id}; returning existing cart")
            uow = create_uow(self._session_factory)
            async with uow:
                winner = await uow.orders.find_open_for_profile(profile_id)
            if winner is None:
                raise
            return order_to_dto(winner), False

        logger.info(f"✅ Opened order {order.id} for profile {profile_id}")
        await publish_committed(self._event_bus, events, execution_id)
        return order_to_dto(order), True

    async def add_item(
        self,
        order_id: str,
        listing_id: str,
        quantity: int,
        actor: Optional[Actor] = None,
    ) -> OrderItemDTO:
        """Reserve stock and add an artwork to a PENDING order.

        Raises:
            NotFound: Order or listing does not exist
            Unauthorized: Actor does not own the order
            InvalidStateTransition: Order is not PENDING
            InsufficientStock: Listing cannot supply `quantity`
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id, for_update=True)
            if order is None:
                raise NotFound("Order", order_id)
            if actor is not None:
                order.ensure_owned_by(actor.profile_id, "add items to")
            order.ensure_items_mutable()

            listing = await uow.listings.get(listing_id)
            if listing is None:
                raise NotFound("Listing", listing_id)

            item = OrderItem.snapshot(order.id, listing, quantity)
            await uow.inventory.reserve(listing_id, quantity)

            order.add_item(item)
            await uow.orders.add_item(item)
            await uow.orders.save(order)
            await uow.commit()

            logger.info(
                f"[exec={uow.execution_id}] Added {quantity} x listing {listing_id} "
                f"to order {order_id} (total={order.total_price})"
            )
            await publish_committed(self._event_bus, order.get_domain_events(), uow.execution_id)

        return OrderItemDTO(
            id=item.id,
            listing_id=item.listing_id,
            quantity=item.quantity,
            price=item.price.amount,
        )

    async def remove_item(self, profile_id: str, order_item_id: str) -> OrderDTO:
        """Remove a line item and release its reserved stock."""
        uow = create_uow(self._session_factory)
        async with uow:
            order_id = await uow.orders.find_order_id_for_item(order_item_id)
            if order_id is None:
                raise NotFound("Order item", order_item_id)

            order = await uow.orders.get(order_id, for_update=True)
            if order is None:
                raise NotFound("Order", order_id)
            order.ensure_owned_by(profile_id, "remove items from")

            item = order.remove_item(order_item_id)
            await uow.inventory.release(item.listing_id, item.quantity)
            await uow.orders.delete_item(item.id)
            await uow.orders.save(order)
            await uow.commit()

            logger.info(f"[exec={uow.execution_id}] Removed item {order_item_id} from order {order_id}")
            await publish_committed(self._event_bus, order.get_domain_events(), uow.execution_id)

        return order_to_dto(order)

    async def cancel(self, order_id: str, profile_id: str) -> OrderDTO:
        """Cancel a PENDING or CHECKOUT_READY order and return its stock.

        Items are kept on the order as history.
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id, for_update=True)
            if order is None:
                raise NotFound("Order", order_id)
            order.ensure_owned_by(profile_id, "cancel")

            for item in order.cancel():
                await uow.inventory.release(item.listing_id, item.quantity)

            await uow.orders.save(order)
            await uow.commit()

            logger.info(f"[exec={uow.execution_id}] Canceled order {order_id}; released {len(order.items)} item(s)")
            await publish_committed(self._event_bus, order.get_domain_events(), uow.execution_id)

        return order_to_dto(order)

    async def get_order(self, order_id: str) -> OrderDTO:
        """Get order by ID.

        Raises:
            NotFound: If the order does not exist
        """
        uow = create_uow(self._session_factory)
        async with uow:
            order = await uow.orders.get(order_id)
            if order is None:
                raise NotFound("Order", order_id)
            return order_to_dto(order)

    async def list_profile_orders(self, profile_id: str, limit: int = 100) -> OrderListDTO:
        """List a profile's orders, newest first."""
        uow = create_uow(self._session_factory)
        async with uow:
            orders = await uow.orders.list_for_profile(profile_id, limit=limit)
            dtos = [order_to_dto(order) for order in orders]
        return OrderListDTO(orders=dtos, total=len(dtos))
