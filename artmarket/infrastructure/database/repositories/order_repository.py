"""
SQLAlchemy Order Repository Implementation.

Implements OrderRepository interface using SQLAlchemy.
"""
from typing import List, Optional
from decimal import Decimal
import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from artmarket.domain.entities import Order, OrderItem
from artmarket.domain.enums import OrderStatus
from artmarket.domain.repositories import OrderRepository
from artmarket.domain.value_objects import Money
from artmarket.infrastructure.database.models import OrderItemModel, OrderModel


logger = logging.getLogger(__name__)


class SQLAlchemyOrderRepository(OrderRepository):
    """
    SQLAlchemy implementation of OrderRepository.

    Commit is handled by the Unit of Work; every write is flushed so
    constraint violations surface at the call site.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """
        Get order by ID.

        Args:
            order_id: Order ID to lookup
            for_update: Lock the order row (SELECT ... FOR UPDATE)

        Returns:
            Order entity if found, None otherwise
        """
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        )
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        order_model = result.scalar_one_or_none()

        if not order_model:
            logger.info(f"Order not found: {order_id}")
            return None

        return self._to_domain_entity(order_model)

    async def find_open_for_profile(self, profile_id: str) -> Optional[Order]:
        result = await self.session.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(
                OrderModel.profile_id == profile_id,
                OrderModel.status == OrderStatus.PENDING.value,
            )
        )
        order_model = result.scalar_one_or_none()
        return self._to_domain_entity(order_model) if order_model else None

    async def list_for_profile(self, profile_id: str, limit: int = 100) -> List[Order]:
        """
        List a profile's orders, newest first.

        Args:
            profile_id: Owning profile
            limit: Maximum number of results

        Returns:
            List of orders
        """
        result = await self.session.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.profile_id == profile_id)
            .order_by(OrderModel.created_at.desc())
            .limit(limit)
        )
        return [self._to_domain_entity(model) for model in result.scalars().all()]

    async def find_order_id_for_item(self, order_item_id: str) -> Optional[str]:
        result = await self.session.execute(
            select(OrderItemModel.order_id).where(OrderItemModel.id == order_item_id)
        )
        return result.scalar_one_or_none()

    async def add(self, order: Order) -> None:
        logger.info(f"Creating order {order.id} for profile {order.profile_id}")
        self.session.add(
            OrderModel(
                id=order.id,
                profile_id=order.profile_id,
                status=order.status.value,
                total_price=order.total_price.amount,
            )
        )
        await self.session.flush()

    async def save(self, order: Order) -> None:
        """
        Write status, total and checkout fields of an existing order.

        Args:
            order: Order entity to persist
        """
        order_model = await self.session.get(OrderModel, order.id)
        if order_model is None:
            raise LookupError(f"Order {order.id} is not persisted")

        order_model.status = order.status.value
        order_model.total_price = order.total_price.amount
        order_model.shipping_cost = order.shipping_cost.amount if order.shipping_cost else None
        order_model.delivery_address = order.delivery_address
        order_model.city = order.city
        order_model.zip_code = order.zip_code
        order_model.country = order.country
        order_model.referral_code = order.referral_code

        await self.session.flush()
        logger.info(f"✅ Updated order: {order.id} (status={order.status.value}, total={order.total_price})")

    async def add_item(self, item: OrderItem) -> None:
        self.session.add(
            OrderItemModel(
                id=item.id,
                order_id=item.order_id,
                listing_id=item.listing_id,
                quantity=item.quantity,
                price=item.price.amount,
            )
        )
        await self.session.flush()

    async def delete_item(self, order_item_id: str) -> None:
        item_model = await self.session.get(OrderItemModel, order_item_id)
        if item_model is None:
            logger.warning(f"Order item not found for deletion: {order_item_id}")
            return
        await self.session.delete(item_model)
        await self.session.flush()

    def _to_domain_entity(self, model: OrderModel) -> Order:
        """Convert database model to domain entity."""
        items = [
            OrderItem(
                id=item.id,
                order_id=item.order_id,
                listing_id=item.listing_id,
                quantity=item.quantity,
                price=Money(amount=Decimal(str(item.price))),
            )
            for item in model.items
        ]

        return Order(
            id=model.id,
            profile_id=model.profile_id,
            status=OrderStatus(model.status),
            items=items,
            total_price=Money(amount=Decimal(str(model.total_price))),
            shipping_cost=(
                Money(amount=Decimal(str(model.shipping_cost)))
                if model.shipping_cost is not None
                else None
            ),
            delivery_address=model.delivery_address,
            city=model.city,
            zip_code=model.zip_code,
            country=model.country,
            referral_code=model.referral_code,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
