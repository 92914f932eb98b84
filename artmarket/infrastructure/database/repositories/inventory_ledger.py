"""
Listing reads and the SQL inventory ledger.

Stock changes are single conditional UPDATE statements, so the
availability check and the decrement cannot be separated by another
request.
"""
from decimal import Decimal
from typing import Optional
import logging
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from artmarket.domain.entities import Listing
from artmarket.domain.exceptions import InsufficientStock, NotFound
from artmarket.domain.repositories import InventoryLedger, ListingRepository
from artmarket.domain.value_objects import Money
from artmarket.infrastructure.database.models import ListingModel


logger = logging.getLogger(__name__)


class SQLAlchemyListingRepository(ListingRepository):
    """Listing reads (and seeding)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, listing_id: str) -> Optional[Listing]:
        result = await self.session.execute(
            select(ListingModel).where(ListingModel.id == listing_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return Listing(
            id=model.id,
            title=model.title,
            unit_price=Money(amount=Decimal(str(model.price))),
            quantity=model.quantity,
        )

    async def add(self, listing: Listing) -> None:
        self.session.add(
            ListingModel(
                id=listing.id,
                title=listing.title,
                price=listing.unit_price.amount,
                quantity=listing.quantity,
            )
        )
        await self.session.flush()


class SQLAlchemyInventoryLedger(InventoryLedger):
    """InventoryLedger backed by conditional updates on the listings table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def reserve(self, listing_id: str, quantity: int) -> int:
        if quantity <= 0:
            raise ValueError(f"Reservation quantity must be positive, got: {quantity}")

        result = await self.session.execute(
            update(ListingModel)
            .where(ListingModel.id == listing_id, ListingModel.quantity >= quantity)
            .values(quantity=ListingModel.quantity - quantity)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            available = await self.available(listing_id)
            if available is None:
                raise NotFound("Listing", listing_id)
            logger.warning(
                f"Reservation rejected for listing {listing_id}: "
                f"requested={quantity}, available={available}"
            )
            raise InsufficientStock(listing_id, quantity, available)

        remaining = await self.available(listing_id)
        logger.info(f"Reserved {quantity} of listing {listing_id} (remaining={remaining})")
        return remaining

    async def release(self, listing_id: str, quantity: int) -> int:
        if quantity < 0:
            raise ValueError(f"Release quantity must be non-negative, got: {quantity}")

        result = await self.session.execute(
            update(ListingModel)
            .where(ListingModel.id == listing_id)
            .values(quantity=ListingModel.quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFound("Listing", listing_id)

        remaining = await self.available(listing_id)
        logger.info(f"Released {quantity} of listing {listing_id} (remaining={remaining})")
        return remaining

    async def available(self, listing_id: str) -> Optional[int]:
        result = await self.session.execute(
            select(ListingModel.quantity).where(ListingModel.id == listing_id)
        )
        return result.scalar_one_or_none()
