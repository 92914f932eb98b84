"""
Unit of Work Pattern Implementation.

Manages database transactions and repository lifecycle.
"""
from typing import Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from artmarket.domain.value_objects import ExecutionID
from artmarket.infrastructure.database.repositories import (
    SQLAlchemyInventoryLedger,
    SQLAlchemyListingRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyReferralLedger,
    SQLAlchemyShipmentRepository,
)


logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle
    2. Tag all log lines of one request with an ExecutionID
    3. Atomic commit/rollback of all repository operations
    4. Lazy initialization of repositories

    Usage:
        async with create_uow(session_factory) as uow:
            order = await uow.orders.get(order_id, for_update=True)
            await uow.inventory.reserve(listing_id, 2)
            await uow.orders.save(order)
            await uow.commit()

    Anything not committed when the block exits is rolled back, and the
    session is always closed.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = None

        # Lazy-loaded repositories
        self._orders: Optional[SQLAlchemyOrderRepository] = None
        self._listings: Optional[SQLAlchemyListingRepository] = None
        self._inventory: Optional[SQLAlchemyInventoryLedger] = None
        self._payments: Optional[SQLAlchemyPaymentRepository] = None
        self._referrals: Optional[SQLAlchemyReferralLedger] = None
        self._shipments: Optional[SQLAlchemyShipmentRepository] = None

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        self._execution_id = ExecutionID.generate()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback on exception, always release the connection."""
        try:
            if exc_type is not None:
                logger.error(f"[exec={self._execution_id}] Transaction failed: {exc_val!r}")
                await self.rollback()
        finally:
            await self._session.close()

    @property
    def execution_id(self) -> ExecutionID:
        """Get current execution ID for tracing.

        Returns:
            ExecutionID value object
        """
        if self._execution_id is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._execution_id

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._session

    @property
    def orders(self) -> SQLAlchemyOrderRepository:
        if self._orders is None:
            self._orders = SQLAlchemyOrderRepository(self.session)
        return self._orders

    @property
    def listings(self) -> SQLAlchemyListingRepository:
        if self._listings is None:
            self._listings = SQLAlchemyListingRepository(self.session)
        return self._listings

    @property
    def inventory(self) -> SQLAlchemyInventoryLedger:
        if self._inventory is None:
            self._inventory = SQLAlchemyInventoryLedger(self.session)
        return self._inventory

    @property
    def payments(self) -> SQLAlchemyPaymentRepository:
        if self._payments is None:
            self._payments = SQLAlchemyPaymentRepository(self.session)
        return self._payments

    @property
    def referrals(self) -> SQLAlchemyReferralLedger:
        if self._referrals is None:
            self._referrals = SQLAlchemyReferralLedger(self.session)
        return self._referrals

    @property
    def shipments(self) -> SQLAlchemyShipmentRepository:
        if self._shipments is None:
            self._shipments = SQLAlchemyShipmentRepository(self.session)
        return self._shipments

    async def commit(self) -> None:
        """Commit all pending changes."""
        try:
            await self.session.commit()
            logger.info(f"[exec={self._execution_id}] ✅ Transaction committed")
        except Exception as e:
            logger.error(f"[exec={self._execution_id}] ❌ Commit failed: {e}")
            await self.rollback()
            raise

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        await self.session.rollback()
        logger.warning(f"[exec={self._execution_id}] Transaction rolled back")


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)
