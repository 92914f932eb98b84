"""Listing catalog reads and the stock ledger."""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.listing import Listing


class ListingRepository(ABC):
    """Read access to listings (the catalog itself is managed elsewhere)."""

    @abstractmethod
    async def get(self, listing_id: str) -> Optional[Listing]:
        pass

    @abstractmethod
    async def add(self, listing: Listing) -> None:
        pass


class InventoryLedger(ABC):
    """
    Sole writer of listing stock.

    Implementations must make `reserve` a single atomic check-and-decrement;
    a read followed by a write is not acceptable.
    """

    @abstractmethod
    async def reserve(self, listing_id: str, quantity: int) -> int:
        """Decrement stock by `quantity` if that much is available.

        Args:
            listing_id: Listing to reserve from
            quantity: Positive number of units

        Returns:
            New stock level

        Raises:
            NotFound: Listing does not exist
            InsufficientStock: Not enough units available
        """
        pass

    @abstractmethod
    async def release(self, listing_id: str, quantity: int) -> int:
        """Increment stock by `quantity` (non-negative). Returns the new level."""
        pass

    @abstractmethod
    async def available(self, listing_id: str) -> Optional[int]:
        """Current stock level, None if the listing does not exist."""
        pass
