"""Repository interface for the Order aggregate."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.order import Order, OrderItem


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def get(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """Load an order with its items.

        Args:
            order_id: Order identifier
            for_update: Lock the order row until the transaction ends

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_open_for_profile(self, profile_id: str) -> Optional[Order]:
        """Return the profile's PENDING order, if any."""
        pass

    @abstractmethod
    async def list_for_profile(self, profile_id: str, limit: int = 100) -> List[Order]:
        """List a profile's orders, newest first."""
        pass

    @abstractmethod
    async def find_order_id_for_item(self, order_item_id: str) -> Optional[str]:
        """Resolve the parent order of a line item."""
        pass

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Persist a new order."""
        pass

    @abstractmethod
    async def save(self, order: Order) -> None:
        """Write status, totals and checkout fields of an existing order."""
        pass

    @abstractmethod
    async def add_item(self, item: OrderItem) -> None:
        """Persist a new line item."""
        pass

    @abstractmethod
    async def delete_item(self, order_item_id: str) -> None:
        """Delete a line item."""
        pass
