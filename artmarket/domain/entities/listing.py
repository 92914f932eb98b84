"""Listing (artwork) as seen by the order engine."""
from dataclasses import dataclass

from ..value_objects import Money


@dataclass
class Listing:
    """
    Sellable artwork with a finite on-hand quantity.

    `quantity` is a read snapshot. It only changes through the
    InventoryLedger, never by assigning to this field.
    """
    id: str
    title: str
    unit_price: Money
    quantity: int
