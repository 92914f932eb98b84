"""Shipment entity."""
from dataclasses import dataclass, field
from typing import Optional
import uuid

from ..value_objects import Money


@dataclass
class Shipment:
    """Carrier shipment for a paid order (one per order)."""
    order_id: str
    carrier_shipment_id: Optional[str] = None
    tracking_id: Optional[str] = None
    cost: Optional[Money] = None
    is_paid: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def record_dispatch(self, carrier_shipment_id: str, tracking_id: str) -> None:
        """Store carrier identifiers once the carrier has been paid."""
        self.carrier_shipment_id = carrier_shipment_id
        self.tracking_id = tracking_id
        self.is_paid = True
