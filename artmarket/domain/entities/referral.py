"""Referral accrual account."""
from dataclasses import dataclass, field
import uuid

from ..value_objects import Money


@dataclass
class Referral:
    """Commission balance credited to a referral code."""
    code: str
    balance: Money = field(default_factory=Money.zero)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
