"""Domain value objects."""

from .value_objects import DEFAULT_CURRENCY, ExecutionID, Money
from .actor import Actor

__all__ = [
    "Actor",
    "DEFAULT_CURRENCY",
    "ExecutionID",
    "Money",
]
