"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID, uuid4

DEFAULT_CURRENCY = "NGN"
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary value with currency.

    The marketplace trades in a single currency, so arithmetic between
    different currencies is rejected rather than converted.

    CRITICAL: Always use Decimal, never float!
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        # Convert to Decimal if needed
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"Currency must be 3-letter ISO code, got: {self.currency}"
            )

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> 'Money':
        return cls(amount=Decimal("0.00"), currency=currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __add__(self, other: 'Money') -> 'Money':
        """Add two Money objects (must have same currency)."""
        self._check_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two Money objects (must have same currency)."""
        self._check_currency(other)
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __lt__(self, other: 'Money') -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: 'Money') -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def times(self, quantity: int) -> 'Money':
        """Multiply by a whole quantity (unit price -> line price)."""
        return Money(amount=self.amount * quantity, currency=self.currency)

    def percentage(self, percent: Decimal) -> 'Money':
        """Return `percent`% of this amount, rounded to cents."""
        value = (Decimal(str(percent)) * self.amount / Decimal(100)).quantize(
            CENTS, rounding=ROUND_HALF_UP
        )
        return Money(amount=value, currency=self.currency)

    def to_minor_units(self) -> int:
        """Amount in the currency's minor unit (kobo, cents)."""
        return int((self.amount * 100).to_integral_value(rounding=ROUND_HALF_UP))

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def _check_currency(self, other: 'Money') -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot combine different currencies: {self.currency} vs {other.currency}"
            )


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for tracing one unit of work through the logs."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)
