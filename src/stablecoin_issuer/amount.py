"""Integer token quantities used throughout the issuer."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

# Fee math works on thousandths of a unit before rounding.
FEE_SCALE = 1000
ROUNDING_THRESHOLD = 500


def to_amount(value: Any) -> "Amount":
    """
    Convert an int, integral string or Decimal into an Amount.

    Floats are refused so that no quantity ever passes through binary
    floating point.

    Raises:
        ValueError: If the value is not an exact integer
    """
    if isinstance(value, Amount):
        return value
    if isinstance(value, bool):
        raise ValueError("Cannot convert bool to Amount")
    if isinstance(value, int):
        return Amount(value)
    if isinstance(value, float):
        raise ValueError(f"Float amounts are not accepted: {value!r}")
    if isinstance(value, str):
        value = value.strip()
        if not value.lstrip("-").isdigit():
            raise ValueError(f"Invalid amount: {value!r}")
        return Amount(int(value))
    if isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise ValueError(f"Amount must be integral: {value}")
        return Amount(int(value))
    raise ValueError(f"Cannot convert {type(value).__name__} to Amount")


def validate_amount(amount: "Amount", allow_zero: bool = False, allow_negative: bool = False) -> None:
    """
    Validate a token amount.

    Raises:
        ValueError: If validation fails
    """
    if not isinstance(amount, Amount):
        raise ValueError(f"Amount must be Amount, got {type(amount).__name__}")
    if not allow_negative and amount.is_negative():
        raise ValueError(f"Amount cannot be negative: {amount}")
    if not allow_zero and amount.is_zero():
        raise ValueError("Amount cannot be zero")


@dataclass(frozen=True)
class Amount:
    """Signed integer quantity of a resource."""

    value: int = 0

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"Amount value must be int, got {type(self.value).__name__}")

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0)

    def is_zero(self) -> bool:
        return self.value == 0

    def is_positive(self) -> bool:
        return self.value > 0

    def is_negative(self) -> bool:
        return self.value < 0

    def checked_sub(self, other: "Amount | int") -> Optional["Amount"]:
        """Subtract, returning None instead of a negative result."""
        result = self.value - to_amount(other).value
        if result < 0:
            return None
        return Amount(result)

    def saturating_sub(self, other: "Amount | int") -> "Amount":
        return Amount(max(self.value - to_amount(other).value, 0))

    def __add__(self, other: "Amount | int") -> "Amount":
        return Amount(self.value + to_amount(other).value)

    def __sub__(self, other: "Amount | int") -> "Amount":
        return Amount(self.value - to_amount(other).value)

    def __mul__(self, other: "Amount | int") -> "Amount":
        return Amount(self.value * to_amount(other).value)

    def __floordiv__(self, other: "Amount | int") -> "Amount":
        return Amount(self.value // to_amount(other).value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Amount):
            return self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __lt__(self, other: "Amount | int") -> bool:
        return self.value < to_amount(other).value

    def __le__(self, other: "Amount | int") -> bool:
        return self.value <= to_amount(other).value

    def __gt__(self, other: "Amount | int") -> bool:
        return self.value > to_amount(other).value

    def __ge__(self, other: "Amount | int") -> bool:
        return self.value >= to_amount(other).value

    def __hash__(self) -> int:
        return hash(self.value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)
