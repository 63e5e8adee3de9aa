"""Fee policies and fee calculation.

A fee is either a fixed amount or a whole-number percentage of the amount
being moved:

  FixedFee(amount=1)            → 1 regardless of the amount
  PercentageFee(percentage=5)   → 123 * 5% = 6.15 → 6
                                  130 * 5% = 6.50 → 7

Percentages are rounded half-up on the third decimal digit using integer
arithmetic only. The fixed fee is returned even when it exceeds the amount;
callers compare the two themselves.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .amount import FEE_SCALE, ROUNDING_THRESHOLD, Amount, to_amount

MAX_PERCENTAGE = 100


class FixedFee(BaseModel):
    """Flat fee charged per operation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fixed"] = "fixed"
    amount: int = Field(ge=0)

    def calculate_fee(self, amount: Amount | int) -> Amount:
        return Amount(self.amount)

    def __str__(self) -> str:
        return str(self.amount)


class PercentageFee(BaseModel):
    """Fee proportional to the amount, in whole percent."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["percentage"] = "percentage"
    percentage: int = Field(ge=0, le=MAX_PERCENTAGE)

    def calculate_fee(self, amount: Amount | int) -> Amount:
        return div_rounded(to_amount(amount), self.percentage)

    def __str__(self) -> str:
        return f"{self.percentage}%"


FeeSpec = Annotated[Union[FixedFee, PercentageFee], Field(discriminator="kind")]


def div_rounded(amount: Amount, percentage: int) -> Amount:
    """
    Compute ``amount * percentage / 100`` rounded half-up.

    Args:
        amount: Amount the percentage applies to
        percentage: Whole percent, 0-100

    Returns:
        The rounded fee; zero when percentage is zero
    """
    if percentage == 0:
        return Amount.zero()

    # Division to three decimals and its truncated integer part
    scaled = amount * FEE_SCALE * percentage // 100
    truncated = amount * percentage // 100
    remainder = scaled - truncated * FEE_SCALE

    if remainder >= ROUNDING_THRESHOLD:
        return scaled // FEE_SCALE + 1
    return truncated


def calculate_fee(spec: FixedFee | PercentageFee, amount: Amount | int) -> Amount:
    """Apply a fee policy to an amount."""
    return spec.calculate_fee(amount)
