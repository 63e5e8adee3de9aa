"""User badge records."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

from .amount import Amount, to_amount

USER_ID_WIDTH = 19
MAX_USER_ID = 2**64 - 1


@dataclass(frozen=True)
class UserId:
    """Externally assigned 64-bit user identifier."""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"UserId must be int, got {type(self.value).__name__}")
        if not 0 <= self.value <= MAX_USER_ID:
            raise ValueError(f"UserId out of range: {self.value}")

    def to_non_fungible_id(self) -> str:
        return f"u64_{self.value}"

    def __str__(self) -> str:
        return f"{self.value:0>{USER_ID_WIDTH}}"


@dataclass(frozen=True)
class UserData:
    """Identity fields fixed when the badge is minted."""

    user_id: UserId
    user_account: str
    created_at_epoch: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": str(self.user_id),
            "user_account": self.user_account,
            "created_at_epoch": self.created_at_epoch,
        }


@dataclass(frozen=True)
class UserMutableData:
    """Badge fields that admin operations rewrite."""

    is_blacklisted: bool
    wrapped_exchange_limit: Amount

    def __post_init__(self):
        object.__setattr__(self, "wrapped_exchange_limit", to_amount(self.wrapped_exchange_limit))

    def with_wrapped_exchange_limit(self, limit: Amount) -> "UserMutableData":
        return replace(self, wrapped_exchange_limit=limit)

    def with_blacklisted(self, is_blacklisted: bool) -> "UserMutableData":
        return replace(self, is_blacklisted=is_blacklisted)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_blacklisted": self.is_blacklisted,
            "wrapped_exchange_limit": str(self.wrapped_exchange_limit),
        }
