"""Issuer policy configuration.

Two layers:
- IssuerSettings: environment-driven defaults (``STABLECOIN_*`` variables or a
  ``.env`` file), loaded once per process.
- StableCoinConfig: the live policy of one issuer instance. Each issuer owns
  its own copy; admin methods replace fields on it in place.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .amount import Amount
from .fees import FeeSpec, FixedFee, PercentageFee

DEFAULT_TRANSFER_FEE = 1
DEFAULT_WRAPPED_EXCHANGE_FEE_PERCENTAGE = 1
DEFAULT_EXCHANGE_LIMIT = 1000


class IssuerSettings(BaseSettings):
    """Process-level defaults for new issuers."""

    model_config = SettingsConfigDict(
        env_prefix="STABLECOIN_",
        env_file=".env",
        extra="ignore",
    )

    transfer_fee_fixed: int = Field(default=DEFAULT_TRANSFER_FEE, ge=0)
    wrapped_exchange_fee_percentage: int = Field(
        default=DEFAULT_WRAPPED_EXCHANGE_FEE_PERCENTAGE, ge=0, le=100
    )
    default_exchange_limit: int = Field(default=DEFAULT_EXCHANGE_LIMIT, ge=0)

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class StableCoinConfig(BaseModel):
    """Fee and limit policy owned by a single issuer."""

    model_config = ConfigDict(validate_assignment=True)

    transfer_fee: FeeSpec = Field(default_factory=lambda: FixedFee(amount=DEFAULT_TRANSFER_FEE))
    wrapped_exchange_fee: FeeSpec = Field(
        default_factory=lambda: PercentageFee(percentage=DEFAULT_WRAPPED_EXCHANGE_FEE_PERCENTAGE)
    )
    default_exchange_limit: int = Field(default=DEFAULT_EXCHANGE_LIMIT, ge=0)

    @classmethod
    def from_settings(cls, settings: IssuerSettings) -> "StableCoinConfig":
        return cls(
            transfer_fee=FixedFee(amount=settings.transfer_fee_fixed),
            wrapped_exchange_fee=PercentageFee(percentage=settings.wrapped_exchange_fee_percentage),
            default_exchange_limit=settings.default_exchange_limit,
        )

    @property
    def default_exchange_limit_amount(self) -> Amount:
        return Amount(self.default_exchange_limit)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


@lru_cache
def load_settings(env_file: Optional[str] = None) -> IssuerSettings:
    """Load IssuerSettings once per process."""
    if env_file:
        return IssuerSettings(_env_file=Path(env_file))
    return IssuerSettings()
