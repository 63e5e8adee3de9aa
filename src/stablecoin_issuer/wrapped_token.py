"""Wrapped exchange token sub-ledger.

The wrapped token is a plain fungible resource minted and burned in pairs
with the regulated token. The issuer keeps its whole float in one vault;
exchanges move units between that vault and users.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .amount import Amount
from .resources import Bucket, ResourceManager, Vault

logger = logging.getLogger(__name__)


@dataclass
class WrappedExchangeToken:
    """Vault of the issuer's wrapped-token float."""

    vault: Vault

    @property
    def resource_address(self) -> str:
        return self.vault.resource_address

    def manager(self) -> ResourceManager:
        return ResourceManager(self.resource_address)

    def balance(self) -> Amount:
        return self.vault.balance()

    def total_supply(self) -> Amount:
        return self.manager().total_supply()

    def mint(self, amount: Amount) -> None:
        """Mint wrapped units into the float."""
        self.vault.deposit(self.manager().mint_fungible(amount))
        logger.info("Minted %s wrapped units", amount)

    def burn(self, amount: Amount) -> None:
        """Burn wrapped units out of the float."""
        self.vault.withdraw(amount).burn()
        logger.info("Burned %s wrapped units", amount)

    def deposit(self, bucket: Bucket) -> None:
        self.vault.deposit(bucket)

    def withdraw(self, amount: Amount) -> Bucket:
        return self.vault.withdraw(amount)
