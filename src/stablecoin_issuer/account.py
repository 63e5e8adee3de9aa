"""Account component.

An account holds one vault per resource for a single owner key. Anyone may
deposit into it; withdrawals, proofs and transfers require a transaction
signed by the owner.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .access import AccessRules, AllowAll, RequireSigner
from .amount import Amount
from .confidential import ConfidentialWithdrawProof, UtxoId
from .context import current_context
from .exceptions import NotFoundError
from .resources import Bucket, Proof, Vault

logger = logging.getLogger(__name__)


class Account:
    """Owner-keyed collection of vaults."""

    def __init__(self, owner_public_key: str) -> None:
        self.owner_public_key = owner_public_key
        self.vaults: Dict[str, Vault] = {}

    @classmethod
    def access_rules(cls, owner_public_key: str) -> AccessRules:
        return (
            AccessRules()
            .add_method_rule("deposit", AllowAll())
            .add_method_rule("deposit_all", AllowAll())
            .add_method_rule("balance", AllowAll())
            .add_method_rule("get_vault_by_resource", AllowAll())
            .add_method_rule("get_non_fungible_ids", AllowAll())
            .default(RequireSigner(owner_public_key))
        )

    def get_vault_by_resource(self, resource_address: str) -> Optional[Vault]:
        return self.vaults.get(resource_address)

    def _vault(self, resource_address: str) -> Vault:
        vault = self.vaults.get(resource_address)
        if vault is None:
            raise NotFoundError("Vault", f"{resource_address} in account")
        return vault

    def deposit(self, bucket: Bucket) -> None:
        vault = self.vaults.get(bucket.resource_address)
        if vault is None:
            vault = Vault.new_empty(bucket.resource_address)
            self.vaults[bucket.resource_address] = vault
        vault.deposit(bucket)
        logger.debug("Account %s received %s", self.owner_public_key, bucket)

    def deposit_all(self, buckets: List[Bucket]) -> None:
        for bucket in buckets:
            self.deposit(bucket)

    def balance(self, resource_address: str) -> Amount:
        vault = self.vaults.get(resource_address)
        return vault.balance() if vault else Amount.zero()

    def get_non_fungible_ids(self, resource_address: str) -> List[str]:
        vault = self.vaults.get(resource_address)
        return vault.non_fungible_ids() if vault else []

    def withdraw(self, resource_address: str, amount: Amount) -> Bucket:
        return self._vault(resource_address).withdraw(amount)

    def withdraw_non_fungible(self, resource_address: str, non_fungible_id: str) -> Bucket:
        return self._vault(resource_address).withdraw_non_fungible(non_fungible_id)

    def withdraw_confidential(self, resource_address: str, proof: ConfidentialWithdrawProof) -> Bucket:
        return self._vault(resource_address).withdraw_confidential(proof)

    def blind(self, resource_address: str, amount: Amount) -> UtxoId:
        """Move revealed balance into a confidential output."""
        return self._vault(resource_address).blind(amount)

    def create_proof_for_resource(self, resource_address: str) -> Proof:
        return self._vault(resource_address).create_proof()

    def transfer_to(self, destination: str, resource_address: str, amount: Amount) -> None:
        """Withdraw and deposit into another account in one step."""
        bucket = self.withdraw(resource_address, amount)
        current_context().engine.call_component(destination, "deposit", bucket)


def open_account(engine, owner_public_key: str) -> str:
    """Create an account component and return its address."""
    return engine.create_component(Account(owner_public_key), Account.access_rules(owner_public_key))
