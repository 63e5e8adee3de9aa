"""
Tests for buckets, vaults and resource managers.
"""
from __future__ import annotations

import pytest

from stablecoin_issuer.access import RequireResource
from stablecoin_issuer.amount import Amount
from stablecoin_issuer.confidential import ConfidentialWithdrawProof, StealthValueProof
from stablecoin_issuer.exceptions import (
    AuthorizationError,
    DuplicateNonFungibleError,
    InsufficientBalanceError,
    ProofVerificationError,
    ResourceError,
    ResourceMismatchError,
)
from stablecoin_issuer.resources import ResourceBuilder, ResourceManager, Vault, acting_as

OWNER = "component_owner"


class TestBucketLinearity:
    """A bucket can be consumed exactly once."""

    def test_double_deposit_rejected(self, engine):
        def scenario():
            bucket = ResourceBuilder.fungible().with_token_symbol("TST").initial_supply(Amount(10))
            vault = Vault.from_bucket(bucket)
            assert bucket.is_consumed
            vault.deposit(bucket)

        with pytest.raises(ResourceError, match="consumed"):
            with engine.transaction() as tx:
                tx.call_function(scenario)

    def test_burn_after_deposit_rejected(self, engine):
        def scenario():
            with acting_as(OWNER):
                bucket = ResourceBuilder.fungible().initial_supply(Amount(10))
                Vault.from_bucket(bucket)
                bucket.burn()

        with pytest.raises(ResourceError):
            engine.call_function(scenario)

    def test_no_proof_from_consumed_bucket(self, engine):
        def scenario():
            bucket = ResourceBuilder.fungible().initial_supply(Amount(10))
            Vault.from_bucket(bucket)
            bucket.create_proof()

        with pytest.raises(ResourceError, match="consumed"):
            engine.call_function(scenario)

    def test_mismatched_deposit_rejected(self, engine):
        def scenario():
            first = ResourceBuilder.fungible().initial_supply(Amount(1))
            second = ResourceBuilder.fungible().initial_supply(Amount(1))
            Vault.from_bucket(first).deposit(second)

        with pytest.raises(ResourceMismatchError):
            engine.call_function(scenario)


class TestVault:
    """Tests for vault balances."""

    def test_withdraw_more_than_balance(self, engine):
        def scenario():
            vault = Vault.from_bucket(ResourceBuilder.fungible().initial_supply(Amount(5)))
            vault.withdraw(Amount(6))

        with pytest.raises(InsufficientBalanceError):
            engine.call_function(scenario)

    def test_withdraw_and_deposit(self, engine):
        def scenario():
            vault = Vault.from_bucket(ResourceBuilder.fungible().initial_supply(Amount(5)))
            other = Vault.new_empty(vault.resource_address)
            other.deposit(vault.withdraw(Amount(2)))
            return vault.balance(), other.balance()

        assert engine.call_function(scenario) == (Amount(3), Amount(2))

    def test_vault_of_other_component_is_not_withdrawable(self, engine):
        def scenario():
            with acting_as("component_a"):
                vault = Vault.from_bucket(ResourceBuilder.fungible().initial_supply(Amount(5)))
            with acting_as("component_b"):
                vault.withdraw(Amount(1))

        with pytest.raises(AuthorizationError, match="not owned"):
            engine.call_function(scenario)

    def test_proof_locks_badges_until_call_ends(self, engine):
        def scenario():
            bucket = ResourceBuilder.non_fungible().initial_non_fungibles({"u64_1": (None, None)})
            vault = Vault.from_bucket(bucket)
            proof = vault.create_proof()
            return vault, proof, vault.balance(), vault.locked_balance()

        vault, proof, balance, locked = engine.call_function(scenario)
        assert proof.get_non_fungibles() == ["u64_1"]
        assert (balance, locked) == (Amount(0), Amount(1))
        state = engine.vault_state(vault.vault_id)
        assert state.balance == Amount(1)
        assert state.locked_balance == Amount(0)


class TestResourceManager:
    """Tests for minting, burning and access rules."""

    def test_duplicate_non_fungible(self, engine):
        def scenario():
            with acting_as(OWNER):
                manager = ResourceBuilder.non_fungible().build()
                manager.mint_non_fungible("u64_1")
                manager.mint_non_fungible("u64_1")

        with pytest.raises(DuplicateNonFungibleError):
            engine.call_function(scenario)

    def test_mint_requires_rule_for_non_owner(self, engine):
        def scenario():
            with acting_as("component_owner"):
                manager = ResourceBuilder.fungible().mintable(RequireResource("resource_admin")).build()
            with acting_as("component_other"):
                manager.mint_fungible(Amount(5))

        with pytest.raises(AuthorizationError):
            engine.call_function(scenario)

    def test_mint_and_burn_track_supply(self, engine):
        def scenario():
            with acting_as(OWNER):
                manager = ResourceBuilder.fungible().build()
                vault = Vault.from_bucket(manager.mint_fungible(Amount(10)))
                vault.withdraw(Amount(4)).burn()
                return manager.total_supply()

        assert engine.call_function(scenario) == Amount(6)

    def test_confidential_withdraw_must_balance(self, engine):
        def scenario():
            vault = Vault.from_bucket(ResourceBuilder.confidential().initial_supply(Amount(10)))
            utxo = vault.blind(Amount(10))
            vault.withdraw_confidential(ConfidentialWithdrawProof(inputs=(utxo,), revealed_amount=Amount(11)))

        with pytest.raises(ProofVerificationError):
            engine.call_function(scenario)

    def test_confidential_withdraw_reveals_delta(self, engine):
        def scenario():
            vault = Vault.from_bucket(ResourceBuilder.confidential().initial_supply(Amount(10)))
            utxo = vault.blind(Amount(10))
            bucket = vault.withdraw_confidential(
                ConfidentialWithdrawProof(inputs=(utxo,), revealed_amount=Amount(10))
            )
            return bucket.amount, vault.utxos()

        amount, utxos = engine.call_function(scenario)
        assert amount == Amount(10)
        assert utxos == []

    def test_burn_utxo_with_value_proof(self, engine):
        def scenario():
            with acting_as(OWNER):
                manager = ResourceBuilder.confidential().build()
                vault = Vault.from_bucket(manager.mint_confidential(Amount(8)))
                utxo = vault.blind(Amount(8))
                manager.burn_utxo(utxo, StealthValueProof(claimed_value=Amount(8)))
                return manager.total_supply()

        assert engine.call_function(scenario) == Amount.zero()

    def test_get_unknown_resource(self, engine):
        with pytest.raises(ResourceError):
            engine.call_function(ResourceManager.get, "resource_missing")
