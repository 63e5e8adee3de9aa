"""
Tests for the simulated engine: dispatch, atomicity and events.
"""
from __future__ import annotations

import logging

import pytest

from stablecoin_issuer.access import AccessRules, AllowAll, RequireResource
from stablecoin_issuer.amount import Amount
from stablecoin_issuer.exceptions import (
    AuthorizationError,
    InsufficientBalanceError,
    IssuerError,
    NotFoundError,
)
from stablecoin_issuer.logging_config import get_correlation_id
from stablecoin_issuer.resources import Bucket, Proof

from conftest import ADMIN_KEY, USER_KEY, make_issuer


class Counter:
    """Minimal component for dispatch tests."""

    def __init__(self):
        self.value = 0
        self.seen_correlation_ids = []

    def bump(self, by: int = 1) -> int:
        self.seen_correlation_ids.append(get_correlation_id())
        self.value += by
        return self.value

    def fail(self) -> None:
        self.value += 100
        raise IssuerError("boom")


class TestDispatch:
    """Tests for call_method routing."""

    def test_call_method(self, engine):
        address = engine.create_component(Counter(), AccessRules().default(AllowAll()))
        assert engine.call_method(address, "bump", 5) == 5
        assert engine.get_component(address).value == 5

    def test_method_rule_enforced(self, engine):
        address = engine.create_component(Counter(), AccessRules().default(RequireResource("resource_admin")))
        with pytest.raises(AuthorizationError):
            engine.call_method(address, "bump")

    def test_private_method_not_callable(self, engine):
        address = engine.create_component(Counter(), AccessRules().default(AllowAll()))
        with pytest.raises(NotFoundError):
            engine.call_method(address, "__init__")

    def test_unknown_component(self, engine):
        with pytest.raises(NotFoundError):
            engine.call_method("component_missing", "bump")

    def test_each_call_gets_correlation_id(self, engine):
        address = engine.create_component(Counter(), AccessRules().default(AllowAll()))
        engine.call_method(address, "bump")
        engine.call_method(address, "bump")
        ids = engine.get_component(address).seen_correlation_ids
        assert all(i and i.startswith("tx_") for i in ids)
        assert ids[0] != ids[1]

    def test_nested_transaction_rejected(self, engine):
        with pytest.raises(IssuerError, match="Nested"):
            with engine.transaction():
                with engine.transaction():
                    pass

    def test_epoch(self, engine):
        assert engine.advance_epoch() == 1
        assert engine.advance_epoch(4) == 5


class TestAtomicity:
    """A failed call leaves no trace."""

    def test_component_state_rolled_back(self, engine):
        counter = Counter()
        address = engine.create_component(counter, AccessRules().default(AllowAll()))
        engine.call_method(address, "bump", 3)

        with pytest.raises(IssuerError):
            engine.call_method(address, "fail")

        assert engine.get_component(address) is counter
        assert counter.value == 3

    def test_multi_instruction_rollback(self, issuer):
        supply_before = issuer.admin_call("total_supply")
        events_before = len(issuer.engine.events)

        with pytest.raises(InsufficientBalanceError):
            with issuer.engine.transaction(signer_public_key=ADMIN_KEY, proofs=[issuer.admin_proof()]) as tx:
                tx.call_method(issuer.address, "increase_supply", Amount(50))
                tx.call_method(issuer.address, "withdraw", Amount(10**9))

        assert issuer.admin_call("total_supply") == supply_before
        assert len(issuer.engine.events) == events_before
        assert issuer.engine.events.by_name("increase_supply") == []

    def test_failed_instantiation_creates_nothing(self, engine):
        with pytest.raises(IssuerError):
            make_issuer(engine, metadata={"provider_name": "   "})
        assert engine.resource_addresses() == []
        assert engine.last_component_address is None

    def test_committed_events_carry_transaction(self, issuer):
        with issuer.engine.transaction(signer_public_key=ADMIN_KEY, proofs=[issuer.admin_proof()]) as tx:
            tx.call_method(issuer.address, "increase_supply", Amount(1))
            tx.call_method(issuer.address, "decrease_supply", Amount(1))
            tx_id = tx.tx_id
        names = [e.name for e in issuer.engine.events.for_transaction(tx_id)]
        assert names == ["increase_supply", "decrease_supply"]

    def test_rollback_is_logged(self, engine, caplog):
        address = engine.create_component(Counter(), AccessRules().default(AllowAll()))
        with caplog.at_level(logging.WARNING, logger="stablecoin_issuer.runtime"):
            with pytest.raises(IssuerError):
                engine.call_method(address, "fail")
        assert any("rolled back" in r.getMessage() for r in caplog.records)


class TestComponentOwnership:
    """Tests for owner-gated access rule updates."""

    def test_owner_can_replace_rules(self, issuer):
        open_rules = AccessRules().default(AllowAll())
        with issuer.engine.transaction(proofs=[issuer.admin_proof()]):
            issuer.engine.set_component_access_rules(issuer.address, open_rules)
        issuer.engine.call_method(issuer.address, "get_config")

    def test_non_owner_cannot_replace_rules(self, issuer):
        with pytest.raises(AuthorizationError):
            with issuer.engine.transaction():
                issuer.engine.set_component_access_rules(issuer.address, AccessRules().default(AllowAll()))


class TestCredentials:
    """Only proofs and buckets issued by the engine are honoured."""

    def test_forged_proof_rejected_at_transaction_start(self, issuer):
        forged = Proof(issuer.admin_resource, ["u64_0"], 1)
        with pytest.raises(AuthorizationError, match="not issued"):
            issuer.engine.call_method(
                issuer.address, "increase_supply", Amount(1),
                proofs=[forged], signer_public_key=ADMIN_KEY,
            )
        assert issuer.admin_call("total_supply") == Amount(10_000)

    def test_forged_proof_cannot_be_added(self, issuer):
        forged = Proof(issuer.admin_resource, ["u64_0"], 1)
        with pytest.raises(AuthorizationError):
            with issuer.engine.transaction() as tx:
                tx.add_proof(forged)
                tx.call_method(issuer.address, "increase_supply", Amount(1))
        assert issuer.engine.events.by_name("increase_supply") == []

    def test_added_bucket_proof_grants_access(self, issuer):
        with issuer.engine.transaction(signer_public_key=ADMIN_KEY) as tx:
            tx.add_proof(issuer.admin_proof())
            tx.call_method(issuer.address, "increase_supply", Amount(1))
        assert issuer.admin_call("total_supply") == Amount(10_001)

    def test_vault_proof_expires_with_its_transaction(self, issuer, user_account):
        with issuer.engine.transaction(signer_public_key=USER_KEY) as tx:
            proof = tx.call_method(user_account, "create_proof_for_resource", issuer.user_resource)

        with pytest.raises(AuthorizationError):
            issuer.engine.call_method(
                issuer.address, "exchange_stable_for_wrapped_tokens", proof, None,
                proofs=[proof], signer_public_key=USER_KEY,
            )

    def test_proof_of_spent_bucket_rejected(self, issuer, user_account):
        badge = issuer.admin_call("create_new_admin", "emp-7")
        proof = badge.create_proof()
        issuer.engine.call_method(user_account, "deposit", badge)

        with pytest.raises(AuthorizationError, match="not issued"):
            issuer.engine.call_method(issuer.address, "increase_supply", Amount(1), proofs=[proof])

    def test_forged_bucket_cannot_be_deposited(self, issuer, user_account):
        forged = Bucket(issuer.token_resource, Amount(1_000))
        with pytest.raises(AuthorizationError, match="not issued"):
            issuer.engine.call_method(user_account, "deposit", forged)
        assert issuer.balance_of(user_account, issuer.token_resource) == Amount(500)

    def test_bucket_from_rolled_back_transaction_is_void(self, issuer, user_account):
        leaked = []
        with pytest.raises(IssuerError, match="abort"):
            with issuer.engine.transaction(signer_public_key=ADMIN_KEY, proofs=[issuer.admin_proof()]) as tx:
                leaked.append(tx.call_method(issuer.address, "withdraw", Amount(100)))
                raise IssuerError("abort")

        with pytest.raises(AuthorizationError):
            issuer.engine.call_method(user_account, "deposit", leaked[0])
        assert issuer.treasury_balance() == Amount(9_500)
        assert issuer.balance_of(user_account, issuer.token_resource) == Amount(500)
