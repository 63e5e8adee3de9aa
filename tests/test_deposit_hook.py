"""
Tests for the token's deposit authorization hook.
"""
from __future__ import annotations

import pytest

from stablecoin_issuer import (
    AccessRules,
    Amount,
    AllowAll,
    AuthorizationError,
    IssuerPausedError,
    ResourceMismatchError,
    UnauthorizedDepositError,
    Vault,
    open_account,
)

from conftest import ADMIN_KEY, OTHER_USER_KEY, USER_KEY


class Locker:
    """A component that holds vaults but is not an account."""

    def __init__(self):
        self.vaults = {}

    def deposit(self, bucket):
        vault = Vault.new_empty(bucket.resource_address)
        vault.deposit(bucket)
        self.vaults[bucket.resource_address] = vault


class TestDepositHook:
    """Deposits of the token are only accepted by badged accounts."""

    def test_badged_account_accepts(self, issuer, user_account):
        issuer.fund(user_account, 10)
        assert issuer.balance_of(user_account, issuer.token_resource) == Amount(510)

    def test_account_without_badge_vault(self, issuer):
        account = open_account(issuer.engine, OTHER_USER_KEY)
        with pytest.raises(UnauthorizedDepositError, match="does not have a vault"):
            issuer.fund(account, 10)
        assert issuer.treasury_balance() == Amount(10_000)

    def test_account_with_empty_badge_vault(self, issuer, user_account):
        vault = issuer.engine.get_component(user_account).get_vault_by_resource(issuer.user_resource)
        issuer.admin_call("blacklist_user", vault.vault_id, 1)

        with pytest.raises(UnauthorizedDepositError, match="permission to deposit"):
            issuer.fund(user_account, 10)

    def test_non_account_component(self, issuer):
        locker = issuer.engine.create_component(Locker(), AccessRules().default(AllowAll()))
        with pytest.raises(UnauthorizedDepositError, match="must be to an account"):
            issuer.fund(locker, 10)

    def test_static_function_deposit(self, issuer):
        with pytest.raises(UnauthorizedDepositError, match="static template function"):
            with issuer.engine.transaction(signer_public_key=ADMIN_KEY, proofs=[issuer.admin_proof()]) as tx:
                bucket = tx.call_method(issuer.address, "withdraw", Amount(5))
                tx.call_function(Vault.from_bucket, bucket)

    def test_locked_badge_allows_self_transfer(self, issuer, user_account):
        with issuer.engine.transaction(signer_public_key=USER_KEY) as tx:
            tx.call_method(user_account, "create_proof_for_resource", issuer.user_resource)
            bucket = tx.call_method(user_account, "withdraw", issuer.token_resource, Amount(5))
            tx.call_method(user_account, "deposit", bucket)
        assert issuer.balance_of(user_account, issuer.token_resource) == Amount(500)

    def test_user_to_user_transfer(self, issuer, user_account):
        other = issuer.onboard_user(2, OTHER_USER_KEY)
        with issuer.engine.transaction(signer_public_key=USER_KEY) as tx:
            tx.call_method(user_account, "create_proof_for_resource", issuer.user_resource)
            tx.call_method(user_account, "transfer_to", other, issuer.token_resource, Amount(120))
        assert issuer.balance_of(user_account, issuer.token_resource) == Amount(380)
        assert issuer.balance_of(other, issuer.token_resource) == Amount(120)

    def test_transfer_requires_owner_signature(self, issuer, user_account):
        other = issuer.onboard_user(2, OTHER_USER_KEY)
        with pytest.raises(AuthorizationError):
            issuer.engine.call_method(
                user_account, "transfer_to", other, issuer.token_resource, Amount(1),
                signer_public_key=OTHER_USER_KEY,
            )


class TestPause:
    """Tests for pause and unpause."""

    def test_pause_blocks_deposits(self, issuer, user_account):
        issuer.admin_call("pause", issuer.admin_proof())
        assert issuer.component.is_paused

        with pytest.raises(IssuerPausedError):
            issuer.fund(user_account, 10)

    def test_pause_blocks_user_withdrawals(self, issuer, user_account):
        issuer.admin_call("pause", issuer.admin_proof())
        with pytest.raises(IssuerPausedError):
            with issuer.engine.transaction(signer_public_key=USER_KEY) as tx:
                tx.call_method(user_account, "create_proof_for_resource", issuer.user_resource)
                tx.call_method(user_account, "withdraw", issuer.token_resource, Amount(1))

    def test_paused_event(self, issuer):
        issuer.admin_call("pause", issuer.admin_proof())
        event = issuer.engine.events.last("admin.paused")
        assert event.payload == {"tx_signer": ADMIN_KEY, "admin_badge": "u64_0"}

    def test_unpause_restores_deposits(self, issuer, user_account):
        issuer.admin_call("pause", issuer.admin_proof())
        issuer.admin_call("unpause", issuer.admin_proof())
        issuer.fund(user_account, 10)

        assert not issuer.component.is_paused
        assert issuer.engine.events.last("admin.unpaused")["admin_badge"] == "u64_0"
        assert issuer.balance_of(user_account, issuer.token_resource) == Amount(510)

    def test_pause_requires_admin_badge_proof(self, issuer, user_account):
        with pytest.raises(ResourceMismatchError):
            with issuer.engine.transaction(signer_public_key=USER_KEY, proofs=[issuer.admin_proof()]) as tx:
                user_proof = tx.call_method(user_account, "create_proof_for_resource", issuer.user_resource)
                tx.call_method(issuer.address, "pause", user_proof)
        assert not issuer.component.is_paused

    def test_treasury_still_usable_when_paused(self, issuer):
        issuer.admin_call("pause", issuer.admin_proof())
        issuer.admin_call("increase_supply", Amount(10))
        assert issuer.treasury_balance() == Amount(10_010)
