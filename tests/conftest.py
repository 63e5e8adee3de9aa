"""
Pytest configuration for stablecoin-issuer tests.
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import pytest

# Add package source to path
package_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(package_src))

# Settings must not leak in from the developer's environment
for _key in list(os.environ):
    if _key.startswith("STABLECOIN_"):
        del os.environ[_key]

from stablecoin_issuer import (  # noqa: E402
    Amount,
    Bucket,
    Engine,
    StableCoinConfig,
    StableCoinIssuer,
    UserId,
    open_account,
)

ADMIN_KEY = "pk_admin_0001"
USER_KEY = "pk_user_0001"
OTHER_USER_KEY = "pk_user_0002"


@dataclass
class IssuerHarness:
    """An instantiated issuer plus shortcuts for driving it."""

    engine: Engine
    address: str
    admin_badge: Bucket

    @property
    def component(self) -> StableCoinIssuer:
        return self.engine.get_component(self.address)

    @property
    def token_resource(self) -> str:
        return self.component.token_vault.resource_address

    @property
    def user_resource(self) -> str:
        return self.component.user_auth_manager.resource_address

    @property
    def admin_resource(self) -> str:
        return self.admin_badge.resource_address

    @property
    def wrapped_resource(self) -> Optional[str]:
        wrapped = self.component.wrapped_token
        return wrapped.resource_address if wrapped else None

    def admin_proof(self):
        return self.admin_badge.create_proof()

    def admin_call(self, method: str, *args: Any) -> Any:
        return self.engine.call_method(
            self.address, method, *args,
            proofs=[self.admin_proof()],
            signer_public_key=ADMIN_KEY,
        )

    def treasury_balance(self) -> Amount:
        return self.engine.vault_state(self.component.token_vault.vault_id).balance

    def wrapped_float(self) -> Amount:
        return self.engine.vault_state(self.component.wrapped_token.vault.vault_id).balance

    def balance_of(self, account: str, resource_address: str) -> Amount:
        return self.engine.call_method(account, "balance", resource_address)

    def onboard_user(self, user_id: int, owner_key: str = USER_KEY) -> str:
        """Open an account and deposit a fresh user badge into it."""
        account = open_account(self.engine, owner_key)
        badge = self.admin_call("create_new_user", UserId(user_id), account)
        self.engine.call_method(account, "deposit", badge, proofs=[self.admin_proof()])
        return account

    def fund(self, account: str, amount: int) -> None:
        """Move tokens from the treasury to an account."""
        with self.engine.transaction(signer_public_key=ADMIN_KEY, proofs=[self.admin_proof()]) as tx:
            bucket = tx.call_method(self.address, "withdraw", Amount(amount))
            tx.call_method(account, "deposit", bucket)

    def exchange_for_wrapped(self, account: str, amount: int, owner_key: str = USER_KEY) -> Bucket:
        """Run a user's stable-to-wrapped exchange and keep the result in their account."""
        with self.engine.transaction(signer_public_key=owner_key) as tx:
            proof = tx.call_method(account, "create_proof_for_resource", self.user_resource)
            bucket = tx.call_method(account, "withdraw", self.token_resource, Amount(amount))
            wrapped = tx.call_method(self.address, "exchange_stable_for_wrapped_tokens", proof, bucket)
            received = wrapped.amount
            tx.call_method(account, "deposit", wrapped)
        return received

    def exchange_for_stable(self, account: str, amount: int, owner_key: str = USER_KEY) -> Amount:
        with self.engine.transaction(signer_public_key=owner_key) as tx:
            proof = tx.call_method(account, "create_proof_for_resource", self.user_resource)
            bucket = tx.call_method(account, "withdraw", self.wrapped_resource, Amount(amount))
            tokens = tx.call_method(self.address, "exchange_wrapped_for_stable_tokens", proof, bucket)
            received = tokens.amount
            tx.call_method(account, "deposit", tokens)
        return received


def make_issuer(
    engine: Engine,
    supply: int = 10_000,
    symbol: str = "USDX",
    metadata: Optional[dict] = None,
    enable_wrapped_token: bool = True,
    config: Optional[StableCoinConfig] = None,
) -> IssuerHarness:
    admin_badge = StableCoinIssuer.instantiate(
        engine,
        Amount(supply),
        symbol,
        metadata if metadata is not None else {"provider_name": "Acme"},
        view_key=b"auditor-view-key",
        enable_wrapped_token=enable_wrapped_token,
        config=config or StableCoinConfig(),
    )
    return IssuerHarness(engine, engine.last_component_address, admin_badge)


@pytest.fixture
def engine() -> Engine:
    return Engine()


@pytest.fixture
def issuer(engine) -> IssuerHarness:
    """Issuer with 10,000 units and the wrapped token enabled."""
    return make_issuer(engine)


@pytest.fixture
def user_account(issuer) -> str:
    """Account of user 1 holding its badge and 500 tokens."""
    account = issuer.onboard_user(1)
    issuer.fund(account, 500)
    return account
