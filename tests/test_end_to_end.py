"""
End-to-end issuer lifecycle: onboarding, funding and a wrapped exchange.
"""
from __future__ import annotations

from stablecoin_issuer import Amount, UserId

from conftest import make_issuer


def test_onboard_fund_and_exchange(engine):
    issuer = make_issuer(engine, supply=1000, symbol="USDX", metadata={"provider_name": "Acme"})
    assert issuer.treasury_balance() == Amount(1000)

    account = issuer.onboard_user(1)
    issuer.fund(account, 100)
    assert issuer.treasury_balance() == Amount(900)

    received = issuer.exchange_for_wrapped(account, 100)

    assert received == Amount(99)
    assert issuer.balance_of(account, issuer.token_resource) == Amount.zero()
    assert issuer.balance_of(account, issuer.wrapped_resource) == Amount(99)
    assert issuer.admin_call("get_user_mutable_data", UserId(1)).wrapped_exchange_limit == Amount(900)
    assert issuer.treasury_balance() == Amount(1000)
    assert issuer.wrapped_float() == Amount(901)
    assert issuer.admin_call("total_supply") == Amount(1000)
    assert issuer.admin_call("wrapped_total_supply") == Amount(1000)

    names = [event.name for event in engine.events]
    assert names[-2:] == ["set_user_wrapped_exchange_limit", "exchange_stable_for_wrapped_tokens"]
    assert [e.sequence for e in engine.events] == list(range(len(engine.events)))
