"""Per-call execution context.

The engine opens one CallContext per transaction. Vaults, resource managers
and components look it up to learn who is calling and with which
credentials.
"""
from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional

from .access import AuthScope
from .exceptions import IssuerError

if TYPE_CHECKING:
    from .events import Event
    from .runtime import Engine


@dataclass
class CallContext:
    """State of the transaction currently executing."""

    engine: "Engine"
    tx_id: str
    scope: AuthScope
    signer_public_key: str = ""
    component_address: Optional[str] = None
    events: List["Event"] = field(default_factory=list)
    consumed_buckets: List[Any] = field(default_factory=list)
    open_proofs: List[Any] = field(default_factory=list)


_current: ContextVar[Optional[CallContext]] = ContextVar("stablecoin_call_context", default=None)


def current_context() -> CallContext:
    """
    Return the active call context.

    Raises:
        IssuerError: If called outside an engine transaction
    """
    ctx = _current.get()
    if ctx is None:
        raise IssuerError("No engine transaction is active", error_code="NO_ACTIVE_CALL")
    return ctx


def get_context() -> Optional[CallContext]:
    return _current.get()


def set_context(ctx: Optional[CallContext]):
    return _current.set(ctx)


def reset_context(token) -> None:
    _current.reset(token)
