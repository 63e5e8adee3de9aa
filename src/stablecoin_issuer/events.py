"""Structured audit events emitted by the issuer.

Event names and payload keys are an external contract: observers index the
log by them, so they must not change.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional

logger = logging.getLogger(__name__)

# Supply and treasury
INCREASE_SUPPLY = "increase_supply"
DECREASE_SUPPLY = "decrease_supply"
WITHDRAW = "withdraw"
DEPOSIT = "deposit"

# Exchange
EXCHANGE_STABLE_FOR_WRAPPED = "exchange_stable_for_wrapped_tokens"
EXCHANGE_WRAPPED_FOR_STABLE = "exchange_wrapped_for_stable_tokens"

# Identity and compliance
RECALL_TOKENS = "recall_tokens"
BURN_UTXOS = "burn_utxos"
CREATE_NEW_ADMIN = "create_new_admin"
CREATE_NEW_USER = "create_new_user"
SET_USER_EXCHANGE_LIMIT = "set_user_exchange_limit"
SET_USER_WRAPPED_EXCHANGE_LIMIT = "set_user_wrapped_exchange_limit"
BLACKLIST_USER = "blacklist_user"
REMOVE_FROM_BLACKLIST = "remove_from_blacklist"

# Configuration
CONFIG_SET_TRANSFER_FEE_FIXED = "config.set_transfer_fee_fixed"
CONFIG_SET_TRANSFER_FEE_PERCENTAGE = "config.set_transfer_fee_percentage"
CONFIG_SET_WRAPPED_EXCHANGE_FEE = "config.set_wrapped_exchange_fee"
CONFIG_SET_DEFAULT_EXCHANGE_LIMIT = "config.set_default_exchange_limit"

# Admin
ADMIN_PAUSED = "admin.paused"
ADMIN_UNPAUSED = "admin.unpaused"
ADMIN_FREEZE_UTXOS = "admin.freeze_utxos"
ADMIN_UNFREEZE_UTXOS = "admin.unfreeze_utxos"


@dataclass(frozen=True)
class Event:
    """One audit record. Payload values are always strings."""

    name: str
    payload: Mapping[str, str]
    component_address: Optional[str] = None
    tx_id: Optional[str] = None
    sequence: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __getitem__(self, key: str) -> str:
        return self.payload[key]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "payload": dict(self.payload),
            "component_address": self.component_address,
            "tx_id": self.tx_id,
            "sequence": self.sequence,
            "created_at": self.created_at.isoformat(),
        }


class EventLog:
    """Append-only list of committed events."""

    def __init__(self) -> None:
        self._events: List[Event] = []

    def append(self, event: Event) -> Event:
        stamped = Event(
            name=event.name,
            payload=dict(event.payload),
            component_address=event.component_address,
            tx_id=event.tx_id,
            sequence=len(self._events),
            created_at=event.created_at,
        )
        self._events.append(stamped)
        logger.debug("Event committed: %s %s", stamped.name, dict(stamped.payload))
        return stamped

    def extend(self, events: List[Event]) -> None:
        for event in events:
            self.append(event)

    def by_name(self, name: str) -> List[Event]:
        return [e for e in self._events if e.name == name]

    def last(self, name: Optional[str] = None) -> Optional[Event]:
        events = self.by_name(name) if name else self._events
        return events[-1] if events else None

    def for_transaction(self, tx_id: str) -> List[Event]:
        return [e for e in self._events if e.tx_id == tx_id]

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)
