"""In-memory simulated engine.

The engine owns every resource, vault and component and runs calls against
them one at a time. Each transaction:

1. Opens a CallContext carrying the caller's proofs and signer key, after
   checking each proof was issued by this engine and is still backed
2. Snapshots all engine state
3. Dispatches the call after checking the component's method access rule
4. Commits the buffered events on success, or restores the snapshot and
   discards the events on any exception

Usage:
    engine = Engine()
    admin_badge = StableCoinIssuer.instantiate(engine, Amount(1000), "USDX", {"provider_name": "Acme"})
    issuer = engine.last_component_address
    engine.call_method(issuer, "increase_supply", Amount(10), proofs=[admin_badge.create_proof()])

    # Several instructions, one atomic unit
    with engine.transaction(proofs=[admin_proof]) as tx:
        bucket = tx.call_method(issuer, "withdraw", Amount(10))
        tx.call_method(account, "deposit", bucket)
"""
from __future__ import annotations

import copy
import itertools
import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple

from .access import AccessRule, AccessRules, AuthScope, DenyAll, ResourceAuthAction
from .amount import Amount
from .confidential import ConfidentialOutput, ProofVerifier, SimulatedProofVerifier, UtxoId
from .context import CallContext, current_context, get_context, reset_context, set_context
from .events import Event, EventLog
from .exceptions import AuthorizationError, IssuerError, NotFoundError
from .logging_config import LogContext
from .resources import Bucket, Proof, ResourceState, VaultState, acting_as, unlock_proof

logger = logging.getLogger(__name__)


@dataclass
class ComponentRecord:
    address: str
    instance: Any
    access_rules: AccessRules
    owner_rule: Optional[AccessRule] = None


@dataclass
class EngineState:
    resources: Dict[str, ResourceState] = field(default_factory=dict)
    vaults: Dict[str, VaultState] = field(default_factory=dict)
    components: Dict[str, ComponentRecord] = field(default_factory=dict)
    # bucket_id -> (resource_address, non_fungible_ids, amount) of unspent buckets
    live_buckets: Dict[str, Tuple[str, Tuple[str, ...], Amount]] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthHookCaller:
    """Who a hooked resource action is performed for."""

    component_address: Optional[str]
    component_state: Any = None


class Transaction:
    """Instruction runner bound to one open transaction."""

    def __init__(self, engine: "Engine", ctx: CallContext) -> None:
        self._engine = engine
        self._ctx = ctx

    @property
    def tx_id(self) -> str:
        return self._ctx.tx_id

    def call_method(self, address: str, method: str, *args: Any, **kwargs: Any) -> Any:
        result = self._engine.call_component(address, method, *args, **kwargs)
        if isinstance(result, Proof):
            self._engine.verify_proof(result)
            self._ctx.scope = self._ctx.scope.with_proof(result)
        return result

    def call_function(self, function: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        previous = self._ctx.component_address
        self._ctx.component_address = None
        try:
            return function(*args, **kwargs)
        finally:
            self._ctx.component_address = previous

    def add_proof(self, proof: Proof) -> None:
        self._engine.verify_proof(proof)
        self._ctx.scope = self._ctx.scope.with_proof(proof)


class Engine:
    """Serialized, atomic executor for components and resources."""

    def __init__(self, proof_verifier: Optional[ProofVerifier] = None, epoch: int = 0) -> None:
        self._state = EngineState()
        self._lock = threading.RLock()
        self._counter = itertools.count(1)
        self.events = EventLog()
        self.proof_verifier: ProofVerifier = proof_verifier or SimulatedProofVerifier()
        self.current_epoch = epoch
        self.last_component_address: Optional[str] = None

    # =========================================================================
    # Registries
    # =========================================================================

    def _new_address(self, prefix: str) -> str:
        return f"{prefix}_{next(self._counter):08x}{uuid.uuid4().hex[:8]}"

    def register_resource(self, state: ResourceState) -> str:
        address = self._new_address("resource")
        state.address = address
        self._state.resources[address] = state
        return address

    def resource_state(self, resource_address: str) -> ResourceState:
        state = self._state.resources.get(resource_address)
        if state is None:
            raise NotFoundError("Resource", resource_address)
        return state

    def resource_addresses(self) -> list[str]:
        return list(self._state.resources)

    def create_vault(self, resource_address: str, owner_component: Optional[str]) -> str:
        vault_id = self._new_address("vault")
        self._state.vaults[vault_id] = VaultState(
            vault_id=vault_id,
            resource_address=resource_address,
            owner_component=owner_component,
        )
        return vault_id

    def vault_state(self, vault_id: str) -> VaultState:
        state = self._state.vaults.get(vault_id)
        if state is None:
            raise NotFoundError("Vault", vault_id)
        return state

    def allocate_component_address(self) -> str:
        return self._new_address("component")

    def create_component(
        self,
        instance: Any,
        access_rules: AccessRules,
        owner_rule: Optional[AccessRule] = None,
        address: Optional[str] = None,
    ) -> str:
        address = address or self.allocate_component_address()
        if address in self._state.components:
            raise IssuerError(f"Component {address} already exists", error_code="CONFLICT")
        self._state.components[address] = ComponentRecord(address, instance, access_rules, owner_rule)
        self.last_component_address = address
        logger.info("Created component %s (%s)", address, type(instance).__name__)
        return address

    def _component_record(self, address: str) -> ComponentRecord:
        record = self._state.components.get(address)
        if record is None:
            raise NotFoundError("Component", address)
        return record

    def set_component_access_rules(self, address: str, access_rules: AccessRules) -> None:
        """
        Replace a component's method rules.

        Raises:
            AuthorizationError: If the caller does not satisfy the owner rule
        """
        ctx = current_context()
        record = self._component_record(address)
        owner_rule = record.owner_rule or DenyAll()
        if not owner_rule.evaluate(ctx.scope):
            raise AuthorizationError(
                f"Only the owner of {address} can change its access rules",
                details={"component_address": address, "rule": str(owner_rule)},
            )
        record.access_rules = access_rules
        logger.info("Updated access rules of component %s", address)

    def get_component(self, address: str) -> Any:
        return self._component_record(address).instance

    def component_state(self, address: str) -> Any:
        record = self._state.components.get(address)
        return record.instance if record else None

    def find_output(self, resource_address: str, utxo_id: UtxoId) -> Tuple[VaultState, ConfidentialOutput]:
        for vault in self._state.vaults.values():
            if vault.resource_address == resource_address and utxo_id in vault.outputs:
                return vault, vault.outputs[utxo_id]
        raise NotFoundError("UTXO", str(utxo_id))

    def total_supply(self, resource_address: str):
        return self.resource_state(resource_address).total_supply

    def advance_epoch(self, epochs: int = 1) -> int:
        self.current_epoch += epochs
        return self.current_epoch

    # =========================================================================
    # Credentials
    # =========================================================================

    def register_bucket(self, bucket: Bucket) -> None:
        self._state.live_buckets[bucket.bucket_id] = (
            bucket.resource_address, bucket.non_fungible_ids, bucket.amount,
        )

    def retire_bucket(self, bucket: Bucket) -> None:
        """
        Remove a bucket from the spendable set.

        Raises:
            AuthorizationError: If the engine never issued the bucket, or it
                was issued by a transaction that rolled back
        """
        if self._state.live_buckets.pop(bucket.bucket_id, None) is None:
            raise AuthorizationError(
                "Bucket was not issued by this engine",
                details={"resource_address": bucket.resource_address},
            )

    def verify_proof(self, proof: Proof) -> None:
        """
        Accept only proofs the engine issued that are still backed.

        A bucket proof is backed while its bucket is unspent. A vault proof
        is backed until the transaction that created it ends.

        Raises:
            AuthorizationError: If the proof is forged or expired
        """
        if proof.source_bucket_id is not None:
            held = self._state.live_buckets.get(proof.source_bucket_id)
            if held == (proof.resource_address, tuple(proof.get_non_fungibles()), proof.amount):
                return
        else:
            ctx = get_context()
            if ctx is not None and any(open_proof is proof for open_proof in ctx.open_proofs):
                return
        raise AuthorizationError(
            "Proof was not issued by this engine or has expired",
            details={"resource_address": proof.resource_address},
        )

    # =========================================================================
    # Hooks and events
    # =========================================================================

    def invoke_auth_hook(
        self,
        resource: ResourceState,
        action: ResourceAuthAction,
        owner_component: Optional[str],
    ) -> None:
        """Run a resource's authorization hook, if it has one."""
        if resource.auth_hook is None:
            return
        hook_component, method = resource.auth_hook
        # The hook component manages its own vaults through its own methods
        if owner_component is not None and owner_component == hook_component:
            return
        ctx = current_context()
        record = self._component_record(hook_component)
        record.access_rules.check(method, ctx.scope)
        caller = AuthHookCaller(
            component_address=owner_component,
            component_state=self.component_state(owner_component) if owner_component else None,
        )
        with acting_as(hook_component):
            getattr(record.instance, method)(action, caller)

    def emit_event(self, name: str, payload: Dict[str, Any]) -> Event:
        ctx = current_context()
        event = Event(
            name=name,
            payload={key: str(value) for key, value in payload.items()},
            component_address=ctx.component_address,
            tx_id=ctx.tx_id,
        )
        ctx.events.append(event)
        return event

    # =========================================================================
    # Execution
    # =========================================================================

    @contextmanager
    def transaction(
        self,
        signer_public_key: str = "",
        proofs: Iterable[Proof] = (),
    ) -> Iterator[Transaction]:
        """
        Open one atomic transaction.

        Raises:
            IssuerError: If a transaction is already open in this context
        """
        with self._lock:
            if get_context() is not None:
                raise IssuerError("Nested transactions are not supported", error_code="NESTED_TRANSACTION")
            proofs = list(proofs)
            for proof in proofs:
                self.verify_proof(proof)
            ctx = CallContext(
                engine=self,
                tx_id=f"tx_{uuid.uuid4().hex[:16]}",
                scope=AuthScope.from_proofs(proofs, signer_public_key or None),
                signer_public_key=signer_public_key,
            )
            snapshot = copy.deepcopy(self._state)
            last_component_address = self.last_component_address
            token = set_context(ctx)
            try:
                with LogContext(correlation_id=ctx.tx_id):
                    yield Transaction(self, ctx)
            except Exception as e:
                self._rollback(snapshot, ctx)
                self.last_component_address = last_component_address
                logger.warning("Transaction %s rolled back: %s", ctx.tx_id, e)
                raise
            else:
                self._release_proofs(ctx)
                self.events.extend(ctx.events)
                logger.debug("Transaction %s committed with %d events", ctx.tx_id, len(ctx.events))
            finally:
                reset_context(token)

    def call_method(
        self,
        address: str,
        method: str,
        *args: Any,
        proofs: Iterable[Proof] = (),
        signer_public_key: str = "",
        **kwargs: Any,
    ) -> Any:
        """Run a single component method as its own transaction."""
        with self.transaction(signer_public_key=signer_public_key, proofs=proofs) as tx:
            return tx.call_method(address, method, *args, **kwargs)

    def call_function(
        self,
        function: Callable[..., Any],
        *args: Any,
        proofs: Iterable[Proof] = (),
        signer_public_key: str = "",
        **kwargs: Any,
    ) -> Any:
        """Run a static (component-less) function as its own transaction."""
        with self.transaction(signer_public_key=signer_public_key, proofs=proofs) as tx:
            return tx.call_function(function, *args, **kwargs)

    def call_component(self, address: str, method: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke a component method inside the open transaction."""
        ctx = current_context()
        record = self._component_record(address)
        target = getattr(record.instance, method, None)
        if method.startswith("_") or not callable(target):
            raise NotFoundError("Method", f"{address}.{method}")
        record.access_rules.check(method, ctx.scope)
        with acting_as(address), LogContext(component=address):
            return target(*args, **kwargs)

    def _rollback(self, snapshot: EngineState, ctx: CallContext) -> None:
        # Keep component object identity stable for callers holding references
        for address, record in snapshot.components.items():
            live = self._state.components.get(address)
            if live is not None:
                live.instance.__dict__.clear()
                live.instance.__dict__.update(record.instance.__dict__)
                record.instance = live.instance
        self._state = snapshot
        for bucket in ctx.consumed_buckets:
            bucket._consumed = False
        ctx.events.clear()

    def _release_proofs(self, ctx: CallContext) -> None:
        for proof in ctx.open_proofs:
            if proof.source_vault_id and proof.source_vault_id in self._state.vaults:
                unlock_proof(self._state.vaults[proof.source_vault_id], proof)
        ctx.open_proofs.clear()
