"""Resource substrate: resources, vaults, buckets and proofs.

Model:
- **ResourceManager**: handle to a resource (fungible, non-fungible or
  confidential) with its supply, metadata and access rules
- **Vault**: handle to a container of one resource, owned by one component
- **Bucket**: in-flight quantity of a resource; linear, consumed exactly once
- **Proof**: attestation of holding a resource without moving it

Vault and ResourceManager are handles: their data lives in the engine, so an
engine rollback restores it. Every operation resolves the active call context
to authorize against the caller's credentials.

A component acting on a resource it owns (created) is authorized for every
action. Any other caller is checked against the resource's rules.
"""
from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .access import AccessRule, ResourceAccessRules, ResourceAuthAction
from .amount import Amount, to_amount, validate_amount
from .confidential import (
    ConfidentialOutput,
    ConfidentialWithdrawProof,
    StealthValueProof,
    UtxoId,
)
from .context import CallContext, current_context
from .exceptions import (
    AuthorizationError,
    DuplicateNonFungibleError,
    FrozenUtxoError,
    InsufficientBalanceError,
    NotFoundError,
    ResourceError,
    ResourceMismatchError,
)

logger = logging.getLogger(__name__)


def non_fungible_id_from_u64(value: int) -> str:
    return f"u64_{value}"


def random_non_fungible_id() -> str:
    return f"uuid_{uuid.uuid4().hex}"


class ResourceType(str, Enum):
    """Kind of resource."""
    FUNGIBLE = "fungible"
    NON_FUNGIBLE = "non_fungible"
    CONFIDENTIAL = "confidential"


@dataclass
class NonFungibleRecord:
    """Stored badge data."""
    non_fungible_id: str
    data: Any
    mutable_data: Any
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class ResourceState:
    address: str
    resource_type: ResourceType
    access_rules: ResourceAccessRules
    token_symbol: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)
    view_key: Optional[bytes] = None
    auth_hook: Optional[Tuple[str, str]] = None
    owner_component: Optional[str] = None
    total_supply: Amount = field(default_factory=Amount.zero)
    non_fungibles: Dict[str, NonFungibleRecord] = field(default_factory=dict)
    frozen_utxos: Set[UtxoId] = field(default_factory=set)


@dataclass
class VaultState:
    vault_id: str
    resource_address: str
    owner_component: Optional[str]
    balance: Amount = field(default_factory=Amount.zero)
    locked_balance: Amount = field(default_factory=Amount.zero)
    non_fungible_ids: Set[str] = field(default_factory=set)
    locked_non_fungible_ids: Set[str] = field(default_factory=set)
    outputs: Dict[UtxoId, ConfidentialOutput] = field(default_factory=dict)


def _authorize(ctx: CallContext, state: ResourceState, action: ResourceAuthAction) -> None:
    if ctx.component_address is not None and ctx.component_address == state.owner_component:
        return
    state.access_rules.check(action, ctx.scope, state.address)


# =============================================================================
# Buckets and proofs
# =============================================================================

class Bucket:
    """
    In-flight quantity of one resource.

    A bucket must end up deposited or burned; once either happens it is
    consumed and any further use raises ResourceError. Only buckets issued
    by the engine can be spent; see issue_bucket.
    """

    def __init__(
        self,
        resource_address: str,
        amount: Amount | int = 0,
        non_fungible_ids: Iterable[str] = (),
        outputs: Iterable[ConfidentialOutput] = (),
    ) -> None:
        self.resource_address = resource_address
        self._amount = to_amount(amount)
        self._non_fungible_ids = tuple(sorted(non_fungible_ids))
        self._outputs = tuple(outputs)
        self._consumed = False
        self.bucket_id = f"bucket_{uuid.uuid4().hex}"

    @property
    def amount(self) -> Amount:
        """Revealed amount, or badge count for non-fungible buckets."""
        if self._non_fungible_ids:
            return Amount(len(self._non_fungible_ids))
        return self._amount

    @property
    def non_fungible_ids(self) -> Tuple[str, ...]:
        return self._non_fungible_ids

    @property
    def outputs(self) -> Tuple[ConfidentialOutput, ...]:
        return self._outputs

    @property
    def is_consumed(self) -> bool:
        return self._consumed

    def is_empty(self) -> bool:
        return self._amount.is_zero() and not self._non_fungible_ids and not self._outputs

    def take(self) -> "Bucket":
        """Mark this bucket consumed and return it for the consumer."""
        if self._consumed:
            raise ResourceError(
                "Bucket has already been consumed",
                details={"resource_address": self.resource_address},
            )
        ctx = current_context()
        ctx.engine.retire_bucket(self)
        self._consumed = True
        ctx.consumed_buckets.append(self)
        return self

    def burn(self) -> None:
        ResourceManager(self.resource_address).burn(self)

    def create_proof(self) -> "Proof":
        if self._consumed:
            raise ResourceError(
                "Cannot create a proof from a consumed bucket",
                details={"resource_address": self.resource_address},
            )
        return Proof(
            self.resource_address, self._non_fungible_ids, self.amount,
            source_bucket_id=self.bucket_id,
        )

    @classmethod
    def empty(cls, resource_address: str) -> "Bucket":
        return issue_bucket(resource_address)

    def __repr__(self) -> str:
        return (
            f"Bucket(resource={self.resource_address}, amount={self.amount}, "
            f"non_fungibles={len(self._non_fungible_ids)}, outputs={len(self._outputs)})"
        )


class Proof:
    """Attestation that the caller holds some of a resource."""

    def __init__(
        self,
        resource_address: str,
        non_fungible_ids: Iterable[str] = (),
        amount: Amount | int = 0,
        source_vault_id: Optional[str] = None,
        source_bucket_id: Optional[str] = None,
    ) -> None:
        self.resource_address = resource_address
        self._non_fungible_ids = tuple(non_fungible_ids)
        self.amount = to_amount(amount)
        self.source_vault_id = source_vault_id
        self.source_bucket_id = source_bucket_id

    def assert_resource(self, resource_address: str) -> None:
        """Check the proof is genuine and of the given resource."""
        current_context().engine.verify_proof(self)
        if self.resource_address != resource_address:
            raise ResourceMismatchError(
                "Proof is not of the expected resource",
                expected=resource_address,
                actual=self.resource_address,
            )

    def get_non_fungibles(self) -> List[str]:
        return list(self._non_fungible_ids)

    def __repr__(self) -> str:
        return f"Proof(resource={self.resource_address}, non_fungibles={list(self._non_fungible_ids)})"


def issue_bucket(
    resource_address: str,
    amount: Amount | int = 0,
    non_fungible_ids: Iterable[str] = (),
    outputs: Iterable[ConfidentialOutput] = (),
) -> Bucket:
    """Create a bucket and register it with the engine as spendable."""
    bucket = Bucket(resource_address, amount, non_fungible_ids, outputs)
    current_context().engine.register_bucket(bucket)
    return bucket


# =============================================================================
# Non-fungible view
# =============================================================================

@dataclass(frozen=True)
class NonFungible:
    """Read handle to one badge."""

    resource_address: str
    non_fungible_id: str

    def _record(self) -> NonFungibleRecord:
        return ResourceManager(self.resource_address)._non_fungible_record(self.non_fungible_id)

    def get_data(self) -> Any:
        return self._record().data

    def get_mutable_data(self) -> Any:
        return self._record().mutable_data

    def get_metadata(self) -> Dict[str, str]:
        return dict(self._record().metadata)

    def set_mutable_data(self, mutable_data: Any) -> None:
        ResourceManager(self.resource_address).update_non_fungible_data(self.non_fungible_id, mutable_data)


# =============================================================================
# Resource manager
# =============================================================================

@dataclass(frozen=True)
class ResourceManager:
    """Handle to a resource registered in the engine."""

    resource_address: str

    @classmethod
    def get(cls, resource_address: str) -> "ResourceManager":
        current_context().engine.resource_state(resource_address)
        return cls(resource_address)

    def _state(self) -> ResourceState:
        return current_context().engine.resource_state(self.resource_address)

    @property
    def resource_type(self) -> ResourceType:
        return self._state().resource_type

    def total_supply(self) -> Amount:
        return self._state().total_supply

    def token_symbol(self) -> str:
        return self._state().token_symbol

    def metadata(self) -> Dict[str, str]:
        return dict(self._state().metadata)

    def mint_fungible(self, amount: Amount) -> Bucket:
        return self._mint_amount(amount, ResourceType.FUNGIBLE)

    def mint_confidential(self, amount: Amount) -> Bucket:
        """Mint revealed units of a confidential resource."""
        return self._mint_amount(amount, ResourceType.CONFIDENTIAL)

    def _mint_amount(self, amount: Amount, expected: ResourceType) -> Bucket:
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        if state.resource_type is not expected:
            raise ResourceError(
                f"Cannot mint {expected.value} units of a {state.resource_type.value} resource",
                details={"resource_address": self.resource_address},
            )
        validate_amount(amount, allow_zero=True)
        _authorize(ctx, state, ResourceAuthAction.MINT)
        state.total_supply = state.total_supply + amount
        logger.info("Minted %s of %s", amount, self.resource_address)
        return issue_bucket(self.resource_address, amount)

    def mint_non_fungible(
        self,
        non_fungible_id: str,
        data: Any = None,
        mutable_data: Any = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Bucket:
        """
        Mint one badge.

        Raises:
            DuplicateNonFungibleError: If the id was minted before
        """
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        if state.resource_type is not ResourceType.NON_FUNGIBLE:
            raise ResourceError(
                "Cannot mint a non-fungible of a fungible resource",
                details={"resource_address": self.resource_address},
            )
        _authorize(ctx, state, ResourceAuthAction.MINT)
        if non_fungible_id in state.non_fungibles:
            raise DuplicateNonFungibleError(self.resource_address, non_fungible_id)
        state.non_fungibles[non_fungible_id] = NonFungibleRecord(
            non_fungible_id=non_fungible_id,
            data=data,
            mutable_data=mutable_data,
            metadata=dict(metadata or {}),
        )
        state.total_supply = state.total_supply + 1
        logger.info("Minted non-fungible %s of %s", non_fungible_id, self.resource_address)
        return issue_bucket(self.resource_address, non_fungible_ids=[non_fungible_id])

    def _non_fungible_record(self, non_fungible_id: str) -> NonFungibleRecord:
        record = self._state().non_fungibles.get(non_fungible_id)
        if record is None:
            raise NotFoundError("NonFungible", non_fungible_id)
        return record

    def get_non_fungible(self, non_fungible_id: str) -> NonFungible:
        self._non_fungible_record(non_fungible_id)
        return NonFungible(self.resource_address, non_fungible_id)

    def update_non_fungible_data(self, non_fungible_id: str, mutable_data: Any) -> None:
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        _authorize(ctx, state, ResourceAuthAction.UPDATE_NON_FUNGIBLE_DATA)
        self._non_fungible_record(non_fungible_id).mutable_data = mutable_data

    def burn(self, bucket: Bucket) -> None:
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        if bucket.resource_address != self.resource_address:
            raise ResourceMismatchError(
                "Bucket resource does not match burn target",
                expected=self.resource_address,
                actual=bucket.resource_address,
            )
        _authorize(ctx, state, ResourceAuthAction.BURN)
        bucket.take()
        burned = bucket.amount + sum((int(o._sealed_value) for o in bucket.outputs), 0)
        state.total_supply = state.total_supply - burned
        for nf_id in bucket.non_fungible_ids:
            state.non_fungibles.pop(nf_id, None)
        logger.info("Burned %s of %s", burned, self.resource_address)

    def recall_fungible_amount(self, vault_id: str, amount: Amount) -> Bucket:
        """Force-withdraw revealed units from any vault of this resource."""
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        _authorize(ctx, state, ResourceAuthAction.RECALL)
        vault = ctx.engine.vault_state(vault_id)
        self._assert_vault_resource(vault)
        validate_amount(amount)
        if vault.balance < amount:
            raise InsufficientBalanceError(vault_id, str(amount), str(vault.balance))
        vault.balance = vault.balance - amount
        logger.warning("Recalled %s of %s from vault %s", amount, self.resource_address, vault_id)
        return issue_bucket(self.resource_address, amount)

    def recall_non_fungible(self, vault_id: str, non_fungible_id: str) -> Bucket:
        """Force-withdraw one badge from any vault of this resource."""
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        _authorize(ctx, state, ResourceAuthAction.RECALL)
        vault = ctx.engine.vault_state(vault_id)
        self._assert_vault_resource(vault)
        if non_fungible_id in vault.non_fungible_ids:
            vault.non_fungible_ids.discard(non_fungible_id)
        elif non_fungible_id in vault.locked_non_fungible_ids:
            vault.locked_non_fungible_ids.discard(non_fungible_id)
        else:
            raise NotFoundError("NonFungible", f"{non_fungible_id} in vault {vault_id}")
        _sync_non_fungible_balance(vault)
        logger.warning("Recalled non-fungible %s from vault %s", non_fungible_id, vault_id)
        return issue_bucket(self.resource_address, non_fungible_ids=[non_fungible_id])

    def burn_utxo(self, utxo_id: UtxoId, value_proof: StealthValueProof) -> Amount:
        """Burn one confidential output after its value proof is certified."""
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        _authorize(ctx, state, ResourceAuthAction.BURN)
        if utxo_id in state.frozen_utxos:
            raise FrozenUtxoError(str(utxo_id))
        vault, output = ctx.engine.find_output(self.resource_address, utxo_id)
        value = ctx.engine.proof_verifier.verify_value(output, value_proof)
        del vault.outputs[utxo_id]
        state.total_supply = state.total_supply - value
        logger.info("Burned confidential output %s of %s", utxo_id, self.resource_address)
        return value

    def freeze_utxos(self, utxos: Iterable[UtxoId]) -> None:
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        # Freezing is a recall-class override
        _authorize(ctx, state, ResourceAuthAction.RECALL)
        for utxo_id in utxos:
            ctx.engine.find_output(self.resource_address, utxo_id)
            state.frozen_utxos.add(utxo_id)

    def unfreeze_utxos(self, utxos: Iterable[UtxoId]) -> None:
        ctx = current_context()
        state = ctx.engine.resource_state(self.resource_address)
        _authorize(ctx, state, ResourceAuthAction.RECALL)
        for utxo_id in utxos:
            state.frozen_utxos.discard(utxo_id)

    def is_frozen(self, utxo_id: UtxoId) -> bool:
        return utxo_id in self._state().frozen_utxos

    def _assert_vault_resource(self, vault: VaultState) -> None:
        if vault.resource_address != self.resource_address:
            raise ResourceMismatchError(
                "Vault does not hold this resource",
                expected=self.resource_address,
                actual=vault.resource_address,
            )


def _sync_non_fungible_balance(vault: VaultState) -> None:
    vault.balance = Amount(len(vault.non_fungible_ids))
    vault.locked_balance = Amount(len(vault.locked_non_fungible_ids))


# =============================================================================
# Vaults
# =============================================================================

@dataclass(frozen=True)
class Vault:
    """Handle to a vault owned by a component."""

    vault_id: str
    resource_address: str

    @classmethod
    def new_empty(cls, resource_address: str) -> "Vault":
        ctx = current_context()
        ctx.engine.resource_state(resource_address)
        vault_id = ctx.engine.create_vault(resource_address, owner_component=ctx.component_address)
        return cls(vault_id, resource_address)

    @classmethod
    def from_bucket(cls, bucket: Bucket) -> "Vault":
        vault = cls.new_empty(bucket.resource_address)
        vault.deposit(bucket)
        return vault

    def _state(self) -> VaultState:
        return current_context().engine.vault_state(self.vault_id)

    def balance(self) -> Amount:
        return self._state().balance

    def locked_balance(self) -> Amount:
        return self._state().locked_balance

    def non_fungible_ids(self) -> List[str]:
        state = self._state()
        return sorted(state.non_fungible_ids | state.locked_non_fungible_ids)

    def utxos(self) -> List[UtxoId]:
        return list(self._state().outputs)

    def _check_owner(self, ctx: CallContext, state: VaultState) -> None:
        if state.owner_component != ctx.component_address:
            raise AuthorizationError(
                f"Vault {self.vault_id} is not owned by the calling component",
                details={"vault_id": self.vault_id, "caller": ctx.component_address or ""},
            )

    def deposit(self, bucket: Bucket) -> None:
        """
        Deposit a bucket.

        Deposits of a hooked resource into a vault owned by any component
        other than the hook's own are passed to the authorization hook.
        """
        ctx = current_context()
        state = ctx.engine.vault_state(self.vault_id)
        if bucket.resource_address != state.resource_address:
            raise ResourceMismatchError(
                "Bucket resource does not match vault resource",
                expected=state.resource_address,
                actual=bucket.resource_address,
            )
        resource = ctx.engine.resource_state(state.resource_address)
        _authorize(ctx, resource, ResourceAuthAction.DEPOSIT)
        ctx.engine.invoke_auth_hook(resource, ResourceAuthAction.DEPOSIT, state.owner_component)
        bucket.take()
        if resource.resource_type is ResourceType.NON_FUNGIBLE:
            state.non_fungible_ids.update(bucket.non_fungible_ids)
            _sync_non_fungible_balance(state)
        else:
            state.balance = state.balance + bucket.amount
            for output in bucket.outputs:
                state.outputs[output.utxo_id] = output

    def withdraw(self, amount: Amount) -> Bucket:
        ctx = current_context()
        state = ctx.engine.vault_state(self.vault_id)
        resource = ctx.engine.resource_state(state.resource_address)
        if resource.resource_type is ResourceType.NON_FUNGIBLE:
            return self._withdraw_non_fungibles(ctx, state, resource, sorted(state.non_fungible_ids)[: int(amount)], amount)
        self._check_owner(ctx, state)
        validate_amount(amount)
        _authorize(ctx, resource, ResourceAuthAction.WITHDRAW)
        ctx.engine.invoke_auth_hook(resource, ResourceAuthAction.WITHDRAW, state.owner_component)
        if state.balance < amount:
            raise InsufficientBalanceError(self.vault_id, str(amount), str(state.balance))
        state.balance = state.balance - amount
        return issue_bucket(state.resource_address, amount)

    def withdraw_non_fungible(self, non_fungible_id: str) -> Bucket:
        ctx = current_context()
        state = ctx.engine.vault_state(self.vault_id)
        resource = ctx.engine.resource_state(state.resource_address)
        return self._withdraw_non_fungibles(ctx, state, resource, [non_fungible_id], Amount(1))

    def _withdraw_non_fungibles(
        self,
        ctx: CallContext,
        state: VaultState,
        resource: ResourceState,
        ids: List[str],
        requested: Amount,
    ) -> Bucket:
        self._check_owner(ctx, state)
        _authorize(ctx, resource, ResourceAuthAction.WITHDRAW)
        if len(ids) < int(requested) or not all(i in state.non_fungible_ids for i in ids):
            raise InsufficientBalanceError(self.vault_id, str(requested), str(state.balance))
        for nf_id in ids:
            state.non_fungible_ids.discard(nf_id)
        _sync_non_fungible_balance(state)
        return issue_bucket(state.resource_address, non_fungible_ids=ids)

    def withdraw_confidential(self, proof: ConfidentialWithdrawProof) -> Bucket:
        """
        Spend confidential outputs.

        The revealed part of the spend is returned in the bucket together with
        the proof's change outputs; only the certified revealed delta is ever
        treated as a plain amount.
        """
        ctx = current_context()
        state = ctx.engine.vault_state(self.vault_id)
        resource = ctx.engine.resource_state(state.resource_address)
        self._check_owner(ctx, state)
        _authorize(ctx, resource, ResourceAuthAction.WITHDRAW)
        ctx.engine.invoke_auth_hook(resource, ResourceAuthAction.WITHDRAW, state.owner_component)
        inputs = []
        for utxo_id in proof.inputs:
            if utxo_id in resource.frozen_utxos:
                raise FrozenUtxoError(str(utxo_id))
            output = state.outputs.get(utxo_id)
            if output is None:
                raise NotFoundError("UTXO", str(utxo_id))
            inputs.append(output)
        revealed = ctx.engine.proof_verifier.verify_withdraw(proof, tuple(inputs))
        for utxo_id in proof.inputs:
            del state.outputs[utxo_id]
        return issue_bucket(state.resource_address, revealed, outputs=proof.change_outputs)

    def blind(self, amount: Amount) -> UtxoId:
        """Convert revealed balance into one confidential output held here."""
        ctx = current_context()
        state = ctx.engine.vault_state(self.vault_id)
        resource = ctx.engine.resource_state(state.resource_address)
        if resource.resource_type is not ResourceType.CONFIDENTIAL:
            raise ResourceError("Only confidential resources can hold outputs")
        self._check_owner(ctx, state)
        validate_amount(amount)
        if state.balance < amount:
            raise InsufficientBalanceError(self.vault_id, str(amount), str(state.balance))
        output = ConfidentialOutput.create(amount, view_key=resource.view_key)
        state.balance = state.balance - amount
        state.outputs[output.utxo_id] = output
        return output.utxo_id

    def create_proof(self) -> Proof:
        """
        Prove the contents of this vault for the rest of the call.

        Proved badges are locked until the call ends.
        """
        ctx = current_context()
        state = ctx.engine.vault_state(self.vault_id)
        self._check_owner(ctx, state)
        ids = sorted(state.non_fungible_ids)
        if not ids and state.balance.is_zero():
            raise ResourceError(f"Vault {self.vault_id} is empty, nothing to prove")
        state.locked_non_fungible_ids.update(ids)
        state.non_fungible_ids.difference_update(ids)
        if ids:
            _sync_non_fungible_balance(state)
        proof = Proof(state.resource_address, ids, Amount(len(ids)) if ids else state.balance, self.vault_id)
        ctx.open_proofs.append(proof)
        return proof


def unlock_proof(vault: VaultState, proof: Proof) -> None:
    """Release badges locked by a vault proof."""
    released = vault.locked_non_fungible_ids.intersection(proof.get_non_fungibles())
    vault.locked_non_fungible_ids.difference_update(released)
    vault.non_fungible_ids.update(released)
    _sync_non_fungible_balance(vault)


# =============================================================================
# Builder
# =============================================================================

class ResourceBuilder:
    """
    Fluent builder for new resources.

    Usage:
        bucket = (
            ResourceBuilder.fungible()
            .with_token_symbol("wUSDX")
            .mintable(require_admin)
            .initial_supply(Amount(1000))
        )
    """

    def __init__(self, resource_type: ResourceType) -> None:
        self._resource_type = resource_type
        self._rules = ResourceAccessRules()
        self._token_symbol = ""
        self._metadata: Dict[str, str] = {}
        self._view_key: Optional[bytes] = None
        self._auth_hook: Optional[Tuple[str, str]] = None
        self._owner_component: Optional[str] = None

    @classmethod
    def fungible(cls) -> "ResourceBuilder":
        return cls(ResourceType.FUNGIBLE)

    @classmethod
    def non_fungible(cls) -> "ResourceBuilder":
        return cls(ResourceType.NON_FUNGIBLE)

    @classmethod
    def confidential(cls) -> "ResourceBuilder":
        return cls(ResourceType.CONFIDENTIAL)

    def with_token_symbol(self, symbol: str) -> "ResourceBuilder":
        self._token_symbol = symbol
        return self

    def with_metadata(self, metadata: Dict[str, str]) -> "ResourceBuilder":
        self._metadata.update(metadata)
        return self

    def add_metadata(self, key: str, value: str) -> "ResourceBuilder":
        self._metadata[key] = value
        return self

    def with_view_key(self, view_key: Optional[bytes]) -> "ResourceBuilder":
        self._view_key = view_key
        return self

    def with_authorization_hook(self, component_address: str, method: str) -> "ResourceBuilder":
        self._auth_hook = (component_address, method)
        return self

    def with_owner_component(self, component_address: str) -> "ResourceBuilder":
        self._owner_component = component_address
        return self

    def with_owner_rule(self, rule: AccessRule) -> "ResourceBuilder":
        self._rules.with_owner_rule(rule)
        return self

    def mintable(self, rule: AccessRule) -> "ResourceBuilder":
        self._rules.mintable(rule)
        return self

    def burnable(self, rule: AccessRule) -> "ResourceBuilder":
        self._rules.burnable(rule)
        return self

    def depositable(self, rule: AccessRule) -> "ResourceBuilder":
        self._rules.depositable(rule)
        return self

    def withdrawable(self, rule: AccessRule) -> "ResourceBuilder":
        self._rules.withdrawable(rule)
        return self

    def recallable(self, rule: AccessRule) -> "ResourceBuilder":
        self._rules.recallable(rule)
        return self

    def update_non_fungible_data(self, rule: AccessRule) -> "ResourceBuilder":
        self._rules.update_non_fungible_data(rule)
        return self

    def build(self) -> ResourceManager:
        ctx = current_context()
        owner = self._owner_component or ctx.component_address
        address = ctx.engine.register_resource(
            ResourceState(
                address="",
                resource_type=self._resource_type,
                access_rules=self._rules,
                token_symbol=self._token_symbol,
                metadata=dict(self._metadata),
                view_key=self._view_key,
                auth_hook=self._auth_hook,
                owner_component=owner,
            )
        )
        logger.info(
            "Created %s resource %s symbol=%s",
            self._resource_type.value, address, self._token_symbol or "-",
        )
        return ResourceManager(address)

    def initial_supply(self, amount: Amount) -> Bucket:
        """Create the resource with revealed initial supply."""
        validate_amount(amount, allow_zero=True)
        if self._resource_type is ResourceType.NON_FUNGIBLE:
            raise ResourceError("Use initial_non_fungibles for non-fungible resources")
        manager = self.build()
        state = current_context().engine.resource_state(manager.resource_address)
        state.total_supply = amount
        return issue_bucket(manager.resource_address, amount)

    def initial_non_fungibles(self, badges: Dict[str, Tuple[Any, Any]]) -> Bucket:
        """Create the resource together with its first badges."""
        if self._resource_type is not ResourceType.NON_FUNGIBLE:
            raise ResourceError("initial_non_fungibles requires a non-fungible resource")
        manager = self.build()
        state = current_context().engine.resource_state(manager.resource_address)
        for nf_id, (data, mutable_data) in badges.items():
            state.non_fungibles[nf_id] = NonFungibleRecord(nf_id, data, mutable_data)
        state.total_supply = Amount(len(badges))
        return issue_bucket(manager.resource_address, non_fungible_ids=list(badges))


@contextmanager
def acting_as(component_address: str) -> Iterator[None]:
    """Attribute vault and resource operations to a component for a block."""
    ctx = current_context()
    previous = ctx.component_address
    ctx.component_address = component_address
    try:
        yield
    finally:
        ctx.component_address = previous
