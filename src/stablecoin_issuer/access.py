"""Declarative access rules for components and resources.

Access is expressed as predicates over the credentials a caller presents,
not as roles attached to the caller:

  - **AuthScope**: what the caller proved it holds for this call (resource
    addresses and specific badge ids)
  - **AccessRule**: predicate evaluated against an AuthScope
  - **AccessRules**: method name → rule table with a default fallback
  - **ResourceAccessRules**: resource action → rule table

Example:

    require_admin = RequireResource(admin_resource)
    rules = (
        AccessRules()
        .add_method_rule("total_supply", AllowAll())
        .default(require_admin)
    )
    rules.check("increase_supply", scope)  # raises AuthorizationError
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .exceptions import AuthorizationError


@dataclass(frozen=True)
class AuthScope:
    """Credentials presented for one call."""

    resources: FrozenSet[str] = frozenset()
    non_fungibles: FrozenSet[Tuple[str, str]] = frozenset()
    signer_public_key: Optional[str] = None

    @classmethod
    def empty(cls) -> "AuthScope":
        return cls()

    @classmethod
    def from_proofs(cls, proofs: Iterable, signer_public_key: Optional[str] = None) -> "AuthScope":
        scope = cls(signer_public_key=signer_public_key)
        for proof in proofs:
            scope = scope.with_proof(proof)
        return scope

    def with_proof(self, proof) -> "AuthScope":
        non_fungibles = {(proof.resource_address, nf_id) for nf_id in proof.get_non_fungibles()}
        return AuthScope(
            resources=self.resources | {proof.resource_address},
            non_fungibles=self.non_fungibles | non_fungibles,
            signer_public_key=self.signer_public_key,
        )

    def holds_resource(self, resource_address: str) -> bool:
        return resource_address in self.resources

    def holds_non_fungible(self, resource_address: str, non_fungible_id: str) -> bool:
        return (resource_address, non_fungible_id) in self.non_fungibles


class AccessRule:
    """Base predicate."""

    def evaluate(self, scope: AuthScope) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class AllowAll(AccessRule):
    def evaluate(self, scope: AuthScope) -> bool:
        return True

    def __str__(self) -> str:
        return "allow_all"


@dataclass(frozen=True)
class DenyAll(AccessRule):
    def evaluate(self, scope: AuthScope) -> bool:
        return False

    def __str__(self) -> str:
        return "deny_all"


@dataclass(frozen=True)
class RequireResource(AccessRule):
    """Caller must prove any amount of the resource."""

    resource_address: str

    def evaluate(self, scope: AuthScope) -> bool:
        return scope.holds_resource(self.resource_address)

    def __str__(self) -> str:
        return f"resource({self.resource_address})"


@dataclass(frozen=True)
class RequireNonFungible(AccessRule):
    """Caller must prove one specific badge."""

    resource_address: str
    non_fungible_id: str

    def evaluate(self, scope: AuthScope) -> bool:
        return scope.holds_non_fungible(self.resource_address, self.non_fungible_id)

    def __str__(self) -> str:
        return f"non_fungible({self.resource_address}:{self.non_fungible_id})"


@dataclass(frozen=True)
class RequireSigner(AccessRule):
    """Transaction must be signed by this key."""

    public_key: str

    def evaluate(self, scope: AuthScope) -> bool:
        return scope.signer_public_key is not None and scope.signer_public_key == self.public_key

    def __str__(self) -> str:
        return f"signer({self.public_key})"


@dataclass(frozen=True)
class AnyOf(AccessRule):
    rules: Tuple[AccessRule, ...]

    def __init__(self, *rules: AccessRule):
        object.__setattr__(self, "rules", tuple(rules))

    def evaluate(self, scope: AuthScope) -> bool:
        return any(rule.evaluate(scope) for rule in self.rules)

    def __str__(self) -> str:
        return f"any_of({', '.join(str(r) for r in self.rules)})"


@dataclass(frozen=True)
class AllOf(AccessRule):
    rules: Tuple[AccessRule, ...]

    def __init__(self, *rules: AccessRule):
        object.__setattr__(self, "rules", tuple(rules))

    def evaluate(self, scope: AuthScope) -> bool:
        return all(rule.evaluate(scope) for rule in self.rules)

    def __str__(self) -> str:
        return f"all_of({', '.join(str(r) for r in self.rules)})"


@dataclass
class AccessRules:
    """Method-name keyed rule table for a component."""

    method_rules: Dict[str, AccessRule] = field(default_factory=dict)
    default_rule: AccessRule = field(default_factory=DenyAll)

    def add_method_rule(self, method: str, rule: AccessRule) -> "AccessRules":
        self.method_rules[method] = rule
        return self

    def default(self, rule: AccessRule) -> "AccessRules":
        self.default_rule = rule
        return self

    def get(self, method: str) -> AccessRule:
        return self.method_rules.get(method, self.default_rule)

    def check(self, method: str, scope: AuthScope) -> None:
        """
        Enforce the rule for a method.

        Raises:
            AuthorizationError: If the scope does not satisfy the rule
        """
        rule = self.get(method)
        if not rule.evaluate(scope):
            raise AuthorizationError(
                f"Access denied for method '{method}': requires {rule}",
                details={"method": method, "rule": str(rule)},
            )


class ResourceAuthAction(str, Enum):
    """Actions a resource can gate."""

    MINT = "mint"
    BURN = "burn"
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    RECALL = "recall"
    UPDATE_NON_FUNGIBLE_DATA = "update_non_fungible_data"


@dataclass
class ResourceAccessRules:
    """Action keyed rule table for a resource.

    Unset deposit and withdraw actions are open; unset privileged actions
    (mint, burn, recall, data updates) fall back to the owner rule.
    """

    rules: Dict[ResourceAuthAction, AccessRule] = field(default_factory=dict)
    owner_rule: AccessRule = field(default_factory=DenyAll)

    def mintable(self, rule: AccessRule) -> "ResourceAccessRules":
        self.rules[ResourceAuthAction.MINT] = rule
        return self

    def burnable(self, rule: AccessRule) -> "ResourceAccessRules":
        self.rules[ResourceAuthAction.BURN] = rule
        return self

    def depositable(self, rule: AccessRule) -> "ResourceAccessRules":
        self.rules[ResourceAuthAction.DEPOSIT] = rule
        return self

    def withdrawable(self, rule: AccessRule) -> "ResourceAccessRules":
        self.rules[ResourceAuthAction.WITHDRAW] = rule
        return self

    def recallable(self, rule: AccessRule) -> "ResourceAccessRules":
        self.rules[ResourceAuthAction.RECALL] = rule
        return self

    def update_non_fungible_data(self, rule: AccessRule) -> "ResourceAccessRules":
        self.rules[ResourceAuthAction.UPDATE_NON_FUNGIBLE_DATA] = rule
        return self

    def with_owner_rule(self, rule: AccessRule) -> "ResourceAccessRules":
        self.owner_rule = rule
        return self

    def get(self, action: ResourceAuthAction) -> AccessRule:
        if action in (ResourceAuthAction.DEPOSIT, ResourceAuthAction.WITHDRAW):
            return self.rules.get(action, AllowAll())
        return self.rules.get(action, self.owner_rule)

    def check(self, action: ResourceAuthAction, scope: AuthScope, resource_address: Optional[str] = None) -> None:
        rule = self.get(action)
        if not rule.evaluate(scope):
            raise AuthorizationError(
                f"Resource action '{action.value}' denied: requires {rule}",
                details={"action": action.value, "resource_address": resource_address or "", "rule": str(rule)},
            )
