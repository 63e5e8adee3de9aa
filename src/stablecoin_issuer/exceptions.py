"""Exception hierarchy for the stable-coin issuer.

Every failure raised by the issuer or the engine substrate inherits from
IssuerError, so a caller can report any failed call uniformly:

    try:
        engine.call_method(issuer_address, "withdraw", Amount(10), proofs=[admin])
    except IssuerError as e:
        print(e.to_dict())

All exceptions have:
- error_code: Machine-readable error code (e.g., "POLICY_VIOLATION")
- message: Human-readable reason the call failed
- details: Optional additional context dictionary
- to_dict(): Convert to a serialisable failure reason

A failed call never leaves partial state behind: the engine rolls back before
the exception reaches the caller.
"""
from __future__ import annotations

from typing import Any, Optional


class IssuerError(Exception):
    """Base exception for all issuer errors."""

    error_code: str = "ISSUER_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Construction
# =============================================================================

class ConstructionError(IssuerError):
    """Instantiation parameters are invalid; nothing was created."""

    error_code = "CONSTRUCTION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        details = {"field": field} if field else None
        super().__init__(message, details=details)


# =============================================================================
# Authorization
# =============================================================================

class AuthorizationError(IssuerError):
    """Caller did not present the credentials an action requires."""

    error_code = "AUTHORIZATION_ERROR"


class UnauthorizedDepositError(AuthorizationError):
    """Deposit destination is not a recognised account."""

    error_code = "UNAUTHORIZED_DEPOSIT"


# =============================================================================
# Policy violations
# =============================================================================

class PolicyViolationError(IssuerError):
    """Call is well-formed but violates issuer policy."""

    error_code = "POLICY_VIOLATION"


class ExchangeLimitExceededError(PolicyViolationError):
    """Requested exchange amount is above the user's remaining limit."""

    error_code = "EXCHANGE_LIMIT_EXCEEDED"

    def __init__(self, user_id: str, limit: str, requested: str) -> None:
        super().__init__(
            "Exchange limit exceeded",
            details={"user_id": user_id, "limit": limit, "requested": requested},
        )


class InsufficientFeeFundsError(PolicyViolationError):
    """Fee is larger than the amount it is charged on."""

    error_code = "INSUFFICIENT_FEE_FUNDS"

    def __init__(self, amount: str, fee: str) -> None:
        super().__init__(
            "Insufficient funds to pay exchange fee",
            details={"amount": amount, "fee": fee},
        )


class IssuerPausedError(PolicyViolationError):
    """Issuer is paused and accepts no deposits."""

    error_code = "ISSUER_PAUSED"

    def __init__(self, message: str = "Token is paused") -> None:
        super().__init__(message)


# =============================================================================
# Resource errors
# =============================================================================

class ResourceError(IssuerError):
    """Base class for vault, bucket and resource failures."""

    error_code = "RESOURCE_ERROR"


class InsufficientBalanceError(ResourceError):
    """Vault holds less than the requested amount."""

    error_code = "INSUFFICIENT_BALANCE"

    def __init__(self, vault_id: str, required: str, available: str) -> None:
        super().__init__(
            f"Insufficient balance in vault {vault_id}: required {required}, available {available}",
            details={"vault_id": vault_id, "required": required, "available": available},
        )


class ResourceMismatchError(ResourceError):
    """Bucket or proof is of a different resource than expected."""

    error_code = "RESOURCE_MISMATCH"

    def __init__(self, message: str, expected: str, actual: str) -> None:
        super().__init__(message, details={"expected": expected, "actual": actual})


class DuplicateNonFungibleError(ResourceError):
    """A non-fungible with this id already exists."""

    error_code = "DUPLICATE_NON_FUNGIBLE"

    def __init__(self, resource_address: str, non_fungible_id: str) -> None:
        super().__init__(
            f"Non-fungible {non_fungible_id} already exists in resource {resource_address}",
            details={"resource_address": resource_address, "non_fungible_id": non_fungible_id},
        )


class NotFoundError(ResourceError):
    """Referenced resource, vault, component or non-fungible does not exist."""

    error_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class FrozenUtxoError(ResourceError):
    """Confidential output is frozen and cannot be spent."""

    error_code = "UTXO_FROZEN"

    def __init__(self, utxo_id: str) -> None:
        super().__init__(f"UTXO {utxo_id} is frozen", details={"utxo_id": utxo_id})


# =============================================================================
# Confidential proofs
# =============================================================================

class ProofVerificationError(IssuerError):
    """External verifier rejected a confidential value proof."""

    error_code = "PROOF_VERIFICATION_FAILED"
