"""
Regulated stable-coin issuer.

A single issuer component mints, moves, exchanges and revokes a regulated
token under badge-based access control, optionally paired with a wrapped
token for liquidity. An in-memory engine provides atomic calls, vaults,
access-rule enforcement and an audit event log.
"""

from .access import (
    AccessRule,
    AccessRules,
    AllOf,
    AllowAll,
    AnyOf,
    AuthScope,
    DenyAll,
    RequireNonFungible,
    RequireResource,
    RequireSigner,
    ResourceAccessRules,
    ResourceAuthAction,
)
from .account import Account, open_account
from .amount import Amount, to_amount, validate_amount
from .confidential import (
    ConfidentialOutput,
    ConfidentialWithdrawProof,
    ProofVerifier,
    RevealedAmount,
    SimulatedProofVerifier,
    StealthValueProof,
    UtxoId,
)
from .config import IssuerSettings, StableCoinConfig, load_settings
from .events import Event, EventLog
from .exceptions import (
    AuthorizationError,
    ConstructionError,
    DuplicateNonFungibleError,
    ExchangeLimitExceededError,
    FrozenUtxoError,
    InsufficientBalanceError,
    InsufficientFeeFundsError,
    IssuerError,
    IssuerPausedError,
    NotFoundError,
    PolicyViolationError,
    ProofVerificationError,
    ResourceError,
    ResourceMismatchError,
    UnauthorizedDepositError,
)
from .fees import FeeSpec, FixedFee, PercentageFee, calculate_fee, div_rounded
from .issuer import StableCoinIssuer
from .logging_config import LogContext, setup_logging, setup_logging_from_settings
from .resources import Bucket, NonFungible, Proof, ResourceBuilder, ResourceManager, ResourceType, Vault
from .runtime import AuthHookCaller, Engine, Transaction
from .user_data import UserData, UserId, UserMutableData
from .wrapped_token import WrappedExchangeToken

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Engine
    "Engine",
    "Transaction",
    "AuthHookCaller",
    "Account",
    "open_account",
    # Issuer
    "StableCoinIssuer",
    "WrappedExchangeToken",
    "StableCoinConfig",
    "IssuerSettings",
    "load_settings",
    # Values
    "Amount",
    "to_amount",
    "validate_amount",
    "UserId",
    "UserData",
    "UserMutableData",
    "FeeSpec",
    "FixedFee",
    "PercentageFee",
    "calculate_fee",
    "div_rounded",
    # Access
    "AccessRule",
    "AccessRules",
    "AllOf",
    "AllowAll",
    "AnyOf",
    "AuthScope",
    "DenyAll",
    "RequireNonFungible",
    "RequireResource",
    "RequireSigner",
    "ResourceAccessRules",
    "ResourceAuthAction",
    # Resources
    "Bucket",
    "NonFungible",
    "Proof",
    "ResourceBuilder",
    "ResourceManager",
    "ResourceType",
    "Vault",
    # Confidential
    "ConfidentialOutput",
    "ConfidentialWithdrawProof",
    "ProofVerifier",
    "RevealedAmount",
    "SimulatedProofVerifier",
    "StealthValueProof",
    "UtxoId",
    # Events
    "Event",
    "EventLog",
    # Logging
    "LogContext",
    "setup_logging",
    "setup_logging_from_settings",
    # Exceptions
    "IssuerError",
    "ConstructionError",
    "AuthorizationError",
    "UnauthorizedDepositError",
    "PolicyViolationError",
    "ExchangeLimitExceededError",
    "InsufficientFeeFundsError",
    "IssuerPausedError",
    "ResourceError",
    "InsufficientBalanceError",
    "ResourceMismatchError",
    "DuplicateNonFungibleError",
    "NotFoundError",
    "FrozenUtxoError",
    "ProofVerificationError",
]
