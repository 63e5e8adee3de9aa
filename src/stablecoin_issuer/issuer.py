"""Stable-coin issuer component.

The issuer owns the regulated token's treasury vault, the admin and user
badge resources, the vault of recalled (blacklisted) user badges, the
optional wrapped-token float, a pause flag and its own fee configuration.

Every public method runs inside an engine transaction and is gated by the
access rules declared in ``instantiate``:

- ``total_supply``, ``wrapped_total_supply``: anyone
- ``exchange_*``: holders of a user or admin badge
- ``authorize_user_deposit``: anyone (the engine calls it as a hook)
- everything else: holders of an admin badge

Each method performs all of its checks before the first mutation.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .access import AccessRules, AllowAll, AnyOf, RequireResource, ResourceAuthAction
from .account import Account
from .amount import Amount, to_amount, validate_amount
from .config import StableCoinConfig, load_settings
from .confidential import StealthValueProof, UtxoId
from .context import current_context
from .events import (
    ADMIN_FREEZE_UTXOS,
    ADMIN_PAUSED,
    ADMIN_UNFREEZE_UTXOS,
    ADMIN_UNPAUSED,
    BLACKLIST_USER,
    BURN_UTXOS,
    CONFIG_SET_DEFAULT_EXCHANGE_LIMIT,
    CONFIG_SET_TRANSFER_FEE_FIXED,
    CONFIG_SET_TRANSFER_FEE_PERCENTAGE,
    CONFIG_SET_WRAPPED_EXCHANGE_FEE,
    CREATE_NEW_ADMIN,
    CREATE_NEW_USER,
    DECREASE_SUPPLY,
    DEPOSIT,
    EXCHANGE_STABLE_FOR_WRAPPED,
    EXCHANGE_WRAPPED_FOR_STABLE,
    INCREASE_SUPPLY,
    RECALL_TOKENS,
    REMOVE_FROM_BLACKLIST,
    SET_USER_EXCHANGE_LIMIT,
    SET_USER_WRAPPED_EXCHANGE_LIMIT,
    WITHDRAW,
)
from .exceptions import (
    AuthorizationError,
    ConstructionError,
    ExchangeLimitExceededError,
    InsufficientBalanceError,
    InsufficientFeeFundsError,
    IssuerPausedError,
    NotFoundError,
    PolicyViolationError,
    ResourceError,
    ResourceMismatchError,
    UnauthorizedDepositError,
)
from .fees import MAX_PERCENTAGE, FixedFee, PercentageFee
from .logging_config import LogContext, log_compliance
from .resources import (
    Bucket,
    Proof,
    ResourceBuilder,
    ResourceManager,
    Vault,
    acting_as,
    non_fungible_id_from_u64,
    random_non_fungible_id,
)
from .user_data import UserData, UserId, UserMutableData
from .wrapped_token import WrappedExchangeToken

if TYPE_CHECKING:
    from .runtime import AuthHookCaller, Engine

logger = logging.getLogger(__name__)

PROVIDER_NAME_KEY = "provider_name"
AUTH_HOOK_METHOD = "authorize_user_deposit"


def _user_id(value: Union[UserId, int]) -> UserId:
    return value if isinstance(value, UserId) else UserId(value)


def _emit(name: str, **payload: Any) -> None:
    current_context().engine.emit_event(name, payload)


def _tx_signer() -> str:
    return current_context().signer_public_key


class StableCoinIssuer:
    """Issuer of one regulated token and its optional wrapped twin."""

    def __init__(
        self,
        config: StableCoinConfig,
        token_vault: Vault,
        user_auth_manager: ResourceManager,
        admin_auth_manager: ResourceManager,
        blacklisted_users: Vault,
        wrapped_token: Optional[WrappedExchangeToken] = None,
    ) -> None:
        self.config = config
        self.token_vault = token_vault
        self.user_auth_manager = user_auth_manager
        self.admin_auth_manager = admin_auth_manager
        self.blacklisted_users = blacklisted_users
        self.wrapped_token = wrapped_token
        self.is_paused = False

    # =========================================================================
    # Instantiation
    # =========================================================================

    @classmethod
    def instantiate(
        cls,
        engine: Engine,
        initial_token_supply: Union[Amount, int],
        token_symbol: str,
        token_metadata: Dict[str, str],
        view_key: Optional[bytes] = None,
        enable_wrapped_token: bool = False,
        config: Optional[StableCoinConfig] = None,
    ) -> Bucket:
        """
        Create a new issuer component.

        The issuer address is published by the engine
        (``engine.last_component_address``); the caller receives the first
        admin badge.

        Args:
            engine: Engine to create the component in
            initial_token_supply: Initial supply of the token (and wrapped token)
            token_symbol: Ticker of the token
            token_metadata: Token metadata; must contain ``provider_name``
            view_key: Optional view key for auditing confidential outputs
            enable_wrapped_token: Also create the wrapped exchange token
            config: Fee and limit policy; defaults come from IssuerSettings

        Returns:
            Bucket holding admin badge 0

        Raises:
            ConstructionError: If the parameters are invalid. Nothing is created.
        """
        return engine.call_function(
            cls._instantiate,
            initial_token_supply,
            token_symbol,
            token_metadata,
            view_key,
            enable_wrapped_token,
            config,
        )

    @classmethod
    def _instantiate(
        cls,
        initial_token_supply: Union[Amount, int],
        token_symbol: str,
        token_metadata: Dict[str, str],
        view_key: Optional[bytes],
        enable_wrapped_token: bool,
        config: Optional[StableCoinConfig],
    ) -> Bucket:
        provider_name = (token_metadata or {}).get(PROVIDER_NAME_KEY)
        if provider_name is None or not str(provider_name).strip():
            raise ConstructionError("provider_name metadata entry is required", field=PROVIDER_NAME_KEY)
        if not token_symbol or not token_symbol.strip():
            raise ConstructionError("token_symbol must not be blank", field="token_symbol")
        try:
            initial_supply = to_amount(initial_token_supply)
        except ValueError as e:
            raise ConstructionError(str(e), field="initial_token_supply") from e
        if initial_supply.is_negative():
            raise ConstructionError(
                f"Initial supply cannot be negative: {initial_supply}",
                field="initial_token_supply",
            )

        if config is None:
            config = StableCoinConfig.from_settings(load_settings())

        ctx = current_context()
        component_address = ctx.engine.allocate_component_address()

        # Admin badge resource
        admin_badge = (
            ResourceBuilder.non_fungible()
            .with_owner_component(component_address)
            .initial_non_fungibles({non_fungible_id_from_u64(0): (None, None)})
        )
        admin_resource = admin_badge.resource_address
        require_admin = RequireResource(admin_resource)

        # User badge resource
        user_auth_manager = (
            ResourceBuilder.non_fungible()
            .add_metadata(PROVIDER_NAME_KEY, str(provider_name).strip())
            .with_owner_component(component_address)
            .mintable(require_admin)
            .depositable(require_admin)
            .recallable(require_admin)
            .update_non_fungible_data(require_admin)
            .build()
        )
        require_user_or_admin = AnyOf(require_admin, RequireResource(user_auth_manager.resource_address))

        initial_tokens = (
            ResourceBuilder.confidential()
            .with_metadata(token_metadata)
            .with_token_symbol(token_symbol)
            .with_owner_component(component_address)
            .mintable(require_admin)
            .burnable(require_admin)
            .depositable(require_user_or_admin)
            .withdrawable(require_user_or_admin)
            .recallable(require_admin)
            .with_authorization_hook(component_address, AUTH_HOOK_METHOD)
            .with_view_key(view_key)
            .initial_supply(initial_supply)
        )

        wrapped_tokens = None
        if enable_wrapped_token:
            wrapped_tokens = (
                ResourceBuilder.fungible()
                .with_metadata(token_metadata)
                .with_token_symbol(f"w{token_symbol}")
                .with_owner_component(component_address)
                .mintable(require_admin)
                .burnable(require_admin)
                .initial_supply(initial_supply)
            )

        with acting_as(component_address):
            issuer = cls(
                config=config,
                token_vault=Vault.from_bucket(initial_tokens),
                user_auth_manager=user_auth_manager,
                admin_auth_manager=ResourceManager(admin_resource),
                blacklisted_users=Vault.new_empty(user_auth_manager.resource_address),
                wrapped_token=WrappedExchangeToken(Vault.from_bucket(wrapped_tokens)) if wrapped_tokens else None,
            )

        access_rules = (
            AccessRules()
            .add_method_rule("total_supply", AllowAll())
            .add_method_rule("wrapped_total_supply", AllowAll())
            .add_method_rule("exchange_stable_for_wrapped_tokens", require_user_or_admin)
            .add_method_rule("exchange_wrapped_for_stable_tokens", require_user_or_admin)
            # Called by the engine with the depositor's credentials
            .add_method_rule(AUTH_HOOK_METHOD, AllowAll())
            .default(require_admin)
        )
        ctx.engine.create_component(
            issuer,
            access_rules,
            owner_rule=RequireResource(admin_resource),
            address=component_address,
        )
        logger.info(
            "Instantiated issuer %s symbol=%s supply=%s wrapped=%s",
            component_address, token_symbol, initial_supply, enable_wrapped_token,
        )
        return admin_badge

    # =========================================================================
    # Deposit hook
    # =========================================================================

    def authorize_user_deposit(self, action: ResourceAuthAction, caller: AuthHookCaller) -> None:
        """
        Gate movements of the token into and out of other components' vaults.

        Deposits are only accepted into accounts that hold a badge of this
        issuer's user resource. The badge may be locked by a proof when a
        user sends to themselves.

        Raises:
            IssuerPausedError: If the issuer is paused
            UnauthorizedDepositError: If the destination is not a badged account
        """
        if self.is_paused:
            raise IssuerPausedError()
        if action is not ResourceAuthAction.DEPOSIT:
            return

        component_state = caller.component_state
        if component_state is None:
            raise UnauthorizedDepositError("deposit not permitted from static template function")
        if not isinstance(component_state, Account):
            raise UnauthorizedDepositError("Deposit must be to an account")
        vault = component_state.get_vault_by_resource(self.user_auth_manager.resource_address)
        if vault is None:
            logger.warning("Rejected deposit to %s: no user badge vault", caller.component_address)
            raise UnauthorizedDepositError("Caller account does not have a vault for the resource")
        if vault.balance().is_zero() and vault.locked_balance().is_zero():
            logger.warning("Rejected deposit to %s: no user badge", caller.component_address)
            raise UnauthorizedDepositError("This account does not have permission to deposit")
        logger.debug("Authorized deposit for user with component %s", caller.component_address)

    # =========================================================================
    # Supply
    # =========================================================================

    def increase_supply(self, amount: Amount) -> None:
        """Mint new tokens into the treasury, and the same amount of wrapped tokens."""
        validate_amount(amount)
        self.token_vault.deposit(self._token_manager().mint_confidential(amount))
        if self.wrapped_token is not None:
            self.wrapped_token.mint(amount)
        _emit(INCREASE_SUPPLY, amount=amount)
        logger.info("Increased supply by %s", amount)

    def decrease_supply(self, amount: Amount) -> None:
        """Burn tokens from the treasury, and the same amount of wrapped tokens."""
        validate_amount(amount)
        self._require_balance(self.token_vault, amount)
        if self.wrapped_token is not None:
            self._require_balance(self.wrapped_token.vault, amount)

        self.token_vault.withdraw(amount).burn()
        if self.wrapped_token is not None:
            self.wrapped_token.burn(amount)
        _emit(DECREASE_SUPPLY, revealed_burn_amount=amount)
        logger.info("Decreased supply by %s", amount)

    def total_supply(self) -> Amount:
        return self._token_manager().total_supply()

    def wrapped_total_supply(self) -> Amount:
        return self._wrapped().total_supply()

    # =========================================================================
    # Treasury
    # =========================================================================

    def withdraw(self, amount: Amount) -> Bucket:
        bucket = self.token_vault.withdraw(amount)
        _emit(WITHDRAW, amount_withdrawn=bucket.amount)
        return bucket

    def deposit(self, bucket: Bucket) -> None:
        amount = bucket.amount
        self.token_vault.deposit(bucket)
        _emit(DEPOSIT, amount=amount)

    # =========================================================================
    # Exchange
    # =========================================================================

    def exchange_stable_for_wrapped_tokens(self, proof: Proof, bucket: Bucket) -> Bucket:
        """
        Swap tokens for wrapped tokens, less the wrapped exchange fee.

        The exchanged amount is deducted from the user's wrapped exchange
        limit.
        """
        wrapped = self._wrapped()
        if bucket.resource_address != self.token_vault.resource_address:
            raise ResourceMismatchError(
                "The bucket must contain the same resource as the token vault",
                expected=self.token_vault.resource_address,
                actual=bucket.resource_address,
            )
        amount = bucket.amount
        if not amount.is_positive():
            raise PolicyViolationError("The bucket must contain some tokens")

        user, user_data = self._user_from_proof(proof)
        if amount > user_data.wrapped_exchange_limit:
            logger.warning("Exchange limit exceeded for user %s", user.user_id)
            raise ExchangeLimitExceededError(
                str(user.user_id), str(user_data.wrapped_exchange_limit), str(amount)
            )
        fee = self.config.wrapped_exchange_fee.calculate_fee(amount)
        net_amount = amount.checked_sub(fee)
        if net_amount is None:
            raise InsufficientFeeFundsError(str(amount), str(fee))
        self._require_balance(wrapped.vault, net_amount)

        self.set_user_wrapped_exchange_limit(user.user_id, user_data.wrapped_exchange_limit - amount)
        self.token_vault.deposit(bucket)
        if net_amount.is_zero():
            # The whole amount went to the fee
            wrapped_tokens = Bucket.empty(wrapped.resource_address)
        else:
            wrapped_tokens = wrapped.withdraw(net_amount)

        _emit(EXCHANGE_STABLE_FOR_WRAPPED, user_id=user.user_id, amount=amount, fee=fee)
        logger.info("User %s exchanged %s tokens for %s wrapped", user.user_id, amount, net_amount)
        return wrapped_tokens

    def exchange_wrapped_for_stable_tokens(self, proof: Proof, wrapped_bucket: Bucket) -> Bucket:
        """Swap wrapped tokens back one-for-one, without fee or limit."""
        wrapped = self._wrapped()
        proof.assert_resource(self.user_auth_manager.resource_address)
        if wrapped_bucket.resource_address != wrapped.resource_address:
            raise ResourceMismatchError(
                "The bucket must contain the same resource as the wrapped token vault",
                expected=wrapped.resource_address,
                actual=wrapped_bucket.resource_address,
            )
        amount = wrapped_bucket.amount
        if not amount.is_positive():
            raise PolicyViolationError("The bucket must contain some tokens")

        user, _ = self._user_from_proof(proof)
        self._require_balance(self.token_vault, amount)

        wrapped.deposit(wrapped_bucket)
        tokens = self.token_vault.withdraw(amount)

        _emit(EXCHANGE_WRAPPED_FOR_STABLE, user_id=user.user_id, amount=amount, fee=0)
        logger.info("User %s exchanged %s wrapped for tokens", user.user_id, amount)
        return tokens

    # =========================================================================
    # Users and admins
    # =========================================================================

    def create_new_admin(self, employee_id: str) -> Bucket:
        admin_id = random_non_fungible_id()
        badge = self.admin_auth_manager.mint_non_fungible(
            admin_id, metadata={"employee_id": employee_id}
        )
        _emit(CREATE_NEW_ADMIN, admin_id=admin_id)
        logger.info("Created admin badge %s for employee %s", admin_id, employee_id)
        return badge

    def create_new_user(self, user_id: Union[UserId, int], user_account: str) -> Bucket:
        """
        Mint the badge of a new user.

        Raises:
            DuplicateNonFungibleError: If the user already has a badge
        """
        user_id = _user_id(user_id)
        badge = self.user_auth_manager.mint_non_fungible(
            user_id.to_non_fungible_id(),
            data=UserData(
                user_id=user_id,
                user_account=user_account,
                created_at_epoch=current_context().engine.current_epoch,
            ),
            mutable_data=UserMutableData(
                is_blacklisted=False,
                wrapped_exchange_limit=self.config.default_exchange_limit_amount,
            ),
        )
        _emit(CREATE_NEW_USER, user_id=user_id)
        with LogContext(user_id=str(user_id)):
            logger.info("Created user %s for account %s", user_id, user_account)
        return badge

    def get_user_data(self, user_id: Union[UserId, int]) -> UserData:
        return self._user_badge(_user_id(user_id)).get_data()

    def get_user_mutable_data(self, user_id: Union[UserId, int]) -> UserMutableData:
        return self._user_badge(_user_id(user_id)).get_mutable_data()

    def set_user_exchange_limit(self, user_id: Union[UserId, int], limit: Union[Amount, int]) -> None:
        user_id = _user_id(user_id)
        limit = to_amount(limit)
        if not limit.is_positive():
            raise PolicyViolationError("Exchange limit must be positive")
        badge = self._user_badge(user_id)
        badge.set_mutable_data(badge.get_mutable_data().with_wrapped_exchange_limit(limit))
        _emit(SET_USER_EXCHANGE_LIMIT, user_id=user_id, limit=limit, admin=_tx_signer())

    def set_user_wrapped_exchange_limit(self, user_id: Union[UserId, int], new_limit: Union[Amount, int]) -> None:
        user_id = _user_id(user_id)
        new_limit = to_amount(new_limit)
        validate_amount(new_limit, allow_zero=True)
        badge = self._user_badge(user_id)
        badge.set_mutable_data(badge.get_mutable_data().with_wrapped_exchange_limit(new_limit))
        _emit(SET_USER_WRAPPED_EXCHANGE_LIMIT, user_id=user_id, limit=new_limit)

    # =========================================================================
    # Compliance
    # =========================================================================

    def blacklist_user(self, vault_id: str, user_id: Union[UserId, int]) -> None:
        """Recall a user's badge from ``vault_id`` into the blacklist vault."""
        user_id = _user_id(user_id)
        non_fungible_id = user_id.to_non_fungible_id()
        badge = self._user_badge(user_id)

        recalled = self.user_auth_manager.recall_non_fungible(vault_id, non_fungible_id)
        badge.set_mutable_data(badge.get_mutable_data().with_blacklisted(True))
        self.blacklisted_users.deposit(recalled)

        _emit(BLACKLIST_USER, user_id=user_id)
        log_compliance(logger, "info", "User blacklisted", action="blacklist", user_id=str(user_id))

    def remove_from_blacklist(self, user_id: Union[UserId, int]) -> Bucket:
        """Release a user's badge from the blacklist vault for redeposit."""
        user_id = _user_id(user_id)
        non_fungible_id = user_id.to_non_fungible_id()
        badge = self._user_badge(user_id)

        bucket = self.blacklisted_users.withdraw_non_fungible(non_fungible_id)
        badge.set_mutable_data(badge.get_mutable_data().with_blacklisted(False))

        _emit(REMOVE_FROM_BLACKLIST, user_id=user_id)
        log_compliance(logger, "info", "User removed from blacklist", action="unblacklist", user_id=str(user_id))
        return bucket

    def recall_revealed_tokens(self, user_id: Union[UserId, int], amount: Amount) -> None:
        """Claw back revealed tokens from the user's linked account."""
        user_id = _user_id(user_id)
        validate_amount(amount)
        user = self.get_user_data(user_id)

        account = current_context().engine.component_state(user.user_account)
        if not isinstance(account, Account):
            raise NotFoundError("Account", user.user_account)
        vault = account.get_vault_by_resource(self.token_vault.resource_address)
        if vault is None:
            raise NotFoundError("Vault", f"{self.token_vault.resource_address} in {user.user_account}")

        bucket = self._token_manager().recall_fungible_amount(vault.vault_id, amount)
        self.token_vault.deposit(bucket)

        _emit(RECALL_TOKENS, user_id=user_id, revealed_amount=amount)
        log_compliance(
            logger, "warning", "Recalled revealed tokens",
            action="recall", user_id=str(user_id), amount=str(amount),
        )

    def burn_utxos(self, utxo_id: UtxoId, value_proof: StealthValueProof) -> None:
        self._token_manager().burn_utxo(utxo_id, value_proof)
        _emit(BURN_UTXOS, tx_signer=_tx_signer(), utxo_id=utxo_id)
        log_compliance(logger, "info", "Burned confidential output", action="burn_utxo", utxo_id=str(utxo_id))

    def freeze_utxos(self, utxos: List[UtxoId]) -> None:
        self._token_manager().freeze_utxos(utxos)
        _emit(ADMIN_FREEZE_UTXOS, tx_signer=_tx_signer(), num_utxos=len(utxos))
        log_compliance(logger, "info", "Froze confidential outputs", action="freeze", num_utxos=len(utxos))

    def unfreeze_utxos(self, utxos: List[UtxoId]) -> None:
        self._token_manager().unfreeze_utxos(utxos)
        _emit(ADMIN_UNFREEZE_UTXOS, tx_signer=_tx_signer(), num_utxos=len(utxos))
        log_compliance(logger, "info", "Unfroze confidential outputs", action="unfreeze", num_utxos=len(utxos))

    def pause(self, proof: Proof) -> None:
        """Stop all deposits and withdrawals of the token outside the issuer."""
        badge = self._admin_badge_from_proof(proof)
        self.is_paused = True
        _emit(ADMIN_PAUSED, tx_signer=_tx_signer(), admin_badge=badge)
        log_compliance(logger, "warning", "Token paused", action="pause", admin_badge=badge)

    def unpause(self, proof: Proof) -> None:
        badge = self._admin_badge_from_proof(proof)
        self.is_paused = False
        _emit(ADMIN_UNPAUSED, tx_signer=_tx_signer(), admin_badge=badge)
        log_compliance(logger, "warning", "Token unpaused", action="unpause", admin_badge=badge)

    # =========================================================================
    # Configuration
    # =========================================================================

    def get_config(self) -> StableCoinConfig:
        return self.config.model_copy()

    def set_config_transfer_fee_fixed(self, new_fee: Amount) -> None:
        new_spec = FixedFee(amount=int(new_fee))
        _emit(
            CONFIG_SET_TRANSFER_FEE_FIXED,
            old_transfer_fee=self.config.transfer_fee,
            new_transfer_fee=new_spec,
        )
        self.config.transfer_fee = new_spec

    def set_config_transfer_fee_percentage(self, new_fee_perc: int) -> None:
        new_spec = self._percentage_fee(new_fee_perc)
        _emit(
            CONFIG_SET_TRANSFER_FEE_PERCENTAGE,
            old_transfer_fee=self.config.transfer_fee,
            new_transfer_fee=new_spec,
        )
        self.config.transfer_fee = new_spec

    def set_config_wrapped_exchange_fee_percentage(self, new_fee_perc: int) -> None:
        new_spec = self._percentage_fee(new_fee_perc)
        _emit(
            CONFIG_SET_WRAPPED_EXCHANGE_FEE,
            old_wrapped_exchange_fee=self.config.wrapped_exchange_fee,
            new_wrapped_exchange_fee=new_spec,
        )
        self.config.wrapped_exchange_fee = new_spec

    def set_config_default_exchange_limit(self, limit: Amount) -> None:
        validate_amount(limit, allow_zero=True)
        old_limit = self.config.default_exchange_limit
        self.config.default_exchange_limit = int(limit)
        _emit(CONFIG_SET_DEFAULT_EXCHANGE_LIMIT, old_limit=old_limit, new_limit=limit)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _token_manager(self) -> ResourceManager:
        return ResourceManager(self.token_vault.resource_address)

    def _wrapped(self) -> WrappedExchangeToken:
        if self.wrapped_token is None:
            raise ResourceError("Wrapped token is not enabled")
        return self.wrapped_token

    def _user_badge(self, user_id: UserId):
        return self.user_auth_manager.get_non_fungible(user_id.to_non_fungible_id())

    def _user_from_proof(self, proof: Proof):
        proof.assert_resource(self.user_auth_manager.resource_address)
        badges = proof.get_non_fungibles()
        if len(badges) != 1:
            raise AuthorizationError(
                "The proof must contain exactly one badge",
                details={"badges": len(badges)},
            )
        badge = self.user_auth_manager.get_non_fungible(badges[0])
        user: UserData = badge.get_data()
        user_data: UserMutableData = badge.get_mutable_data()
        if user_data.is_blacklisted:
            raise AuthorizationError(f"User {user.user_id} is blacklisted")
        return user, user_data

    def _admin_badge_from_proof(self, proof: Proof) -> str:
        proof.assert_resource(self.admin_auth_manager.resource_address)
        badges = proof.get_non_fungibles()
        if not badges:
            raise AuthorizationError("Proof must contain an admin badge")
        return badges[0]

    @staticmethod
    def _percentage_fee(percentage: int) -> PercentageFee:
        if not 0 <= percentage <= MAX_PERCENTAGE:
            raise PolicyViolationError(
                "Percentage fee must be between 0 and 100",
                details={"percentage": percentage},
            )
        return PercentageFee(percentage=percentage)

    @staticmethod
    def _require_balance(vault: Vault, amount: Amount) -> None:
        available = vault.balance()
        if available < amount:
            raise InsufficientBalanceError(vault.vault_id, str(amount), str(available))
