"""Ledger Engine — the carbon credit state machine.

Invariants:
    - Every operation validates fully before mutating (validate_* returns first error)
    - A failed operation leaves state untouched and returns LedgerResult.failure(code)
    - Credit ids come from total supply: after increment on mint, after decrement on burn
    - mint is the only operation that emits a FeeTransfer (caller -> admin)
    - The engine never raises for a rejected precondition

Design Decisions:
    - Engine owns its LedgerState instance: no globals, independent ledgers per instance
    - Validation in enforce_* modules, mutation here: rules stay pure and testable
    - Caller and height passed explicitly per call: the host owns identity and time
"""

import logging

from carbon_ledger.core.domain_types import (
    Principal, CreditId, Height,
    TOKEN_NAME, TOKEN_SYMBOL, TOKEN_DECIMALS,
)
from carbon_ledger.core.errors import LedgerErrorCode
from carbon_ledger.core.ledger_state import (
    LedgerParams, LedgerState, LedgerResult,
    CreditMetadata, CreditRetirement, FeeTransfer,
)
from carbon_ledger.core.enforce_transfers import (
    validate_transfer, validate_approve, validate_transfer_from,
)
from carbon_ledger.core.enforce_issuance import validate_mint, validate_burn
from carbon_ledger.core.enforce_admin import (
    validate_admin_only, validate_add_issuer, validate_remove_issuer,
    validate_set_issuance_fee, validate_set_grace_period,
)

logger = logging.getLogger(__name__)


class LedgerEngine:
    """Single authority over balances, allowances, issuers and credit records."""

    def __init__(
        self, params: LedgerParams | None = None, state: LedgerState | None = None,
    ):
        if state is None:
            state = LedgerState(params=params or LedgerParams())
        self._state = state

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def params(self) -> LedgerParams:
        return self._state.params

    def replace_state(self, state: LedgerState) -> None:
        """Swap in a restored state (rollback / startup restore)."""
        self._state = state

    # ─── Read accessors ──────────────────────────────────────────

    def balance_of(self, principal: Principal) -> int:
        return self._state.balance_of(principal)

    def get_total_supply(self) -> int:
        return self._state.total_supply

    def get_name(self) -> str:
        return TOKEN_NAME

    def get_symbol(self) -> str:
        return TOKEN_SYMBOL

    def get_decimals(self) -> int:
        return TOKEN_DECIMALS

    def get_token_uri(self) -> str:
        return self._state.params.token_uri

    def allowance_of(self, owner: Principal, spender: Principal) -> int:
        return self._state.allowance_of(owner, spender)

    def get_credit_metadata(self, credit_id: int) -> CreditMetadata | None:
        return self._state.credit_metadata.get(CreditId(credit_id))

    def get_credit_retirement(self, credit_id: int) -> CreditRetirement | None:
        return self._state.credit_retirements.get(CreditId(credit_id))

    def is_issuer(self, principal: Principal) -> bool:
        return self._state.is_issuer(principal)

    # ─── Token movements ─────────────────────────────────────────

    def transfer(
        self, caller: Principal, amount: int, sender: Principal, recipient: Principal,
    ) -> LedgerResult:
        error = validate_transfer(self._state, caller, amount, sender, recipient)
        if error:
            return self._reject("transfer", caller, error)
        self._move(sender, recipient, amount)
        logger.info(
            f"Transferred {amount} from {sender} to {recipient}",
            extra={"operation": "transfer", "caller": caller, "amount": amount},
        )
        return LedgerResult.success()

    def approve(self, caller: Principal, spender: Principal, amount: int) -> LedgerResult:
        error = validate_approve(amount)
        if error:
            return self._reject("approve", caller, error)
        self._state.allowances[(caller, spender)] = amount
        logger.info(
            f"Allowance for {spender} on {caller} set to {amount}",
            extra={"operation": "approve", "caller": caller, "amount": amount},
        )
        return LedgerResult.success()

    def transfer_from(
        self, caller: Principal, owner: Principal, recipient: Principal, amount: int,
    ) -> LedgerResult:
        error = validate_transfer_from(self._state, caller, owner, recipient, amount)
        if error:
            return self._reject("transfer_from", caller, error)
        self._move(owner, recipient, amount)
        key = (owner, caller)
        self._state.allowances[key] = self._state.allowances[key] - amount
        logger.info(
            f"{caller} moved {amount} from {owner} to {recipient}",
            extra={"operation": "transfer_from", "caller": caller, "amount": amount},
        )
        return LedgerResult.success()

    # ─── Issuance & retirement ───────────────────────────────────

    def mint(
        self,
        caller: Principal,
        height: Height,
        amount: int,
        recipient: Principal,
        offset_amount: int,
        location: str,
        project_type: str,
        verifier: Principal,
    ) -> LedgerResult:
        """Issue credits to recipient and register their metadata.

        The returned FeeTransfer (issuance fee, caller -> admin) must be
        settled by the host together with this mutation.
        """
        state = self._state
        error = validate_mint(
            state, caller, amount, recipient, offset_amount, location, project_type,
        )
        if error:
            return self._reject("mint", caller, error)

        state.balances[recipient] = state.balance_of(recipient) + amount
        state.total_supply += amount
        credit_id = CreditId(state.total_supply)
        state.credit_metadata[credit_id] = CreditMetadata(
            offset_amount=offset_amount,
            height=height,
            location=location,
            project_type=project_type,
            verifier=verifier,
            status=True,
        )
        fee = FeeTransfer(
            amount=state.params.issuance_fee, sender=caller, recipient=state.params.admin,
        )
        logger.info(
            f"Minted {amount} to {recipient} as credit {credit_id}",
            extra={
                "operation": "mint", "caller": caller, "height": height,
                "amount": amount, "credit_id": credit_id,
            },
        )
        return LedgerResult.success(fee_transfer=fee)

    def burn(
        self, caller: Principal, height: Height, amount: int, reason: str,
    ) -> LedgerResult:
        """Retire credits from the caller's own balance."""
        state = self._state
        error = validate_burn(state, caller, amount, reason)
        if error:
            return self._reject("burn", caller, error)

        state.balances[caller] = state.balance_of(caller) - amount
        state.total_supply -= amount
        credit_id = CreditId(state.total_supply)
        state.credit_retirements[credit_id] = CreditRetirement(
            reason=reason, height=height, retiree=caller,
        )
        logger.info(
            f"Burned {amount} from {caller} as retirement {credit_id}",
            extra={
                "operation": "burn", "caller": caller, "height": height,
                "amount": amount, "credit_id": credit_id,
            },
        )
        return LedgerResult.success()

    # ─── Issuer management ───────────────────────────────────────

    def add_issuer(self, caller: Principal, principal: Principal) -> LedgerResult:
        error = validate_add_issuer(self._state, caller, principal)
        if error:
            return self._reject("add_issuer", caller, error)
        self._state.issuers.add(principal)
        self._state.issuer_count += 1
        logger.info(f"Issuer added: {principal}", extra={"operation": "add_issuer"})
        return LedgerResult.success()

    def remove_issuer(self, caller: Principal, principal: Principal) -> LedgerResult:
        error = validate_remove_issuer(self._state, caller, principal)
        if error:
            return self._reject("remove_issuer", caller, error)
        self._state.issuers.discard(principal)
        self._state.issuer_count -= 1
        logger.info(f"Issuer removed: {principal}", extra={"operation": "remove_issuer"})
        return LedgerResult.success()

    # ─── Parameter setters ───────────────────────────────────────

    def set_issuance_fee(self, caller: Principal, fee: int) -> LedgerResult:
        error = validate_set_issuance_fee(self._state, caller, fee)
        if error:
            return self._reject("set_issuance_fee", caller, error)
        self._state.params.issuance_fee = fee
        return self._param_changed("set_issuance_fee", "issuance_fee", fee)

    def pause_mint(self, caller: Principal) -> LedgerResult:
        return self._set_flag(caller, "pause_mint", "mint_paused", True)

    def unpause_mint(self, caller: Principal) -> LedgerResult:
        return self._set_flag(caller, "unpause_mint", "mint_paused", False)

    def pause_burn(self, caller: Principal) -> LedgerResult:
        return self._set_flag(caller, "pause_burn", "burn_paused", True)

    def unpause_burn(self, caller: Principal) -> LedgerResult:
        return self._set_flag(caller, "unpause_burn", "burn_paused", False)

    def set_token_uri(self, caller: Principal, uri: str) -> LedgerResult:
        error = validate_admin_only(self._state, caller)
        if error:
            return self._reject("set_token_uri", caller, error)
        self._state.params.token_uri = uri
        return self._param_changed("set_token_uri", "token_uri", uri)

    def set_grace_period(self, caller: Principal, period: int) -> LedgerResult:
        error = validate_set_grace_period(self._state, caller, period)
        if error:
            return self._reject("set_grace_period", caller, error)
        self._state.params.grace_period = period
        return self._param_changed("set_grace_period", "grace_period", period)

    # ─── Internals ───────────────────────────────────────────────

    def _move(self, source: Principal, destination: Principal, amount: int) -> None:
        # Debit first: source == destination must net to zero
        balances = self._state.balances
        balances[source] = balances.get(source, 0) - amount
        balances[destination] = balances.get(destination, 0) + amount

    def _set_flag(
        self, caller: Principal, operation: str, flag: str, value: bool,
    ) -> LedgerResult:
        error = validate_admin_only(self._state, caller)
        if error:
            return self._reject(operation, caller, error)
        setattr(self._state.params, flag, value)
        return self._param_changed(operation, flag, value)

    def _param_changed(self, operation: str, name: str, value: object) -> LedgerResult:
        logger.info(f"Parameter {name} set to {value!r}", extra={"operation": operation})
        return LedgerResult.success()

    def _reject(
        self, operation: str, caller: Principal, code: LedgerErrorCode,
    ) -> LedgerResult:
        logger.debug(
            f"{operation} rejected: {code.name}",
            extra={"operation": operation, "caller": caller, "error_code": int(code)},
        )
        return LedgerResult.failure(code)
