"""Transfer & Allowance Enforcement — ordered preconditions for balance movements.

Invariants:
    - All functions are PURE: no IO, no side effects, no state mutation
    - Return LedgerErrorCode on violation, None on success
    - validate_* chains checks with `or` — first error wins, later checks never run

Design Decisions:
    - Pure functions over method dispatch: testable without an engine instance
    - Return codes (not exceptions): the engine reports failures as result values,
      keeping error path identical to success path
    - Amount/recipient/balance checks live here and are reused by issuance checks
"""

from carbon_ledger.core.domain_types import Principal, NULL_PRINCIPAL
from carbon_ledger.core.errors import LedgerErrorCode
from carbon_ledger.core.ledger_state import LedgerState


def check_positive_amount(amount: int) -> LedgerErrorCode | None:
    """Amounts must be strictly positive."""
    if amount <= 0:
        return LedgerErrorCode.INVALID_AMOUNT
    return None


def check_recipient(recipient: Principal) -> LedgerErrorCode | None:
    """The null principal can never receive tokens or roles."""
    if recipient == NULL_PRINCIPAL:
        return LedgerErrorCode.INVALID_RECIPIENT
    return None


def check_sufficient_balance(
    state: LedgerState, holder: Principal, amount: int,
) -> LedgerErrorCode | None:
    if state.balance_of(holder) < amount:
        return LedgerErrorCode.INSUFFICIENT_BALANCE
    return None


def check_caller_is_sender(caller: Principal, sender: Principal) -> LedgerErrorCode | None:
    """transfer is self-service only."""
    if caller != sender:
        return LedgerErrorCode.NOT_AUTHORIZED
    return None


def check_allowance(
    state: LedgerState, owner: Principal, spender: Principal, amount: int,
) -> LedgerErrorCode | None:
    """Spender must hold an allowance covering the full amount."""
    if state.allowance_of(owner, spender) < amount:
        return LedgerErrorCode.NOT_AUTHORIZED
    return None


def validate_transfer(
    state: LedgerState, caller: Principal,
    amount: int, sender: Principal, recipient: Principal,
) -> LedgerErrorCode | None:
    """NotAuthorized -> InvalidAmount -> InvalidRecipient -> InsufficientBalance."""
    return (
        check_caller_is_sender(caller, sender)
        or check_positive_amount(amount)
        or check_recipient(recipient)
        or check_sufficient_balance(state, sender, amount)
    )


def validate_approve(amount: int) -> LedgerErrorCode | None:
    """Zero is rejected — approve cannot be used to clear an allowance."""
    return check_positive_amount(amount)


def validate_transfer_from(
    state: LedgerState, caller: Principal,
    owner: Principal, recipient: Principal, amount: int,
) -> LedgerErrorCode | None:
    """InvalidAmount -> InvalidRecipient -> NotAuthorized -> InsufficientBalance."""
    return (
        check_positive_amount(amount)
        or check_recipient(recipient)
        or check_allowance(state, owner, caller, amount)
        or check_sufficient_balance(state, owner, amount)
    )
