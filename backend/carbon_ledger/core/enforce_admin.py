"""Admin & Issuer Enforcement — preconditions for privileged operations.

Invariants:
    - All functions are PURE: no IO, no side effects
    - Return LedgerErrorCode on violation, None on success
    - check_is_admin always runs first for privileged operations

Design Decisions:
    - Setters without secondary validation reuse validate_admin_only directly
"""

from carbon_ledger.core.domain_types import Principal, MAX_GRACE_PERIOD
from carbon_ledger.core.errors import LedgerErrorCode
from carbon_ledger.core.ledger_state import LedgerState
from carbon_ledger.core.enforce_transfers import check_recipient


def check_is_admin(state: LedgerState, caller: Principal) -> LedgerErrorCode | None:
    if caller != state.params.admin:
        return LedgerErrorCode.NOT_AUTHORIZED
    return None


def check_not_issuer(state: LedgerState, principal: Principal) -> LedgerErrorCode | None:
    if state.is_issuer(principal):
        return LedgerErrorCode.ALREADY_ISSUED
    return None


def check_issuer_capacity(state: LedgerState) -> LedgerErrorCode | None:
    if state.issuer_count >= state.params.max_issuers:
        return LedgerErrorCode.MAX_ISSUERS_EXCEEDED
    return None


def check_is_issuer(state: LedgerState, principal: Principal) -> LedgerErrorCode | None:
    if not state.is_issuer(principal):
        return LedgerErrorCode.INVALID_ISSUER
    return None


def check_fee(fee: int) -> LedgerErrorCode | None:
    if fee <= 0:
        return LedgerErrorCode.INVALID_FEE
    return None


def check_grace_period(period: int) -> LedgerErrorCode | None:
    """Only the upper bound is enforced."""
    if period > MAX_GRACE_PERIOD:
        return LedgerErrorCode.INVALID_GRACE_PERIOD
    return None


def validate_admin_only(state: LedgerState, caller: Principal) -> LedgerErrorCode | None:
    """Pause/unpause and set_token_uri: admin check only."""
    return check_is_admin(state, caller)


def validate_add_issuer(
    state: LedgerState, caller: Principal, principal: Principal,
) -> LedgerErrorCode | None:
    """NotAuthorized -> InvalidRecipient -> AlreadyIssued -> MaxIssuersExceeded."""
    return (
        check_is_admin(state, caller)
        or check_recipient(principal)
        or check_not_issuer(state, principal)
        or check_issuer_capacity(state)
    )


def validate_remove_issuer(
    state: LedgerState, caller: Principal, principal: Principal,
) -> LedgerErrorCode | None:
    return check_is_admin(state, caller) or check_is_issuer(state, principal)


def validate_set_issuance_fee(
    state: LedgerState, caller: Principal, fee: int,
) -> LedgerErrorCode | None:
    return check_is_admin(state, caller) or check_fee(fee)


def validate_set_grace_period(
    state: LedgerState, caller: Principal, period: int,
) -> LedgerErrorCode | None:
    return check_is_admin(state, caller) or check_grace_period(period)
