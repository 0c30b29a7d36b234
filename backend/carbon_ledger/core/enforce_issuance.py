"""Issuance & Retirement Enforcement — ordered preconditions for mint and burn.

Invariants:
    - All functions are PURE: no IO, no side effects
    - Return LedgerErrorCode on violation, None on success
    - Mint order: NotAuthorized -> MintPaused -> InvalidAmount -> InvalidRecipient
      -> InvalidMetadata -> InvalidProjectType -> InvalidLocation -> MaxSupplyExceeded
    - Burn order: BurnPaused -> InvalidAmount -> InvalidRetirementReason
      -> InsufficientBalance

Design Decisions:
    - Generic metadata check runs before the enum check: an empty project type
      reports InvalidMetadata, never InvalidProjectType
    - Location length re-check kept separate from the emptiness check so the
      InvalidLocation code is only reachable for over-long locations
"""

from carbon_ledger.core.domain_types import (
    Principal, ProjectType, MAX_LOCATION_LENGTH,
)
from carbon_ledger.core.errors import LedgerErrorCode
from carbon_ledger.core.ledger_state import LedgerState
from carbon_ledger.core.enforce_admin import check_is_admin
from carbon_ledger.core.enforce_transfers import (
    check_positive_amount, check_recipient, check_sufficient_balance,
)


# --- Mint ---------------------------------------------------------------------

def check_mint_not_paused(state: LedgerState) -> LedgerErrorCode | None:
    if state.params.mint_paused:
        return LedgerErrorCode.MINT_PAUSED
    return None


def check_credit_metadata(
    offset_amount: int, location: str, project_type: str,
) -> LedgerErrorCode | None:
    """Offset must be positive; location and project type non-empty."""
    if offset_amount <= 0 or not location or not project_type:
        return LedgerErrorCode.INVALID_METADATA
    return None


def check_project_type(project_type: str) -> LedgerErrorCode | None:
    if not ProjectType.is_valid(project_type):
        return LedgerErrorCode.INVALID_PROJECT_TYPE
    return None


def check_location(location: str) -> LedgerErrorCode | None:
    if not location or len(location) > MAX_LOCATION_LENGTH:
        return LedgerErrorCode.INVALID_LOCATION
    return None


def check_max_supply(state: LedgerState, amount: int) -> LedgerErrorCode | None:
    if state.total_supply + amount > state.params.max_supply:
        return LedgerErrorCode.MAX_SUPPLY_EXCEEDED
    return None


def validate_mint(
    state: LedgerState, caller: Principal,
    amount: int, recipient: Principal,
    offset_amount: int, location: str, project_type: str,
) -> LedgerErrorCode | None:
    """Chain all mint checks. Returns first error or None."""
    return (
        check_is_admin(state, caller)
        or check_mint_not_paused(state)
        or check_positive_amount(amount)
        or check_recipient(recipient)
        or check_credit_metadata(offset_amount, location, project_type)
        or check_project_type(project_type)
        or check_location(location)
        or check_max_supply(state, amount)
    )


# --- Burn ---------------------------------------------------------------------

def check_burn_not_paused(state: LedgerState) -> LedgerErrorCode | None:
    if state.params.burn_paused:
        return LedgerErrorCode.BURN_PAUSED
    return None


def check_retirement_reason(reason: str) -> LedgerErrorCode | None:
    if not reason:
        return LedgerErrorCode.INVALID_RETIREMENT_REASON
    return None


def validate_burn(
    state: LedgerState, caller: Principal, amount: int, reason: str,
) -> LedgerErrorCode | None:
    """Chain all burn checks. Returns first error or None."""
    return (
        check_burn_not_paused(state)
        or check_positive_amount(amount)
        or check_retirement_reason(reason)
        or check_sufficient_balance(state, caller, amount)
    )
