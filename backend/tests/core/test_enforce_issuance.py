"""Issuance Enforcement — tests for mint and burn precondition chains.

Tests cover:
    - check_credit_metadata rejects non-positive offsets and empty strings
    - check_project_type accepts only forest / renewable / soil
    - check_location length boundary
    - check_max_supply is inclusive of the cap
    - validate_mint / validate_burn report the first violation
"""

from carbon_ledger.core.domain_types import NULL_PRINCIPAL, MAX_LOCATION_LENGTH
from carbon_ledger.core.errors import LedgerErrorCode
from carbon_ledger.core.ledger_state import LedgerState, LedgerParams
from carbon_ledger.core.enforce_issuance import (
    check_mint_not_paused,
    check_credit_metadata,
    check_project_type,
    check_location,
    check_max_supply,
    check_burn_not_paused,
    check_retirement_reason,
    validate_mint,
    validate_burn,
)

from tests.core.ledger_fixtures import ADMIN, USER


# ─── mint checks ─────────────────────────────────────────────────

def test_mint_pause_flag():
    state = LedgerState()
    assert check_mint_not_paused(state) is None
    state.params.mint_paused = True
    assert check_mint_not_paused(state) == LedgerErrorCode.MINT_PAUSED


def test_credit_metadata_requirements():
    assert check_credit_metadata(1, "ForestA", "forest") is None
    assert check_credit_metadata(0, "ForestA", "forest") == LedgerErrorCode.INVALID_METADATA
    assert check_credit_metadata(1, "", "forest") == LedgerErrorCode.INVALID_METADATA
    assert check_credit_metadata(1, "ForestA", "") == LedgerErrorCode.INVALID_METADATA


def test_project_type_closed_set():
    for value in ("forest", "renewable", "soil"):
        assert check_project_type(value) is None
    assert check_project_type("Forest") == LedgerErrorCode.INVALID_PROJECT_TYPE
    assert check_project_type("ocean") == LedgerErrorCode.INVALID_PROJECT_TYPE


def test_location_length_boundary():
    assert check_location("x" * MAX_LOCATION_LENGTH) is None
    assert check_location("x" * (MAX_LOCATION_LENGTH + 1)) == LedgerErrorCode.INVALID_LOCATION


def test_max_supply_cap_inclusive():
    state = LedgerState(params=LedgerParams(max_supply=100), total_supply=60)
    assert check_max_supply(state, 40) is None
    assert check_max_supply(state, 41) == LedgerErrorCode.MAX_SUPPLY_EXCEEDED


# ─── validate_mint ───────────────────────────────────────────────

def test_validate_mint_passes():
    state = LedgerState()
    assert validate_mint(state, ADMIN, 10, USER, 10, "ForestA", "forest") is None


def test_validate_mint_empty_project_type_is_metadata_error():
    error = validate_mint(LedgerState(), ADMIN, 10, USER, 10, "ForestA", "")
    assert error == LedgerErrorCode.INVALID_METADATA


def test_validate_mint_long_location():
    error = validate_mint(LedgerState(), ADMIN, 10, USER, 10, "x" * 101, "soil")
    assert error == LedgerErrorCode.INVALID_LOCATION


def test_validate_mint_amount_before_recipient():
    error = validate_mint(LedgerState(), ADMIN, 0, NULL_PRINCIPAL, 10, "ForestA", "soil")
    assert error == LedgerErrorCode.INVALID_AMOUNT


def test_validate_mint_non_admin_first():
    state = LedgerState()
    state.params.mint_paused = True
    error = validate_mint(state, USER, 0, NULL_PRINCIPAL, 0, "", "")
    assert error == LedgerErrorCode.NOT_AUTHORIZED


# ─── burn checks ─────────────────────────────────────────────────

def test_burn_pause_flag():
    state = LedgerState()
    state.params.burn_paused = True
    assert check_burn_not_paused(state) == LedgerErrorCode.BURN_PAUSED


def test_retirement_reason_required():
    assert check_retirement_reason("Offset") is None
    assert check_retirement_reason("") == LedgerErrorCode.INVALID_RETIREMENT_REASON


def test_validate_burn_reason_before_balance():
    error = validate_burn(LedgerState(), USER, 10, "")
    assert error == LedgerErrorCode.INVALID_RETIREMENT_REASON


def test_validate_burn_balance_last():
    state = LedgerState(total_supply=5)
    state.balances = {USER: 5}
    assert validate_burn(state, USER, 5, "Offset") is None
    assert validate_burn(state, USER, 6, "Offset") == LedgerErrorCode.INSUFFICIENT_BALANCE
