"""Transfer Enforcement — tests for pure transfer and allowance checks.

Tests cover:
    - check_positive_amount rejects zero and negatives
    - check_recipient rejects the null principal only
    - check_sufficient_balance / check_allowance thresholds
    - validate_transfer and validate_transfer_from chain order
"""

from carbon_ledger.core.domain_types import Principal, NULL_PRINCIPAL
from carbon_ledger.core.errors import LedgerErrorCode
from carbon_ledger.core.ledger_state import LedgerState
from carbon_ledger.core.enforce_transfers import (
    check_positive_amount,
    check_recipient,
    check_sufficient_balance,
    check_caller_is_sender,
    check_allowance,
    validate_transfer,
    validate_approve,
    validate_transfer_from,
)

from tests.core.ledger_fixtures import USER, USER2, OWNER, SPENDER, RECIPIENT


def _funded_state() -> LedgerState:
    """Helper: USER and OWNER hold 100 each, SPENDER may move 50 of OWNER's."""
    state = LedgerState(total_supply=200)
    state.balances = {USER: 100, OWNER: 100}
    state.allowances = {(OWNER, SPENDER): 50}
    return state


# ─── single checks ───────────────────────────────────────────────

def test_positive_amount():
    assert check_positive_amount(1) is None
    assert check_positive_amount(0) == LedgerErrorCode.INVALID_AMOUNT
    assert check_positive_amount(-1) == LedgerErrorCode.INVALID_AMOUNT


def test_recipient_null_principal_rejected():
    assert check_recipient(NULL_PRINCIPAL) == LedgerErrorCode.INVALID_RECIPIENT
    assert check_recipient(USER) is None


def test_sufficient_balance_boundary():
    state = _funded_state()
    assert check_sufficient_balance(state, USER, 100) is None
    assert check_sufficient_balance(state, USER, 101) == LedgerErrorCode.INSUFFICIENT_BALANCE


def test_unknown_holder_has_zero_balance():
    state = _funded_state()
    assert check_sufficient_balance(state, Principal("ST9NOBODY"), 1) == LedgerErrorCode.INSUFFICIENT_BALANCE


def test_caller_must_be_sender():
    assert check_caller_is_sender(USER, USER) is None
    assert check_caller_is_sender(USER2, USER) == LedgerErrorCode.NOT_AUTHORIZED


def test_allowance_boundary():
    state = _funded_state()
    assert check_allowance(state, OWNER, SPENDER, 50) is None
    assert check_allowance(state, OWNER, SPENDER, 51) == LedgerErrorCode.NOT_AUTHORIZED
    assert check_allowance(state, SPENDER, OWNER, 1) == LedgerErrorCode.NOT_AUTHORIZED


# ─── validate_transfer ───────────────────────────────────────────

def test_validate_transfer_passes():
    assert validate_transfer(_funded_state(), USER, 100, USER, USER2) is None


def test_validate_transfer_caller_checked_first():
    error = validate_transfer(_funded_state(), USER2, 0, USER, NULL_PRINCIPAL)
    assert error == LedgerErrorCode.NOT_AUTHORIZED


def test_validate_transfer_balance_checked_last():
    error = validate_transfer(_funded_state(), USER, 500, USER, USER2)
    assert error == LedgerErrorCode.INSUFFICIENT_BALANCE


# ─── validate_approve ────────────────────────────────────────────

def test_validate_approve():
    assert validate_approve(1) is None
    assert validate_approve(0) == LedgerErrorCode.INVALID_AMOUNT


# ─── validate_transfer_from ──────────────────────────────────────

def test_validate_transfer_from_passes():
    assert validate_transfer_from(_funded_state(), SPENDER, OWNER, RECIPIENT, 50) is None


def test_validate_transfer_from_recipient_before_allowance():
    error = validate_transfer_from(_funded_state(), USER2, OWNER, NULL_PRINCIPAL, 5)
    assert error == LedgerErrorCode.INVALID_RECIPIENT


def test_validate_transfer_from_allowance_before_balance():
    state = _funded_state()
    state.balances[OWNER] = 10
    assert validate_transfer_from(state, SPENDER, OWNER, RECIPIENT, 60) == LedgerErrorCode.NOT_AUTHORIZED
    assert validate_transfer_from(state, SPENDER, OWNER, RECIPIENT, 40) == LedgerErrorCode.INSUFFICIENT_BALANCE
