"""Ledger Invariants — tests for the audit of supply and issuer bookkeeping."""

from carbon_ledger.core.ledger_invariants import audit_ledger
from carbon_ledger.core.ledger_state import LedgerState, LedgerParams

from tests.core.ledger_fixtures import USER, OWNER, SPENDER, mint_default


def test_fresh_state_is_consistent():
    assert audit_ledger(LedgerState()) == []


def test_engine_state_is_consistent(engine):
    mint_default(engine)
    assert audit_ledger(engine.state) == []


def test_balance_sum_mismatch():
    state = LedgerState(total_supply=10)
    state.balances = {USER: 9}
    violations = audit_ledger(state)
    assert len(violations) == 1
    assert "balance sum 9" in violations[0]


def test_supply_above_max():
    state = LedgerState(params=LedgerParams(max_supply=5), total_supply=6)
    state.balances = {USER: 6}
    assert any("exceeds max supply" in v for v in audit_ledger(state))


def test_negative_balances_and_allowances():
    state = LedgerState(total_supply=0)
    state.balances = {USER: -3, OWNER: 3}
    state.allowances = {(OWNER, SPENDER): -1}
    violations = audit_ledger(state)
    assert any("negative balances: ST1USER" in v for v in violations)
    assert any("ST1OWNER->ST1SPENDER" in v for v in violations)


def test_issuer_count_drift():
    state = LedgerState(issuer_count=2)
    state.issuers = {USER}
    assert audit_ledger(state) == ["issuer count 2 != 1 issuers"]
