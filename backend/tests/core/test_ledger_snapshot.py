"""Ledger Snapshot — tests for state serialization.

Tests cover:
    - Snapshot is JSON-serializable (tuple keys and sets flattened)
    - Restored state matches the source and is independent of it
    - Empty / partial snapshots fall back to defaults
"""

import json

from carbon_ledger.core.domain_types import Height
from carbon_ledger.core.ledger_engine import LedgerEngine
from carbon_ledger.core.ledger_state import LedgerState, LedgerParams
from carbon_ledger.core.ledger_snapshot import (
    SNAPSHOT_VERSION,
    ledger_state_to_snapshot,
    ledger_state_from_snapshot,
)

from tests.core.ledger_fixtures import ADMIN, USER, OWNER, SPENDER, mint_default


def _busy_engine() -> LedgerEngine:
    engine = LedgerEngine(LedgerParams(max_issuers=5))
    mint_default(engine, height=Height(3))
    engine.approve(OWNER, SPENDER, 250)
    engine.burn(USER, Height(4), 100, "Offset")
    engine.add_issuer(ADMIN, OWNER)
    engine.pause_burn(ADMIN)
    return engine


def test_snapshot_is_json_safe():
    snapshot = ledger_state_to_snapshot(_busy_engine().state)
    restored = json.loads(json.dumps(snapshot))
    assert restored == snapshot
    assert snapshot["version"] == SNAPSHOT_VERSION
    assert snapshot["allowances"] == [{"owner": OWNER, "spender": SPENDER, "amount": 250}]
    assert snapshot["issuers"] == [OWNER]


def test_snapshot_preserves_state_through_json():
    source = _busy_engine().state
    data = json.loads(json.dumps(ledger_state_to_snapshot(source)))
    state = ledger_state_from_snapshot(data)

    assert state.total_supply == 900
    assert state.balance_of(USER) == 900
    assert state.allowance_of(OWNER, SPENDER) == 250
    assert state.is_issuer(OWNER)
    assert state.issuer_count == 1
    assert state.params.burn_paused is True
    assert state.params.max_issuers == 5
    assert state.credit_metadata[1000].height == 3
    assert state.credit_retirements[900].retiree == USER
    assert state == source


def test_restored_state_is_independent():
    source = _busy_engine().state
    state = ledger_state_from_snapshot(ledger_state_to_snapshot(source))
    state.balances[USER] = 0
    state.params.mint_paused = True
    assert source.balance_of(USER) == 900
    assert source.params.mint_paused is False


def test_empty_snapshot_gives_default_state():
    assert ledger_state_from_snapshot({}) == LedgerState()


def test_partial_snapshot_uses_defaults():
    state = ledger_state_from_snapshot({"total_supply": 5, "balances": {"ST1USER": 5}})
    assert state.total_supply == 5
    assert state.params == LedgerParams()
    assert state.issuers == set()


def test_unknown_param_keys_ignored():
    state = ledger_state_from_snapshot({"params": {"issuance_fee": 7, "retired_flag": True}})
    assert state.params.issuance_fee == 7
