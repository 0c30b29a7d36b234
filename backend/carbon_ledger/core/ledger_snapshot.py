"""Ledger Snapshot — serialization / deserialization for LedgerState.

Invariants:
    - ledger_state_to_snapshot produces a JSON-safe dict (no sets, no tuple keys)
    - ledger_state_from_snapshot reconstructs an independent LedgerState
    - Missing keys fall back to LedgerState / LedgerParams defaults (forward-compatible)
    - Credit ids become string keys in JSON and integers again on load

Design Decisions:
    - Allowances stored as a list of {owner, spender, amount} rows: JSON objects
      cannot have tuple keys, and a delimiter-joined key could collide
    - Same format serves persistence and in-memory rollback
"""

from dataclasses import asdict, fields

from carbon_ledger.core.domain_types import Principal, CreditId, Height
from carbon_ledger.core.ledger_state import (
    LedgerParams, LedgerState, CreditMetadata, CreditRetirement,
)

SNAPSHOT_VERSION: int = 1


def ledger_state_to_snapshot(state: LedgerState) -> dict:
    """Serialize LedgerState to JSON-safe dict. Pure, no IO."""
    return {
        "version": SNAPSHOT_VERSION,
        "params": asdict(state.params),
        "total_supply": state.total_supply,
        "balances": dict(sorted(state.balances.items())),
        "allowances": [
            {"owner": owner, "spender": spender, "amount": amount}
            for (owner, spender), amount in sorted(state.allowances.items())
        ],
        "issuers": sorted(state.issuers),
        "issuer_count": state.issuer_count,
        "credit_metadata": {
            str(credit_id): asdict(record)
            for credit_id, record in sorted(state.credit_metadata.items())
        },
        "credit_retirements": {
            str(credit_id): asdict(record)
            for credit_id, record in sorted(state.credit_retirements.items())
        },
    }


def _params_from_snapshot(data: dict) -> LedgerParams:
    known = {f.name for f in fields(LedgerParams)}
    params = LedgerParams(**{k: v for k, v in data.items() if k in known})
    params.admin = Principal(params.admin)
    return params


def ledger_state_from_snapshot(data: dict) -> LedgerState:
    """Reconstruct LedgerState from snapshot dict. Pure, no IO."""
    state = LedgerState()
    if not data:
        return state

    state.params = _params_from_snapshot(data.get("params", {}))
    state.total_supply = data.get("total_supply", 0)
    state.balances = {
        Principal(p): amount for p, amount in data.get("balances", {}).items()
    }
    state.allowances = {
        (Principal(row["owner"]), Principal(row["spender"])): row["amount"]
        for row in data.get("allowances", [])
    }
    state.issuers = {Principal(p) for p in data.get("issuers", [])}
    state.issuer_count = data.get("issuer_count", len(state.issuers))

    for key, record in data.get("credit_metadata", {}).items():
        state.credit_metadata[CreditId(int(key))] = CreditMetadata(
            offset_amount=record["offset_amount"],
            height=Height(record["height"]),
            location=record["location"],
            project_type=record["project_type"],
            verifier=Principal(record["verifier"]),
            status=record.get("status", True),
        )
    for key, record in data.get("credit_retirements", {}).items():
        state.credit_retirements[CreditId(int(key))] = CreditRetirement(
            reason=record["reason"],
            height=Height(record["height"]),
            retiree=Principal(record["retiree"]),
        )
    return state
