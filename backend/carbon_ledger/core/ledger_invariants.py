"""Ledger Invariant Audit — checks the supply and issuer bookkeeping rules.

Invariants:
    - audit_ledger is PURE: returns violation messages, never mutates or raises
    - Empty list means the state is consistent
"""

from carbon_ledger.core.ledger_state import LedgerState


def audit_ledger(state: LedgerState) -> list[str]:
    """Return every violated ledger invariant as a human-readable message."""
    violations: list[str] = []

    if state.balance_sum != state.total_supply:
        violations.append(
            f"balance sum {state.balance_sum} != total supply {state.total_supply}",
        )
    if state.total_supply > state.params.max_supply:
        violations.append(
            f"total supply {state.total_supply} exceeds max supply {state.params.max_supply}",
        )
    if state.total_supply < 0:
        violations.append(f"total supply is negative ({state.total_supply})")

    negative = sorted(p for p, amount in state.balances.items() if amount < 0)
    if negative:
        violations.append(f"negative balances: {', '.join(negative)}")

    overdrawn = sorted(
        f"{owner}->{spender}"
        for (owner, spender), amount in state.allowances.items() if amount < 0
    )
    if overdrawn:
        violations.append(f"negative allowances: {', '.join(overdrawn)}")

    if state.issuer_count != len(state.issuers):
        violations.append(
            f"issuer count {state.issuer_count} != {len(state.issuers)} issuers",
        )

    return violations
