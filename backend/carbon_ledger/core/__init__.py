"""Core Layer — pure ledger logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, db/ or config
    - enforce_* functions are pure and deterministic; only LedgerEngine mutates state

Design Decisions:
    - Functional core separated from imperative shell
"""
