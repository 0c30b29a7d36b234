"""Service Layer — the ledger host and its async orchestration.

Invariants:
    - Services call core; core never calls services
    - LedgerService owns the database transaction boundary
"""
