"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure never contains ledger rules
    - SQLAlchemy errors mapped to DatabaseError at this boundary
"""
