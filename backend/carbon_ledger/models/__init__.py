"""ORM Models — SQLAlchemy declarative models for ledger persistence.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from carbon_ledger.models.ledger_snapshot import LedgerSnapshotRecord  # noqa: F401
from carbon_ledger.models.ledger_operation import LedgerOperationRecord  # noqa: F401
