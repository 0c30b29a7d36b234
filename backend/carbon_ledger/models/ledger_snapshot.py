"""LedgerSnapshot ORM — the current ledger state, overwritten per accepted operation.

Invariants:
    - At most one row, id CURRENT_SNAPSHOT_ID
    - snapshot holds ledger_state_to_snapshot() output, restorable as-is
    - History lives in the operation journal, not here

Design Decisions:
    - JSON column for the whole state: one write per operation, no per-map tables
    - height/total_supply denormalized for inspection without parsing JSON
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, BigInteger, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from carbon_ledger.db.base import Base

CURRENT_SNAPSHOT_ID = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerSnapshotRecord(Base):
    """Current ledger state."""
    __tablename__ = "ledger_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    height: Mapped[int] = mapped_column(BigInteger, nullable=False)
    total_supply: Mapped[int] = mapped_column(BigInteger, nullable=False)
    snapshot: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
