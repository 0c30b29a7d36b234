"""LedgerOperation ORM — journal of every ledger operation, accepted or rejected.

Invariants:
    - One row per host execute() call that reached the engine
    - error_code is NULL exactly when ok is true

Design Decisions:
    - Logging table, not enforcement: no ledger rule reads it back
    - JSON column for arguments: operation signatures differ
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, BigInteger, String, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from carbon_ledger.db.base import Base


class LedgerOperationRecord(Base):
    """Journal entry — observability for ledger calls."""
    __tablename__ = "ledger_operations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    operation: Mapped[str] = mapped_column(String(32), nullable=False)
    caller: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    height: Mapped[int] = mapped_column(BigInteger, nullable=False)
    arguments: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    ok: Mapped[bool] = mapped_column(Boolean, nullable=False)
    error_code: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
