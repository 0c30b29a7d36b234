"""SQL Ledger Repository — current-state snapshot and operation journal on SQLAlchemy.

Invariants:
    - Methods flush, never commit: the service owns the transaction boundary
    - save_snapshot overwrites the single current row (table never grows)
    - current_snapshot returns None on an empty database
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carbon_ledger.models.ledger_snapshot import LedgerSnapshotRecord, CURRENT_SNAPSHOT_ID
from carbon_ledger.models.ledger_operation import LedgerOperationRecord


class SqlLedgerRepository:
    """Implements LedgerRepository (snapshot store + operation journal)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_snapshot(
        self, snapshot: dict, height: int, total_supply: int,
    ) -> None:
        record = await self.db.get(LedgerSnapshotRecord, CURRENT_SNAPSHOT_ID)
        if record is None:
            self.db.add(LedgerSnapshotRecord(
                id=CURRENT_SNAPSHOT_ID,
                height=height,
                total_supply=total_supply,
                snapshot=snapshot,
            ))
        else:
            record.height = height
            record.total_supply = total_supply
            record.snapshot = snapshot
        await self.db.flush()

    async def current_snapshot(self) -> dict | None:
        """Current row as {"height", "total_supply", "snapshot"}."""
        record = await self.db.get(LedgerSnapshotRecord, CURRENT_SNAPSHOT_ID)
        if record is None:
            return None
        return {
            "height": record.height,
            "total_supply": record.total_supply,
            "snapshot": record.snapshot,
        }

    async def record_operation(
        self,
        operation: str,
        caller: str,
        height: int,
        arguments: dict,
        ok: bool,
        error_code: int | None,
    ) -> None:
        self.db.add(LedgerOperationRecord(
            operation=operation,
            caller=caller,
            height=height,
            arguments=arguments,
            ok=ok,
            error_code=error_code,
        ))
        await self.db.flush()

    async def list_operations(
        self, limit: int = 50, offset: int = 0,
    ) -> list[LedgerOperationRecord]:
        result = await self.db.execute(
            select(LedgerOperationRecord)
            .order_by(LedgerOperationRecord.id.desc())
            .limit(limit)
            .offset(offset),
        )
        return list(result.scalars().all())
