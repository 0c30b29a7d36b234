"""Ledger Service — async orchestration of host execution, journal and snapshot.

Invariants:
    - One operation at a time: apply + persist + settle run under one asyncio.Lock
    - Every operation the engine accepts or rejects is journaled; host failures
      (height regression, fee failure, invariant breach) roll back and are not
    - Accepted operations overwrite the current snapshot (when persist_snapshots is on)
    - Order per operation: apply -> journal/snapshot flush -> settle fee -> commit.
      A failure at any step leaves state, height, fees and database as before

Design Decisions:
    - Service owns the commit: repository methods only flush
    - Fee settled after the flush so a broken write never moves value; a failed
      commit after settlement is compensated through LedgerHost.rollback()
"""

import asyncio
import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from carbon_ledger.core.domain_types import LedgerOperation
from carbon_ledger.core.errors import (
    DatabaseError, FeeTransferError, LedgerOperationError, ErrorContext,
)
from carbon_ledger.core.ledger_state import LedgerResult
from carbon_ledger.core.repository_protocols import LedgerRepository
from carbon_ledger.infrastructure.ledger_repository import SqlLedgerRepository
from carbon_ledger.services.ledger_host import LedgerHost, HostContext

logger = logging.getLogger(__name__)


class LedgerService:
    """Runs ledger operations against a LedgerHost with durable side effects."""

    def __init__(
        self,
        host: LedgerHost,
        persist_snapshots: bool = True,
        repository_factory: Callable[[AsyncSession], LedgerRepository] = SqlLedgerRepository,
    ):
        self.host = host
        self._persist_snapshots = persist_snapshots
        self._repository_factory = repository_factory
        self._lock = asyncio.Lock()

    async def run(
        self,
        db: AsyncSession,
        operation: LedgerOperation | str,
        ctx: HostContext,
        **arguments: object,
    ) -> LedgerResult:
        op = LedgerOperation(operation)
        async with self._lock:
            checkpoint = self.host.checkpoint()
            result = self.host.apply(op, ctx, **arguments)
            try:
                await self._record(db, op, ctx, arguments, result)
                if result.fee_transfer is not None:
                    self.host.settle_fee(op, ctx, result.fee_transfer, checkpoint)
                await db.commit()
            except FeeTransferError:
                await db.rollback()
                raise
            except (SQLAlchemyError, DatabaseError) as e:
                await db.rollback()
                self.host.rollback(checkpoint)
                logger.error(
                    f"Persisting {op.value} failed, state restored: {e}",
                    extra={"operation": op.value, "caller": ctx.caller, "height": ctx.height},
                )
                if isinstance(e, DatabaseError):
                    raise
                raise DatabaseError(str(e), "commit")
            return result

    async def run_or_raise(
        self,
        db: AsyncSession,
        operation: LedgerOperation | str,
        ctx: HostContext,
        **arguments: object,
    ) -> LedgerResult:
        """Like run(), but a rejected operation raises LedgerOperationError."""
        result = await self.run(db, operation, ctx, **arguments)
        if not result.ok:
            raise LedgerOperationError(
                result.error_code,
                ErrorContext(
                    operation=LedgerOperation(operation).value,
                    caller=ctx.caller, height=ctx.height,
                ),
            )
        return result

    async def restore_snapshot(self, db: AsyncSession) -> bool:
        """Load the persisted snapshot into the host. False if none exists."""
        current = await self._repository_factory(db).current_snapshot()
        if current is None:
            return False
        self.host.restore(current["snapshot"])
        self.host.last_height = max(self.host.last_height, current["height"])
        logger.info(
            f"Ledger restored at supply {current['total_supply']}",
            extra={"height": current["height"]},
        )
        return True

    async def _record(
        self,
        db: AsyncSession,
        op: LedgerOperation,
        ctx: HostContext,
        arguments: dict,
        result: LedgerResult,
    ) -> None:
        repo = self._repository_factory(db)
        await repo.record_operation(
            op.value, ctx.caller, ctx.height, arguments, result.ok,
            int(result.error_code) if result.error_code is not None else None,
        )
        if result.ok and self._persist_snapshots:
            await repo.save_snapshot(
                self.host.snapshot(), ctx.height, self.host.engine.get_total_supply(),
            )
