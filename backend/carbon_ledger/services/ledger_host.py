"""Ledger Host — supplies caller identity and height, settles fees atomically.

Invariants:
    - Operations are serialized: one apply()/execute() runs at a time per host
    - Heights are non-decreasing; a lower height raises HeightRegressionError
      before the engine is touched
    - A mint whose fee transfer fails is rolled back in full (FeeTransferError)
    - With audit enabled, a state failing audit_ledger is rolled back
      (InvariantViolationError)
    - rollback(checkpoint) restores state and height, and reverses every fee
      settled since the checkpoint (newest first)
    - Rejected operations never reach the executor

Design Decisions:
    - Rollback via snapshot restore: the engine mutates in place, the host keeps
      the pre-operation checkpoint and swaps it back on failure
    - apply() and settle_fee() are separate steps so a persisting caller can
      settle only after its own writes succeeded; execute() chains both
    - Dispatch by LedgerOperation name: one entry point for HTTP, tests and journal
"""

import logging
import threading
from dataclasses import dataclass

from carbon_ledger.config import Settings
from carbon_ledger.core.domain_types import Principal, Height, LedgerOperation
from carbon_ledger.core.errors import (
    ErrorContext, FeeTransferError, HeightRegressionError,
    InvariantViolationError, LedgerOperationError,
)
from carbon_ledger.core.ledger_engine import LedgerEngine
from carbon_ledger.core.ledger_invariants import audit_ledger
from carbon_ledger.core.ledger_snapshot import (
    ledger_state_to_snapshot, ledger_state_from_snapshot,
)
from carbon_ledger.core.ledger_state import LedgerParams, LedgerResult, FeeTransfer
from carbon_ledger.core.repository_protocols import ValueTransferExecutor
from carbon_ledger.services.value_transfer import InMemoryValueTransfer

logger = logging.getLogger(__name__)

# Operations whose engine method takes the current height after the caller
HEIGHT_AWARE_OPERATIONS: frozenset[LedgerOperation] = frozenset({
    LedgerOperation.MINT, LedgerOperation.BURN,
})


@dataclass(frozen=True)
class HostContext:
    """Per-call host inputs."""
    caller: Principal
    height: Height = Height(0)


@dataclass(frozen=True)
class HostCheckpoint:
    """Everything rollback() needs to undo one operation."""
    snapshot: dict
    last_height: int
    fee_count: int


class LedgerHost:
    """Runs engine operations the way a chain runtime would."""

    def __init__(
        self,
        engine: LedgerEngine,
        transfer_executor: ValueTransferExecutor | None = None,
        audit: bool = False,
        last_height: int = 0,
    ):
        self.engine = engine
        self.executor = transfer_executor or InMemoryValueTransfer()
        self._audit = audit
        self._lock = threading.Lock()
        self.last_height = last_height
        self.fee_transfers: list[FeeTransfer] = []

    def snapshot(self) -> dict:
        return ledger_state_to_snapshot(self.engine.state)

    def restore(self, snapshot: dict) -> None:
        self.engine.replace_state(ledger_state_from_snapshot(snapshot))

    def checkpoint(self) -> HostCheckpoint:
        return HostCheckpoint(
            snapshot=self.snapshot(),
            last_height=self.last_height,
            fee_count=len(self.fee_transfers),
        )

    def rollback(self, checkpoint: HostCheckpoint) -> None:
        """Return to checkpoint, reversing fees settled after it."""
        while len(self.fee_transfers) > checkpoint.fee_count:
            self.executor.reverse(self.fee_transfers.pop())
        self.restore(checkpoint.snapshot)
        self.last_height = checkpoint.last_height

    def execute(
        self, operation: LedgerOperation | str, ctx: HostContext, **arguments: object,
    ) -> LedgerResult:
        """Run one operation and settle its fee. Raises only on host failures."""
        op = LedgerOperation(operation)
        with self._lock:
            checkpoint = self.checkpoint()
            result = self._apply(op, ctx, arguments, checkpoint)
            if result.fee_transfer is not None:
                self._settle(op, ctx, result.fee_transfer, checkpoint)
            return result

    def apply(
        self, operation: LedgerOperation | str, ctx: HostContext, **arguments: object,
    ) -> LedgerResult:
        """Validate, mutate and audit without settling the fee.

        The caller must follow an accepted result carrying a fee_transfer with
        settle_fee(), or roll back to a checkpoint taken before this call.
        """
        op = LedgerOperation(operation)
        with self._lock:
            return self._apply(op, ctx, arguments, self.checkpoint())

    def settle_fee(
        self,
        operation: LedgerOperation | str,
        ctx: HostContext,
        transfer: FeeTransfer,
        checkpoint: HostCheckpoint,
    ) -> None:
        """Settle a fee emitted by apply(); on failure roll back to checkpoint."""
        with self._lock:
            self._settle(LedgerOperation(operation), ctx, transfer, checkpoint)

    def execute_or_raise(
        self, operation: LedgerOperation | str, ctx: HostContext, **arguments: object,
    ) -> LedgerResult:
        """Like execute(), but a rejected operation raises LedgerOperationError."""
        result = self.execute(operation, ctx, **arguments)
        if not result.ok:
            raise LedgerOperationError(
                result.error_code, _error_context(LedgerOperation(operation), ctx),
            )
        return result

    # ─── Internals ───────────────────────────────────────────────

    def _apply(
        self,
        op: LedgerOperation,
        ctx: HostContext,
        arguments: dict,
        checkpoint: HostCheckpoint,
    ) -> LedgerResult:
        self._observe_height(op, ctx)
        result = self._dispatch(op, ctx, arguments)
        if result.ok and self._audit:
            self._verify(op, ctx, checkpoint)
        return result

    def _observe_height(self, op: LedgerOperation, ctx: HostContext) -> None:
        if ctx.height < self.last_height:
            raise HeightRegressionError(
                self.last_height, ctx.height, _error_context(op, ctx),
            )
        self.last_height = ctx.height

    def _dispatch(
        self, op: LedgerOperation, ctx: HostContext, arguments: dict,
    ) -> LedgerResult:
        handler = getattr(self.engine, op.value)
        if op in HEIGHT_AWARE_OPERATIONS:
            return handler(ctx.caller, ctx.height, **arguments)
        return handler(ctx.caller, **arguments)

    def _settle(
        self,
        op: LedgerOperation,
        ctx: HostContext,
        transfer: FeeTransfer,
        checkpoint: HostCheckpoint,
    ) -> None:
        try:
            self.executor.settle(transfer)
        except FeeTransferError as e:
            self.rollback(checkpoint)
            e.context = _error_context(op, ctx)
            logger.warning(
                f"Fee settlement failed, {op.value} rolled back: {e.message}",
                extra={"operation": op.value, "caller": ctx.caller, "height": ctx.height},
            )
            raise
        self.fee_transfers.append(transfer)

    def _verify(
        self, op: LedgerOperation, ctx: HostContext, checkpoint: HostCheckpoint,
    ) -> None:
        violations = audit_ledger(self.engine.state)
        if violations:
            self.rollback(checkpoint)
            logger.error(
                f"Invariant audit failed after {op.value}: {violations}",
                extra={"operation": op.value, "caller": ctx.caller, "height": ctx.height},
            )
            raise InvariantViolationError(violations, _error_context(op, ctx))


def _error_context(op: LedgerOperation, ctx: HostContext) -> ErrorContext:
    return ErrorContext(operation=op.value, caller=ctx.caller, height=ctx.height)


def params_from_settings(settings: Settings) -> LedgerParams:
    """Genesis parameters from environment-driven settings."""
    return LedgerParams(
        admin=Principal(settings.ledger_admin),
        issuance_fee=settings.ledger_issuance_fee,
        max_issuers=settings.ledger_max_issuers,
        grace_period=settings.ledger_grace_period,
        token_uri=settings.ledger_token_uri,
        max_supply=settings.ledger_max_supply,
    )


def build_ledger_host(
    settings: Settings, transfer_executor: ValueTransferExecutor | None = None,
) -> LedgerHost:
    """Fresh host + engine from settings (no persisted state)."""
    return LedgerHost(
        LedgerEngine(params_from_settings(settings)),
        transfer_executor,
        audit=settings.ledger_audit_invariants,
        last_height=settings.ledger_initial_height,
    )
