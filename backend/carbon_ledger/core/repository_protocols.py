"""Boundary Protocols — contracts between the ledger core and its shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Fee settlement and persistence accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - ValueTransferExecutor is sync: it runs inside the host's atomic section;
      persistence protocols are async because their implementations do IO
"""

from typing import Protocol

from carbon_ledger.core.ledger_state import FeeTransfer


class ValueTransferExecutor(Protocol):
    """Settles the issuance-fee payment emitted by mint.

    settle() raises FeeTransferError when the transfer cannot be completed.
    reverse() compensates an earlier settle() of the same transfer; the host
    calls it when the operation that emitted the fee is rolled back.
    """
    def settle(self, transfer: FeeTransfer) -> None: ...
    def reverse(self, transfer: FeeTransfer) -> None: ...


class LedgerSnapshotRepository(Protocol):
    """Contract for the current-state snapshot store — implemented by shell."""
    async def save_snapshot(
        self, snapshot: dict, height: int, total_supply: int,
    ) -> None: ...
    async def current_snapshot(self) -> dict | None: ...


class OperationJournal(Protocol):
    """Contract for the per-operation audit journal — implemented by shell."""
    async def record_operation(
        self,
        operation: str,
        caller: str,
        height: int,
        arguments: dict,
        ok: bool,
        error_code: int | None,
    ) -> None: ...


class LedgerRepository(LedgerSnapshotRepository, OperationJournal, Protocol):
    """Snapshot store and journal sharing one unit of work."""
