"""In-Memory Value Transfer — settles issuance fees against native balances.

Invariants:
    - Every settled transfer is appended to `settled` in execution order
    - reverse() undoes the most recent matching settlement exactly
    - Self-payments always succeed and leave native balances unchanged
    - Without native balances configured, every transfer succeeds (record-only)

Design Decisions:
    - Native balances are separate from ledger balances: the fee is paid in the
      host's native currency, not in carbon credits
"""

import logging

from carbon_ledger.core.domain_types import Principal
from carbon_ledger.core.errors import FeeTransferError
from carbon_ledger.core.ledger_state import FeeTransfer

logger = logging.getLogger(__name__)


class InMemoryValueTransfer:
    """ValueTransferExecutor backed by a dict of native balances."""

    def __init__(self, native_balances: dict[Principal, int] | None = None):
        self._native_balances = native_balances
        self.settled: list[FeeTransfer] = []

    def native_balance(self, principal: Principal) -> int | None:
        if self._native_balances is None:
            return None
        return self._native_balances.get(principal, 0)

    def settle(self, transfer: FeeTransfer) -> None:
        balances = self._native_balances
        if balances is not None and transfer.sender != transfer.recipient:
            available = balances.get(transfer.sender, 0)
            if available < transfer.amount:
                raise FeeTransferError(
                    f"{transfer.sender} holds {available}, needs {transfer.amount}",
                )
            self._move(transfer.sender, transfer.recipient, transfer.amount)
        self.settled.append(transfer)
        logger.info(
            f"Settled fee {transfer.amount} from {transfer.sender} to {transfer.recipient}",
            extra={"caller": transfer.sender, "amount": transfer.amount},
        )

    def reverse(self, transfer: FeeTransfer) -> None:
        """Compensate a settled transfer (recipient pays the sender back)."""
        for index in range(len(self.settled) - 1, -1, -1):
            if self.settled[index] == transfer:
                del self.settled[index]
                break
        else:
            raise FeeTransferError(f"no settled transfer {transfer} to reverse")
        if self._native_balances is not None and transfer.sender != transfer.recipient:
            self._move(transfer.recipient, transfer.sender, transfer.amount)
        logger.warning(
            f"Reversed fee {transfer.amount} from {transfer.sender} to {transfer.recipient}",
            extra={"caller": transfer.sender, "amount": transfer.amount},
        )

    def _move(self, source: Principal, destination: Principal, amount: int) -> None:
        balances = self._native_balances
        balances[source] = balances.get(source, 0) - amount
        balances[destination] = balances.get(destination, 0) + amount
