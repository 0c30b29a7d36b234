"""Ledger State — all mutable ledger data owned by one LedgerEngine.

Invariants:
    - sum(balances.values()) == total_supply at every observable point
    - issuer_count == len(issuers)
    - allowances keyed by (owner, spender) tuple, never by concatenated string
    - Credit records are written once per id; a later mint/burn landing on the
      same id replaces the earlier record

Design Decisions:
    - Dataclasses with computed properties: pure, deterministic, testable without mocks
    - LedgerParams separate from maps: genesis configuration is explicit and per-instance,
      so several ledgers can coexist in one process
    - LedgerResult carries the optional FeeTransfer: the host settles it atomically
"""

from dataclasses import dataclass, field
from typing import Any

from carbon_ledger.core.domain_types import (
    Principal, CreditId, Height,
    DEFAULT_ADMIN, DEFAULT_ISSUANCE_FEE, DEFAULT_MAX_ISSUERS,
    DEFAULT_GRACE_PERIOD, DEFAULT_TOKEN_URI, DEFAULT_MAX_SUPPLY,
)
from carbon_ledger.core.errors import LedgerErrorCode


@dataclass
class LedgerParams:
    """Global parameters — initialized once, changed only by admin setters."""
    admin: Principal = DEFAULT_ADMIN
    issuance_fee: int = DEFAULT_ISSUANCE_FEE
    max_issuers: int = DEFAULT_MAX_ISSUERS
    grace_period: int = DEFAULT_GRACE_PERIOD
    token_uri: str = DEFAULT_TOKEN_URI
    mint_paused: bool = False
    burn_paused: bool = False
    max_supply: int = DEFAULT_MAX_SUPPLY


@dataclass(frozen=True)
class CreditMetadata:
    """Issued credit record, written by mint."""
    offset_amount: int
    height: Height
    location: str
    project_type: str
    verifier: Principal
    status: bool = True


@dataclass(frozen=True)
class CreditRetirement:
    """Retirement record, written by burn."""
    reason: str
    height: Height
    retiree: Principal


@dataclass(frozen=True)
class FeeTransfer:
    """Value-transfer instruction the host must settle with the mutation."""
    amount: int
    sender: Principal
    recipient: Principal


@dataclass(frozen=True)
class LedgerResult:
    """Tagged operation result: ok with a payload, or a failure code."""
    ok: bool
    value: Any = True
    error_code: LedgerErrorCode | None = None
    fee_transfer: FeeTransfer | None = None

    @classmethod
    def success(
        cls, value: Any = True, fee_transfer: FeeTransfer | None = None,
    ) -> "LedgerResult":
        return cls(ok=True, value=value, fee_transfer=fee_transfer)

    @classmethod
    def failure(cls, code: LedgerErrorCode) -> "LedgerResult":
        return cls(ok=False, value=int(code), error_code=code)


@dataclass
class LedgerState:
    """Complete ledger state — pure dataclass, no IO."""

    params: LedgerParams = field(default_factory=LedgerParams)
    total_supply: int = 0

    balances: dict[Principal, int] = field(default_factory=dict)
    allowances: dict[tuple[Principal, Principal], int] = field(default_factory=dict)

    # Issuer membership plus its explicit counter
    issuers: set[Principal] = field(default_factory=set)
    issuer_count: int = 0

    credit_metadata: dict[CreditId, CreditMetadata] = field(default_factory=dict)
    credit_retirements: dict[CreditId, CreditRetirement] = field(default_factory=dict)

    def balance_of(self, principal: Principal) -> int:
        return self.balances.get(principal, 0)

    def allowance_of(self, owner: Principal, spender: Principal) -> int:
        return self.allowances.get((owner, spender), 0)

    def is_issuer(self, principal: Principal) -> bool:
        return principal in self.issuers

    @property
    def balance_sum(self) -> int:
        return sum(self.balances.values())
