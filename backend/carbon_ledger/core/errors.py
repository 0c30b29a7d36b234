"""Error Hierarchy — numeric ledger codes plus typed exceptions for the shell.

Invariants:
    - LedgerErrorCode values are a public contract (callers and tests assert on them)
    - The engine never raises for a failed precondition — it returns the code
    - Shell exceptions carry code (str), category, severity and http_status
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - IntEnum for ledger codes: compares equal to the bare numbers callers use
    - Single hierarchy with CarbonLedgerError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any
from datetime import datetime, timezone


class LedgerErrorCode(IntEnum):
    """Failure codes returned by LedgerEngine operations."""
    NOT_AUTHORIZED = 100
    INVALID_AMOUNT = 101
    NOT_VERIFIED = 102  # reserved, no operation returns it
    INVALID_METADATA = 103
    INSUFFICIENT_BALANCE = 104
    MAX_SUPPLY_EXCEEDED = 105
    MINT_PAUSED = 107
    BURN_PAUSED = 108
    INVALID_RECIPIENT = 109
    INVALID_ISSUER = 110
    ALREADY_ISSUED = 111
    INVALID_LOCATION = 114
    INVALID_PROJECT_TYPE = 115
    MAX_ISSUERS_EXCEEDED = 120
    INVALID_FEE = 121
    INVALID_GRACE_PERIOD = 123
    INVALID_RETIREMENT_REASON = 124


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    SETTLEMENT = "settlement"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    caller: str | None = None
    height: int | None = None
    debug_info: dict[str, Any] | None = None


class CarbonLedgerError(Exception):
    """Base exception for all carbon ledger shell errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "caller": self.context.caller,
                    "height": self.context.height,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class LedgerOperationError(CarbonLedgerError):
    """A ledger operation was rejected by one of its preconditions."""
    def __init__(self, ledger_code: LedgerErrorCode, context: ErrorContext | None = None):
        is_auth = ledger_code == LedgerErrorCode.NOT_AUTHORIZED
        super().__init__(
            f"Ledger operation rejected: {ledger_code.name} ({ledger_code.value})",
            ledger_code.name,
            ErrorCategory.AUTHORIZATION if is_auth else ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 403 if is_auth else 400,
        )
        self.ledger_code = ledger_code

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["ledger_code"] = self.ledger_code.value
        return response


class HeightRegressionError(CarbonLedgerError):
    """Host supplied a height lower than one already observed."""
    def __init__(self, last_height: int, height: int, context: ErrorContext | None = None):
        super().__init__(
            f"Height {height} is below last observed height {last_height}",
            "HEIGHT_REGRESSION", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.last_height = last_height
        self.height = height


class FeeTransferError(CarbonLedgerError):
    """Issuance-fee transfer could not be executed; mint was rolled back."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Issuance fee transfer failed: {message}",
            "FEE_TRANSFER_FAILED", ErrorCategory.SETTLEMENT,
            ErrorSeverity.ERROR, context, 402,
        )


class ResourceNotFoundError(CarbonLedgerError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class InvariantViolationError(CarbonLedgerError):
    """Post-operation audit found the ledger in an inconsistent state."""
    def __init__(self, violations: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Ledger invariants violated: {'; '.join(violations)}",
            "INVARIANT_VIOLATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.violations = violations


class DatabaseError(CarbonLedgerError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
