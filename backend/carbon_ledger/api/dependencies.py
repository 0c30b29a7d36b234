"""API Dependencies — ledger service singleton and host context from headers.

Invariants:
    - One LedgerService per process, installed by the lifespan (init_ledger_service)
    - Caller identity comes from the X-Caller header, height from X-Height

Design Decisions:
    - Module-level singleton mirrors db_manager: single-process uvicorn,
      the ledger is one shared state machine
    - Headers over body fields: the HTTP layer plays the host, so identity and
      height stay out of the operation arguments
"""

from fastapi import Header

from carbon_ledger.core.domain_types import Principal, Height
from carbon_ledger.services.ledger_host import HostContext
from carbon_ledger.services.ledger_service import LedgerService

_ledger_service: LedgerService | None = None


def init_ledger_service(service: LedgerService | None) -> None:
    global _ledger_service
    _ledger_service = service


def get_ledger_service() -> LedgerService:
    """FastAPI dependency for the process-wide ledger service."""
    if _ledger_service is None:
        raise RuntimeError("Ledger service not initialized")
    return _ledger_service


def get_host_context(
    x_caller: str = Header(),
    x_height: int = Header(0),
) -> HostContext:
    """FastAPI dependency building the per-request host context."""
    return HostContext(caller=Principal(x_caller), height=Height(x_height))
