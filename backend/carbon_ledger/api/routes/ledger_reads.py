"""Ledger Reads — read accessors, parameters, invariant audit and journal.

Invariants:
    - Read routes never mutate ledger state and need no caller header
    - Missing credit / retirement records return 404 (ResourceNotFoundError)
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from carbon_ledger.core.domain_types import Principal
from carbon_ledger.core.errors import ResourceNotFoundError
from carbon_ledger.core.ledger_invariants import audit_ledger
from carbon_ledger.infrastructure.database import get_db
from carbon_ledger.infrastructure.ledger_repository import SqlLedgerRepository
from carbon_ledger.api.dependencies import get_ledger_service
from carbon_ledger.schemas.ledger import (
    TokenInfoResponse, CreditMetadataResponse,
    CreditRetirementResponse, LedgerParamsResponse,
)
from carbon_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/api/v1/ledger", tags=["ledger"])


@router.get("/token", response_model=TokenInfoResponse)
async def token_info(service: LedgerService = Depends(get_ledger_service)):
    engine = service.host.engine
    return TokenInfoResponse(
        name=engine.get_name(),
        symbol=engine.get_symbol(),
        decimals=engine.get_decimals(),
        token_uri=engine.get_token_uri(),
        total_supply=engine.get_total_supply(),
    )


@router.get("/balances/{principal}")
async def balance_of(
    principal: str, service: LedgerService = Depends(get_ledger_service),
):
    return {
        "principal": principal,
        "balance": service.host.engine.balance_of(Principal(principal)),
    }


@router.get("/allowances/{owner}/{spender}")
async def allowance_of(
    owner: str, spender: str, service: LedgerService = Depends(get_ledger_service),
):
    allowance = service.host.engine.allowance_of(Principal(owner), Principal(spender))
    return {"owner": owner, "spender": spender, "allowance": allowance}


@router.get("/credits/{credit_id}", response_model=CreditMetadataResponse)
async def credit_metadata(
    credit_id: int, service: LedgerService = Depends(get_ledger_service),
):
    record = service.host.engine.get_credit_metadata(credit_id)
    if record is None:
        raise ResourceNotFoundError("Credit", str(credit_id))
    return CreditMetadataResponse(
        credit_id=credit_id,
        offset_amount=record.offset_amount,
        height=record.height,
        location=record.location,
        project_type=record.project_type,
        verifier=record.verifier,
        status=record.status,
    )


@router.get("/retirements/{credit_id}", response_model=CreditRetirementResponse)
async def credit_retirement(
    credit_id: int, service: LedgerService = Depends(get_ledger_service),
):
    record = service.host.engine.get_credit_retirement(credit_id)
    if record is None:
        raise ResourceNotFoundError("Retirement", str(credit_id))
    return CreditRetirementResponse(
        credit_id=credit_id,
        reason=record.reason,
        height=record.height,
        retiree=record.retiree,
    )


@router.get("/issuers/{principal}")
async def is_issuer(
    principal: str, service: LedgerService = Depends(get_ledger_service),
):
    return {
        "principal": principal,
        "is_issuer": service.host.engine.is_issuer(Principal(principal)),
    }


@router.get("/params", response_model=LedgerParamsResponse)
async def ledger_params(service: LedgerService = Depends(get_ledger_service)):
    state = service.host.engine.state
    params = state.params
    return LedgerParamsResponse(
        admin=params.admin,
        issuance_fee=params.issuance_fee,
        max_issuers=params.max_issuers,
        issuer_count=state.issuer_count,
        grace_period=params.grace_period,
        token_uri=params.token_uri,
        mint_paused=params.mint_paused,
        burn_paused=params.burn_paused,
        max_supply=params.max_supply,
        last_height=service.host.last_height,
    )


@router.get("/invariants")
async def ledger_invariants(service: LedgerService = Depends(get_ledger_service)):
    violations = audit_ledger(service.host.engine.state)
    return {"consistent": not violations, "violations": violations}


@router.get("/operations")
async def list_operations(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Journal of ledger operations, newest first."""
    records = await SqlLedgerRepository(db).list_operations(limit=limit, offset=offset)
    return {
        "operations": [
            {
                "id": r.id,
                "operation": r.operation,
                "caller": r.caller,
                "height": r.height,
                "arguments": r.arguments,
                "ok": r.ok,
                "error_code": r.error_code,
                "created_at": r.created_at.isoformat(),
            }
            for r in records
        ],
        "pagination": {"limit": limit, "offset": offset},
    }
