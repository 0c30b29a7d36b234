"""Ledger Admin — issuer management and parameter setters.

Invariants:
    - Admin authorization is decided by the engine (NOT_AUTHORIZED -> 403),
      never by the route
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carbon_ledger.core.domain_types import Principal, LedgerOperation
from carbon_ledger.infrastructure.database import get_db
from carbon_ledger.api.dependencies import get_ledger_service, get_host_context
from carbon_ledger.api.routes.ledger_operations import execute_operation
from carbon_ledger.schemas.ledger import (
    IssuerRequest, IssuanceFeeRequest, TokenUriRequest,
    GracePeriodRequest, OperationResponse,
)
from carbon_ledger.services.ledger_host import HostContext
from carbon_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/api/v1/ledger/admin", tags=["ledger-admin"])


@router.post("/issuers/add", response_model=OperationResponse)
async def add_issuer(
    body: IssuerRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(
        service, db, LedgerOperation.ADD_ISSUER, ctx,
        principal=Principal(body.principal),
    )


@router.post("/issuers/remove", response_model=OperationResponse)
async def remove_issuer(
    body: IssuerRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(
        service, db, LedgerOperation.REMOVE_ISSUER, ctx,
        principal=Principal(body.principal),
    )


@router.post("/issuance-fee", response_model=OperationResponse)
async def set_issuance_fee(
    body: IssuanceFeeRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(
        service, db, LedgerOperation.SET_ISSUANCE_FEE, ctx, fee=body.fee,
    )


@router.post("/mint/pause", response_model=OperationResponse)
async def pause_mint(
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(service, db, LedgerOperation.PAUSE_MINT, ctx)


@router.post("/mint/unpause", response_model=OperationResponse)
async def unpause_mint(
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(service, db, LedgerOperation.UNPAUSE_MINT, ctx)


@router.post("/burn/pause", response_model=OperationResponse)
async def pause_burn(
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(service, db, LedgerOperation.PAUSE_BURN, ctx)


@router.post("/burn/unpause", response_model=OperationResponse)
async def unpause_burn(
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(service, db, LedgerOperation.UNPAUSE_BURN, ctx)


@router.post("/token-uri", response_model=OperationResponse)
async def set_token_uri(
    body: TokenUriRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(
        service, db, LedgerOperation.SET_TOKEN_URI, ctx, uri=body.uri,
    )


@router.post("/grace-period", response_model=OperationResponse)
async def set_grace_period(
    body: GracePeriodRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    return await execute_operation(
        service, db, LedgerOperation.SET_GRACE_PERIOD, ctx, period=body.period,
    )
