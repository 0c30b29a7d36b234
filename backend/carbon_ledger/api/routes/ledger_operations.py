"""Ledger Operations — token movement, issuance and retirement endpoints.

Invariants:
    - Every route delegates to LedgerService.run_or_raise — no ledger rules here
    - Rejections surface as LedgerOperationError (400, or 403 for NOT_AUTHORIZED)
      with the numeric ledger_code in the response body

Design Decisions:
    - Request bodies mirror engine keyword arguments one-to-one
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carbon_ledger.core.domain_types import Principal, LedgerOperation
from carbon_ledger.infrastructure.database import get_db
from carbon_ledger.api.dependencies import get_ledger_service, get_host_context
from carbon_ledger.schemas.ledger import (
    TransferRequest, ApproveRequest, TransferFromRequest,
    MintRequest, BurnRequest, OperationResponse,
)
from carbon_ledger.services.ledger_host import HostContext
from carbon_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/api/v1/ledger", tags=["ledger"])


async def execute_operation(
    service: LedgerService,
    db: AsyncSession,
    operation: LedgerOperation,
    ctx: HostContext,
    **arguments: object,
) -> OperationResponse:
    """Run one operation and shape the success response. Shared with admin routes."""
    result = await service.run_or_raise(db, operation, ctx, **arguments)
    fee = asdict(result.fee_transfer) if result.fee_transfer else None
    return OperationResponse(ok=True, value=bool(result.value), fee_transfer=fee)


@router.post("/transfer", response_model=OperationResponse)
async def transfer(
    body: TransferRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    """Move tokens from the caller's own balance."""
    return await execute_operation(
        service, db, LedgerOperation.TRANSFER, ctx,
        amount=body.amount,
        sender=Principal(body.sender),
        recipient=Principal(body.recipient),
    )


@router.post("/approve", response_model=OperationResponse)
async def approve(
    body: ApproveRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    """Set (not add to) the spender's allowance on the caller's balance."""
    return await execute_operation(
        service, db, LedgerOperation.APPROVE, ctx,
        spender=Principal(body.spender), amount=body.amount,
    )


@router.post("/transfer-from", response_model=OperationResponse)
async def transfer_from(
    body: TransferFromRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    """Spend from an owner's balance against the caller's allowance."""
    return await execute_operation(
        service, db, LedgerOperation.TRANSFER_FROM, ctx,
        owner=Principal(body.owner),
        recipient=Principal(body.recipient),
        amount=body.amount,
    )


@router.post("/mint", response_model=OperationResponse)
async def mint(
    body: MintRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    """Issue credits (admin only). Response carries the settled fee transfer."""
    return await execute_operation(
        service, db, LedgerOperation.MINT, ctx,
        amount=body.amount,
        recipient=Principal(body.recipient),
        offset_amount=body.offset_amount,
        location=body.location,
        project_type=body.project_type,
        verifier=Principal(body.verifier),
    )


@router.post("/burn", response_model=OperationResponse)
async def burn(
    body: BurnRequest,
    ctx: HostContext = Depends(get_host_context),
    service: LedgerService = Depends(get_ledger_service),
    db: AsyncSession = Depends(get_db),
):
    """Retire credits from the caller's balance."""
    return await execute_operation(
        service, db, LedgerOperation.BURN, ctx,
        amount=body.amount, reason=body.reason,
    )
