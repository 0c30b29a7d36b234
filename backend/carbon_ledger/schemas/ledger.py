"""Ledger Schemas — Pydantic models for the ledger API boundary.

Invariants:
    - Request models check shape only (presence, types) — never value ranges:
      amount <= 0, empty strings and unknown project types must reach the engine
      so its ordered checks pick the error code
    - Response models mirror engine read accessors

Design Decisions:
    - No Field(gt=0)/min_length on ledger values: a 422 here would mask the
      ledger's own InvalidAmount / InvalidMetadata codes
"""

from pydantic import BaseModel


# --- Requests -----------------------------------------------------------------

class TransferRequest(BaseModel):
    amount: int
    sender: str
    recipient: str


class ApproveRequest(BaseModel):
    spender: str
    amount: int


class TransferFromRequest(BaseModel):
    owner: str
    recipient: str
    amount: int


class MintRequest(BaseModel):
    amount: int
    recipient: str
    offset_amount: int
    location: str
    project_type: str
    verifier: str


class BurnRequest(BaseModel):
    amount: int
    reason: str


class IssuerRequest(BaseModel):
    principal: str


class IssuanceFeeRequest(BaseModel):
    fee: int


class TokenUriRequest(BaseModel):
    uri: str


class GracePeriodRequest(BaseModel):
    period: int


# --- Responses ----------------------------------------------------------------

class OperationResponse(BaseModel):
    """Successful ledger operation."""
    ok: bool = True
    value: bool = True
    fee_transfer: dict | None = None


class TokenInfoResponse(BaseModel):
    name: str
    symbol: str
    decimals: int
    token_uri: str
    total_supply: int


class CreditMetadataResponse(BaseModel):
    credit_id: int
    offset_amount: int
    height: int
    location: str
    project_type: str
    verifier: str
    status: bool


class CreditRetirementResponse(BaseModel):
    credit_id: int
    reason: str
    height: int
    retiree: str


class LedgerParamsResponse(BaseModel):
    admin: str
    issuance_fee: int
    max_issuers: int
    issuer_count: int
    grace_period: int
    token_uri: str
    mint_paused: bool
    burn_paused: bool
    max_supply: int
    last_height: int
