"""Domain Types — rich types and fixed constants for the carbon credit ledger.

Invariants:
    - Principal wraps str — never compare raw strings against NULL_PRINCIPAL by hand
    - CreditId is derived from total supply (mint: after increment, burn: after decrement)
    - ProjectType is a closed enum: forest, renewable, soil
    - Token identity constants (name, symbol, decimals) never change at runtime

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum for ProjectType: serializes to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Principal = NewType("Principal", str)
CreditId = NewType("CreditId", int)
Height = NewType("Height", int)


# ─── Token Constants ─────────────────────────────────────────────

TOKEN_NAME: str = "Carbon Credit"
TOKEN_SYMBOL: str = "CCREDIT"
TOKEN_DECIMALS: int = 6

# Reserved null principal: never a valid recipient or issuer
NULL_PRINCIPAL = Principal("SP000000000000000000002Q6VF78")


# ─── Parameter Defaults & Bounds ─────────────────────────────────

DEFAULT_ADMIN = Principal("ST1ADMIN")
DEFAULT_ISSUANCE_FEE: int = 1000
DEFAULT_MAX_ISSUERS: int = 100
DEFAULT_GRACE_PERIOD: int = 144
DEFAULT_TOKEN_URI: str = "https://example.com/carbon-credit-metadata.json"
DEFAULT_MAX_SUPPLY: int = 1_000_000_000

MAX_GRACE_PERIOD: int = 1440
MAX_LOCATION_LENGTH: int = 100


# ─── Enums ───────────────────────────────────────────────────────

class ProjectType(str, Enum):
    """Offset project categories accepted at mint time."""
    FOREST = "forest"
    RENEWABLE = "renewable"
    SOIL = "soil"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in {member.value for member in cls}


class LedgerOperation(str, Enum):
    """State-changing entry points — used by the host for dispatch and journaling."""
    TRANSFER = "transfer"
    APPROVE = "approve"
    TRANSFER_FROM = "transfer_from"
    MINT = "mint"
    BURN = "burn"
    ADD_ISSUER = "add_issuer"
    REMOVE_ISSUER = "remove_issuer"
    SET_ISSUANCE_FEE = "set_issuance_fee"
    PAUSE_MINT = "pause_mint"
    UNPAUSE_MINT = "unpause_mint"
    PAUSE_BURN = "pause_burn"
    UNPAUSE_BURN = "unpause_burn"
    SET_TOKEN_URI = "set_token_uri"
    SET_GRACE_PERIOD = "set_grace_period"
