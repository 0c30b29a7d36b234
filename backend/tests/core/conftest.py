"""Core test fixtures — fresh engines, no shared state between tests."""

import pytest

from carbon_ledger.core.ledger_engine import LedgerEngine
from carbon_ledger.core.ledger_state import LedgerParams


@pytest.fixture
def engine():
    return LedgerEngine()


@pytest.fixture
def small_engine():
    """Engine with max supply 1000 and max issuers 2."""
    return LedgerEngine(LedgerParams(max_supply=1000, max_issuers=2))
