"""Test helpers module for shared test utilities.

- constants: Asset and participant identifiers, reference amounts
- factories: Ledger, clock and pool factories
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    E18,
    FUNDING,
    GENESIS_A,
    GENESIS_B,
    GENESIS_TOTAL_SHARES,
    NOW,
    TKA,
    TKB,
    TKC,
)
from tests.helpers.factories import ManualClock, make_ledger, make_pool

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "E18",
    "FUNDING",
    "GENESIS_A",
    "GENESIS_B",
    "GENESIS_TOTAL_SHARES",
    "NOW",
    "TKA",
    "TKB",
    "TKC",
    # Factories
    "ManualClock",
    "make_ledger",
    "make_pool",
]
