"""Pytest configuration and fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from cpamm.events import RecordingNotifier
from cpamm.ledger import InMemoryTokenLedger
from cpamm.pool import LiquidityPool
from tests.helpers import ALICE, GENESIS_A, GENESIS_B, ManualClock, make_ledger, make_pool

# =============================================================================
# Mock collaborators for dependency injection
# =============================================================================


@dataclass
class TransferScript:
    """Configuration for ScriptedTransfers behavior."""

    # (direction, asset) pairs to refuse; direction is "in" or "out"
    refuse: set[tuple[str, str]] = field(default_factory=set)
    # (direction, asset) pairs that raise RuntimeError
    explode: set[tuple[str, str]] = field(default_factory=set)
    # Refuse every compensating transfer after the first failure
    refuse_compensation: bool = False
    # Called before each transfer with (direction, asset, party, amount)
    hook: Callable[[str, str, str, int], None] | None = None


class ScriptedTransfers:
    """Transfer collaborator that delegates to a real ledger unless scripted otherwise.

    Usage:
        # Refuse to pull asset B in
        transfers = ScriptedTransfers(ledger, TransferScript(refuse={("in", TKB)}))

        # Run code in the middle of a transfer (e.g. try to re-enter the pool)
        transfers = ScriptedTransfers(ledger, TransferScript(hook=callback))
    """

    def __init__(self, ledger: InMemoryTokenLedger, script: TransferScript | None = None) -> None:
        self.ledger = ledger
        self.script = script or TransferScript()
        self.calls: list[tuple[str, str, str, int]] = []  # Track calls for assertions
        self._failed = False

    def _should_fail(self, direction: str, asset: str) -> bool:
        if self._failed and self.script.refuse_compensation:
            return True
        if (direction, asset) in self.script.explode:
            self._failed = True
            raise RuntimeError(f"ledger exploded on {direction} {asset}")
        if (direction, asset) in self.script.refuse:
            self._failed = True
            return True
        return False

    def move_in(self, asset: str, sender: str, amount: int) -> bool:
        self.calls.append(("in", asset, sender, amount))
        if self.script.hook:
            self.script.hook("in", asset, sender, amount)
        if self._should_fail("in", asset):
            return False
        return self.ledger.move_in(asset, sender, amount)

    def move_out(self, asset: str, recipient: str, amount: int) -> bool:
        self.calls.append(("out", asset, recipient, amount))
        if self.script.hook:
            self.script.hook("out", asset, recipient, amount)
        if self._should_fail("out", asset):
            return False
        return self.ledger.move_out(asset, recipient, amount)


# =============================================================================
# Pytest fixtures
# =============================================================================


@pytest.fixture
def ledger() -> InMemoryTokenLedger:
    """Ledger where ALICE, BOB and CAROL each hold FUNDING of both assets."""
    return make_ledger()


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at NOW."""
    return ManualClock()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Notifier that keeps every record."""
    return RecordingNotifier()


@pytest.fixture
def pool(
    ledger: InMemoryTokenLedger, clock: ManualClock, notifier: RecordingNotifier
) -> LiquidityPool:
    """An empty TKA/TKB pool over the funded ledger."""
    return make_pool(ledger, clock=clock, notifier=notifier)


@pytest.fixture
def seeded_pool(pool: LiquidityPool) -> LiquidityPool:
    """The pool after ALICE's reference genesis deposit (1000 A / 2000 B)."""
    pool.deposit(ALICE, GENESIS_A, GENESIS_B)
    return pool
