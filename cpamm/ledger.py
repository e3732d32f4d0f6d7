"""In-memory asset ledger.

A TransferCollaborator that keeps balances in dictionaries. Used by the
replay script and the test suite; real deployments plug in their own.
"""

from __future__ import annotations

from collections import defaultdict, deque

import structlog

logger = structlog.get_logger()


class InMemoryTokenLedger:
    """Per-asset balances for participants plus a pool custody account.

    Usage:
        ledger = InMemoryTokenLedger()
        ledger.mint("TKA", "alice", 1_000 * 10**18)
        ledger.move_in("TKA", "alice", 10**18)   # True
        ledger.custody_of("TKA")                  # 10**18

    `history` keeps the most recent `history_limit` completed moves
    (None keeps all of them).
    """

    def __init__(self, history_limit: int | None = 10_000) -> None:
        self._balances: dict[str, dict[str, int]] = defaultdict(dict)
        self._custody: dict[str, int] = defaultdict(int)
        # (direction, asset, party, amount)
        self.history: deque[tuple[str, str, str, int]] = deque(maxlen=history_limit)

    def mint(self, asset: str, holder: str, amount: int) -> None:
        """Credit a participant out of thin air (test and replay setup)."""
        if amount < 0:
            raise ValueError(f"Cannot mint a negative amount: {amount}")
        balances = self._balances[asset]
        balances[holder] = balances.get(holder, 0) + amount

    def balance_of(self, asset: str, holder: str) -> int:
        return self._balances[asset].get(holder, 0)

    def custody_of(self, asset: str) -> int:
        """Amount of `asset` held on behalf of the pool."""
        return self._custody[asset]

    def move_in(self, asset: str, sender: str, amount: int) -> bool:
        balances = self._balances[asset]
        available = balances.get(sender, 0)
        if amount < 0 or available < amount:
            logger.debug(
                "ledger_move_in_refused",
                asset=asset,
                sender=sender,
                amount=amount,
                available=available,
            )
            return False
        balances[sender] = available - amount
        self._custody[asset] += amount
        self.history.append(("in", asset, sender, amount))
        return True

    def move_out(self, asset: str, recipient: str, amount: int) -> bool:
        available = self._custody[asset]
        if amount < 0 or available < amount:
            logger.debug(
                "ledger_move_out_refused",
                asset=asset,
                recipient=recipient,
                amount=amount,
                available=available,
            )
            return False
        self._custody[asset] = available - amount
        balances = self._balances[asset]
        balances[recipient] = balances.get(recipient, 0) + amount
        self.history.append(("out", asset, recipient, amount))
        return True
