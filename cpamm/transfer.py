"""Interface to the external asset ledger.

The pool never moves assets itself. It asks a TransferCollaborator to pull
assets from a participant into pool custody or to push them back out, and
treats anything but an explicit True as a failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class TransferDirection(str, Enum):
    """Which way assets move relative to pool custody."""

    IN = "in"
    OUT = "out"

    @property
    def reverse(self) -> TransferDirection:
        return TransferDirection.OUT if self is TransferDirection.IN else TransferDirection.IN


@runtime_checkable
class TransferCollaborator(Protocol):
    """Protocol for the ledger that holds the pool's assets.

    Both methods return True on success and False on refusal. Raising is
    also treated as a refusal.
    """

    def move_in(self, asset: str, sender: str, amount: int) -> bool:
        """Move `amount` of `asset` from `sender` into pool custody."""
        ...

    def move_out(self, asset: str, recipient: str, amount: int) -> bool:
        """Move `amount` of `asset` from pool custody to `recipient`."""
        ...


@dataclass(frozen=True)
class Transfer:
    """One requested asset movement."""

    direction: TransferDirection
    asset: str
    party: str
    amount: int

    def reversed(self) -> Transfer:
        """The movement that undoes this one."""
        return Transfer(self.direction.reverse, self.asset, self.party, self.amount)

    def send(self, collaborator: TransferCollaborator) -> bool:
        """Ask the collaborator to perform this movement."""
        if self.direction is TransferDirection.IN:
            result = collaborator.move_in(self.asset, self.party, self.amount)
        else:
            result = collaborator.move_out(self.asset, self.party, self.amount)
        return result is True
