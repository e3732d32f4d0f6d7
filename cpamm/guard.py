"""Transaction guard for mutating pool operations.

The transfer collaborator is untrusted code that runs in the middle of an
operation. The guard makes sure it cannot start a second operation on the
same pool from inside the first one, and that operations from different
threads run one at a time.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

import structlog

from cpamm.errors import ReentrantCall

logger = structlog.get_logger()


class GuardState(str, Enum):
    """Guard lifecycle."""

    IDLE = "idle"
    IN_OPERATION = "in_operation"


class TransactionGuard:
    """Idle/InOperation state machine around every mutating operation.

    - Entering from the thread already inside the guard raises ReentrantCall
    - Entering from another thread blocks until the guard is idle again
    - Exiting always returns the guard to IDLE, including on error paths

    Re-entry is detected per thread. A collaborator that starts a new
    thread which calls back into the pool is not rejected: that thread
    blocks on the lock. If the collaborator then waits for it (for example
    with `join()`), the pool deadlocks.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = GuardState.IDLE
        self._owner: int | None = None
        self._active_operation: str | None = None

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def active_operation(self) -> str | None:
        """Name of the operation in flight, if any."""
        return self._active_operation

    def enter(self, operation: str) -> None:
        """Transition IDLE -> IN_OPERATION.

        Raises:
            ReentrantCall: If the calling thread is already inside the guard
        """
        if self._owner == threading.get_ident():
            logger.warning(
                "reentrant_call_blocked",
                operation=operation,
                active_operation=self._active_operation,
            )
            raise ReentrantCall(operation, self._active_operation)

        self._lock.acquire()
        self._owner = threading.get_ident()
        self._active_operation = operation
        self._state = GuardState.IN_OPERATION

    def exit(self) -> None:
        """Transition IN_OPERATION -> IDLE."""
        self._state = GuardState.IDLE
        self._active_operation = None
        self._owner = None
        self._lock.release()

    @contextmanager
    def operation(self, name: str) -> Iterator[None]:
        """Hold the guard for the duration of a `with` block."""
        self.enter(name)
        try:
            yield
        finally:
            self.exit()
