"""Tests for TransactionGuard."""

import threading
import time

import pytest

from cpamm.errors import ReentrantCall
from cpamm.guard import GuardState, TransactionGuard


class TestGuardStateMachine:
    """Tests for Idle/InOperation transitions."""

    def test_starts_idle(self):
        guard = TransactionGuard()
        assert guard.state == GuardState.IDLE
        assert guard.active_operation is None

    def test_in_operation_inside_block(self):
        guard = TransactionGuard()
        with guard.operation("swap"):
            assert guard.state == GuardState.IN_OPERATION
            assert guard.active_operation == "swap"
        assert guard.state == GuardState.IDLE

    def test_returns_to_idle_after_error(self):
        """Error paths release the guard too."""
        guard = TransactionGuard()
        with pytest.raises(RuntimeError):
            with guard.operation("deposit"):
                raise RuntimeError("boom")
        assert guard.state == GuardState.IDLE
        with guard.operation("withdraw"):
            pass

    def test_nested_entry_raises(self):
        guard = TransactionGuard()
        with guard.operation("deposit"):
            with pytest.raises(ReentrantCall) as exc_info:
                with guard.operation("swap"):
                    pass
            assert guard.state == GuardState.IN_OPERATION
        err = exc_info.value
        assert err.operation == "swap"
        assert err.active_operation == "deposit"
        assert guard.state == GuardState.IDLE


class TestGuardSerialization:
    """Tests for cross-thread serialization."""

    def test_other_thread_waits(self):
        """A second thread blocks until the first operation finishes."""
        guard = TransactionGuard()
        order: list[str] = []

        def second() -> None:
            with guard.operation("second"):
                order.append("second")

        with guard.operation("first"):
            worker = threading.Thread(target=second)
            worker.start()
            time.sleep(0.05)
            order.append("first")

        worker.join(timeout=5)
        assert order == ["first", "second"]
        assert guard.state == GuardState.IDLE

    def test_spawned_thread_blocks_instead_of_raising(self):
        """Re-entry is tracked per thread; a helper thread waits for the lock."""
        guard = TransactionGuard()
        entered: list[str] = []

        def helper() -> None:
            with guard.operation("helper"):
                entered.append("helper")

        with guard.operation("outer"):
            worker = threading.Thread(target=helper)
            worker.start()
            worker.join(timeout=0.1)
            assert worker.is_alive()
            assert entered == []

        worker.join(timeout=5)
        assert entered == ["helper"]
