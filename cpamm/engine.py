"""Shared execution cycle for mutating pool operations.

Every deposit, withdrawal and swap runs the same steps:

1. Enter the transaction guard
2. Plan against the current state (validation errors abort here)
3. Check invariants on the planned state and commit it
4. Ask the transfer collaborator to move the assets
5. On any transfer failure: undo the transfers that already went
   through, restore the previous state, and raise
6. Emit one OperationRecord

State is committed before the collaborator runs, so whatever it does
while it has control it sees a consistent pool.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

import structlog

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import (
    InvariantViolation,
    PoolError,
    PoolErrorKind,
    TransferFailed,
)
from cpamm.events import Notifier, log_operation
from cpamm.guard import TransactionGuard
from cpamm.models import OperationKind, OperationRecord
from cpamm.safe_int import SafeIntError
from cpamm.state import AssetPair, PoolState, StateStore
from cpamm.transfer import Transfer, TransferCollaborator

logger = structlog.get_logger()

R = TypeVar("R")

# Errors that indicate a fault outside the caller's control
_FAULT_KINDS = frozenset({PoolErrorKind.TRANSFER_FAILED, PoolErrorKind.INVARIANT_VIOLATION})


@dataclass
class EngineContext:
    """Everything an engine needs, shared by both engines of one pool."""

    store: StateStore
    assets: AssetPair
    guard: TransactionGuard
    transfers: TransferCollaborator
    clock: Callable[[], int]
    notifier: Notifier = log_operation
    config: PoolConfig = DEFAULT_POOL_CONFIG


@dataclass(frozen=True)
class Plan(Generic[R]):
    """A fully computed operation, not yet applied."""

    state: PoolState
    transfers: tuple[Transfer, ...]
    result: R
    amounts_in: dict[str, int] = field(default_factory=dict)
    amounts_out: dict[str, int] = field(default_factory=dict)
    shares: int = 0


class Engine:
    """Base class for engines that mutate the pool."""

    def __init__(self, context: EngineContext) -> None:
        self.context = context

    @property
    def config(self) -> PoolConfig:
        return self.context.config

    def _execute(
        self,
        kind: OperationKind,
        actor: str,
        planner: Callable[[PoolState], Plan[R]],
    ) -> R:
        """Run one operation through the guard/commit/transfer cycle.

        Raises:
            PoolError: Any validation, guard, transfer or invariant failure.
                The pool is unchanged when this is raised.
        """
        try:
            with self.context.guard.operation(kind.value):
                plan = self._run(kind, actor, planner)
        except PoolError as err:
            log = logger.error if err.kind in _FAULT_KINDS else logger.warning
            log(
                "operation_failed",
                operation=kind.value,
                actor=actor,
                error=err.kind.value,
                details=err.details(),
            )
            raise

        self._notify(kind, actor, plan)
        return plan.result

    def _run(
        self,
        kind: OperationKind,
        actor: str,
        planner: Callable[[PoolState], Plan[R]],
    ) -> Plan[R]:
        store = self.context.store
        before = store.current

        try:
            plan = planner(before)
        except SafeIntError as err:
            raise InvariantViolation(f"{kind.value} arithmetic fault: {err}") from err

        plan.state.check_invariants(self.config.minimum_lock, self.config.lock_holder)
        store.commit(plan.state)
        logger.debug(
            "operation_committed",
            operation=kind.value,
            actor=actor,
            reserve_a=plan.state.reserve_a,
            reserve_b=plan.state.reserve_b,
            total_shares=plan.state.total_shares,
        )

        try:
            self._send_all(plan.transfers)
        except BaseException:
            store.commit(before)
            logger.warning(
                "operation_rolled_back",
                operation=kind.value,
                actor=actor,
                reserve_a=before.reserve_a,
                reserve_b=before.reserve_b,
                total_shares=before.total_shares,
            )
            raise

        return plan

    def _send_all(self, transfers: tuple[Transfer, ...]) -> None:
        """Send transfers in order; on failure undo the completed ones.

        Raises:
            TransferFailed: The collaborator refused or raised
            PoolError: The collaborator tried to re-enter the pool and let
                the resulting error escape
            BaseException: Anything else that is not an Exception (for
                example KeyboardInterrupt) propagates unchanged after the
                completed transfers are undone
        """
        collaborator = self.context.transfers
        completed: list[Transfer] = []

        for transfer in transfers:
            try:
                accepted = transfer.send(collaborator)
            except PoolError:
                self._compensate(completed)
                raise
            except Exception as exc:
                logger.exception(
                    "transfer_raised",
                    direction=transfer.direction.value,
                    asset=transfer.asset,
                    party=transfer.party,
                    amount=transfer.amount,
                )
                raise self._failed(transfer, completed) from exc
            except BaseException:
                self._compensate(completed)
                raise

            if not accepted:
                raise self._failed(transfer, completed)
            completed.append(transfer)

    def _failed(self, transfer: Transfer, completed: list[Transfer]) -> TransferFailed:
        logger.error(
            "transfer_failed",
            direction=transfer.direction.value,
            asset=transfer.asset,
            party=transfer.party,
            amount=transfer.amount,
        )
        compensated = self._compensate(completed)
        return TransferFailed(
            transfer.asset,
            transfer.direction.value,
            transfer.amount,
            compensation_failed=not compensated,
        )

    def _compensate(self, completed: list[Transfer]) -> bool:
        """Undo completed transfers, newest first. Returns False if any undo failed."""
        all_undone = True
        for transfer in reversed(completed):
            undo = transfer.reversed()
            try:
                undone = undo.send(self.context.transfers)
            except Exception:
                logger.exception("transfer_compensation_raised", asset=undo.asset)
                undone = False
            if not undone:
                all_undone = False
                logger.error(
                    "transfer_compensation_failed",
                    direction=undo.direction.value,
                    asset=undo.asset,
                    party=undo.party,
                    amount=undo.amount,
                )
        return all_undone

    def _notify(self, kind: OperationKind, actor: str, plan: Plan[R]) -> None:
        record = OperationRecord(
            kind=kind,
            actor=actor,
            amounts_in=plan.amounts_in,
            amounts_out=plan.amounts_out,
            shares=plan.shares,
            timestamp=self.context.clock(),
        )
        try:
            self.context.notifier(record)
        except Exception:
            # The operation is final by now; a broken sink must not undo it
            logger.exception("operation_notification_failed", operation=kind.value, actor=actor)
