"""Operation notifications.

Every completed deposit, withdrawal and swap produces one OperationRecord.
Where it goes is up to the caller; by default it is written to the
structured log.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from cpamm.models import OperationKind, OperationRecord

logger = structlog.get_logger()

# Anything that accepts a record
Notifier = Callable[[OperationRecord], None]


def log_operation(record: OperationRecord) -> None:
    """Default notifier: emit the record as a `pool_operation` log event."""
    logger.info("pool_operation", **record.model_dump(mode="json"))


class RecordingNotifier:
    """Notifier that keeps records in memory.

    Usage:
        notifier = RecordingNotifier()
        pool = LiquidityPool("TKA", "TKB", ledger, notifier=notifier)
        ...
        assert notifier.of_kind(OperationKind.SWAP)[0].actor == "alice"
    """

    def __init__(self) -> None:
        self.records: list[OperationRecord] = []

    def __call__(self, record: OperationRecord) -> None:
        self.records.append(record)

    def of_kind(self, kind: OperationKind) -> list[OperationRecord]:
        return [r for r in self.records if r.kind == kind]
