#!/usr/bin/env python3
"""Replay a scenario of pool operations against an in-memory ledger.

Scenario file format (amounts may be ints or decimal strings):

    {
      "asset_a": "TKA",
      "asset_b": "TKB",
      "now": 1700000000,
      "balances": {"alice": {"TKA": "1000000", "TKB": "2000000"}},
      "operations": [
        {"op": "deposit", "actor": "alice", "amount_a": 500000, "amount_b": 1000000},
        {"op": "swap", "actor": "alice", "amount_in": 1000, "min_amount_out": 0,
         "input_asset": "TKA", "deadline": 1700000060},
        {"op": "withdraw", "actor": "alice", "shares": 1000}
      ]
    }

Usage:
    python scripts/replay_operations.py scenario.json
    python scripts/replay_operations.py scenario.json --snapshot-out pool.json -v
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from cpamm.errors import PoolError
from cpamm.ledger import InMemoryTokenLedger
from cpamm.logging import configure_logging
from cpamm.pool import LiquidityPool, system_clock

logger = structlog.get_logger()


def build_pool(scenario: dict[str, Any]) -> tuple[LiquidityPool, InMemoryTokenLedger]:
    """Create the ledger, fund it, and create an empty pool over it."""
    ledger = InMemoryTokenLedger()
    for holder, assets in scenario.get("balances", {}).items():
        for asset, amount in assets.items():
            ledger.mint(asset, holder, int(amount))

    now = scenario.get("now")
    clock = (lambda: int(now)) if now is not None else system_clock
    pool = LiquidityPool(scenario["asset_a"], scenario["asset_b"], ledger, clock=clock)
    return pool, ledger


def apply_operation(pool: LiquidityPool, op: dict[str, Any], default_deadline: int) -> object:
    """Apply one scenario step and return the engine result."""
    kind = op["op"]
    actor = op["actor"]
    if kind == "deposit":
        return pool.deposit(actor, int(op["amount_a"]), int(op["amount_b"]))
    if kind == "withdraw":
        return pool.withdraw(actor, int(op["shares"]))
    if kind == "swap":
        return pool.swap(
            actor,
            int(op["amount_in"]),
            int(op.get("min_amount_out", 0)),
            op["input_asset"],
            int(op.get("deadline", default_deadline)),
        )
    raise ValueError(f"Unknown operation: {kind}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay pool operations from a JSON scenario")
    parser.add_argument("scenario", type=Path, help="Scenario JSON file")
    parser.add_argument(
        "--snapshot-out",
        type=Path,
        default=None,
        help="Write the final pool snapshot to this file",
    )
    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Abort at the first rejected operation",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    configure_logging(verbose=args.verbose, json=args.json_logs)

    if not args.scenario.exists():
        logger.error("scenario_not_found", path=str(args.scenario))
        print(f"Error: Scenario file not found: {args.scenario}")
        return 1

    with open(args.scenario) as f:
        scenario = json.load(f)

    pool, _ledger = build_pool(scenario)
    default_deadline = int(scenario.get("now", system_clock())) + 60

    rejected = 0
    for index, op in enumerate(scenario.get("operations", [])):
        try:
            result = apply_operation(pool, op, default_deadline)
        except PoolError as err:
            rejected += 1
            print(f"[{index}] {op['op']:<8} REJECTED {err}")
            if args.stop_on_error:
                return 2
            continue
        print(f"[{index}] {op['op']:<8} ok       {result}")

    summary = pool.pool_summary()
    print("=" * 60)
    print(f"Reserves:     {summary.reserve_a} {summary.asset_a} / {summary.reserve_b} {summary.asset_b}")
    print(f"Total shares: {summary.total_shares}")
    print(f"Price A in B: {summary.price_a}")
    print(f"Price B in A: {summary.price_b}")
    print(f"Rejected:     {rejected}")

    if args.snapshot_out:
        args.snapshot_out.write_text(pool.snapshot().model_dump_json(indent=2))
        print(f"Snapshot written to {args.snapshot_out}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
