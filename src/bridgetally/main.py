#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from bridgetally.app import read_bridge_activity
from bridgetally.config import (
    ConfigurationError,
    configure_logging,
    get_activity_config,
    load_environment,
    log_level,
)
from bridgetally.domain.decode import truncate_hash, truncate_party

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from bridgetally.app import BridgeActivity
    from bridgetally.config import ActivityConfig


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report recent bridge activity for a party")
    parser.add_argument(
        "--limit",
        type=int,
        help="Maximum deposits and withdrawals to show (default: BRIDGE_ACTIVITY_LIMIT or 20)",
    )
    parser.add_argument(
        "--lookback",
        type=int,
        help="Offsets before the ledger end to scan (default: BRIDGE_ACTIVITY_LOOKBACK or 1000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to spend reading the ledger before reporting partial results",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        help="Path to a .env file to load before reading configuration",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def _build_activity_config(args: argparse.Namespace) -> ActivityConfig:
    activity = get_activity_config()
    if args.limit is not None:
        if args.limit < 1:
            raise ValueError("Limit must be positive")
        activity = replace(activity, limit=args.limit)
    if args.lookback is not None:
        if args.lookback < 0:
            raise ValueError("Lookback must be non-negative")
        activity = replace(activity, lookback=args.lookback)
    if args.timeout is not None:
        if args.timeout <= 0:
            raise ValueError("Timeout must be positive")
        activity = replace(activity, timeout_seconds=args.timeout)
    return activity


def render_report(result: BridgeActivity) -> str:
    lines = [
        f"Party:   {truncate_party(result.party)}",
        f"Subject: {result.subject or '-'}",
        f"Offsets: ({result.start_offset}, {result.ledger_end}]",
    ]
    if result.truncated:
        lines.append("Deadline reached; activity below is partial.")

    lines.append("")
    lines.append(f"Deposits ({len(result.deposits)}):")
    lines.extend(
        f"  #{deposit.offset:<8} {deposit.lifecycle:<10} {deposit.amount:>20} "
        f"{truncate_party(deposit.recipient)}  {truncate_hash(deposit.external_tx_hash)}"
        for deposit in result.deposits
    )

    lines.append("")
    lines.append(f"Withdrawals ({len(result.withdrawals)}):")
    lines.extend(
        f"  #{withdrawal.offset:<8} {withdrawal.raw_status.name:<10} {withdrawal.amount:>20} "
        f"{truncate_hash(withdrawal.external_destination)}  "
        f"{truncate_hash(withdrawal.external_tx_hash)}"
        for withdrawal in result.withdrawals
    )

    lines.append("")
    lines.append(f"Holdings ({len(result.holdings)}):")
    lines.extend(
        f"  {holding.token_id:<24} {holding.balance:>20}  {truncate_party(holding.owner)}"
        for holding in result.holdings
    )
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
        if parsed_args.env_file:
            load_environment(parsed_args.env_file)
        configure_logging(level=log_level(verbose=parsed_args.verbose))
        activity = _build_activity_config(parsed_args)
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        result = read_bridge_activity(activity=activity)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(render_report(result))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    load_environment()
    signal(SIGINT, sigint_handler)
    main()
