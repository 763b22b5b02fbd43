"""Correlators folding raw ledger events into canonical deposit and withdrawal records."""

from __future__ import annotations

from .deposits import DepositCorrelator, deposit_key, parse_deposit
from .withdrawals import (
    DEFAULT_LOOKBACK_WINDOW,
    WithdrawalCorrelator,
    parse_withdrawal,
)

__all__ = [
    "DEFAULT_LOOKBACK_WINDOW",
    "DepositCorrelator",
    "WithdrawalCorrelator",
    "deposit_key",
    "parse_deposit",
    "parse_withdrawal",
]
