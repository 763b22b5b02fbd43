"""Public interface for the ledger JSON gateway adapter."""

from __future__ import annotations

from .client import (
    ACTIVE_CONTRACTS_PATH,
    LEDGER_END_PATH,
    UPDATES_PATH,
    JsonLedgerClient,
    active_contracts_request,
    updates_request,
)
from .translator import parse_active_contract, parse_update, parse_value

__all__ = [
    "ACTIVE_CONTRACTS_PATH",
    "LEDGER_END_PATH",
    "UPDATES_PATH",
    "JsonLedgerClient",
    "active_contracts_request",
    "parse_active_contract",
    "parse_update",
    "parse_value",
    "updates_request",
]
