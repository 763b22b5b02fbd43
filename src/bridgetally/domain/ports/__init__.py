"""Ports connecting the reconciliation core to the ledger and the credential issuer."""

from __future__ import annotations

from .auth import AuthenticationError, TokenProvider, authorization_header
from .ledger import LedgerReader, LedgerTransportError

__all__ = [
    "AuthenticationError",
    "LedgerReader",
    "LedgerTransportError",
    "TokenProvider",
    "authorization_header",
]
