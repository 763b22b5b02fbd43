"""Domain model for bridge reconciliation."""

from __future__ import annotations

from .enums import ConsumerState, DepositLifecycle, WithdrawalStatus
from .ledger import ActiveContract, CreatedEvent, LedgerUpdate, TemplateId, Transaction
from .records import DepositRecord, HoldingInfo, WithdrawalRecord

__all__ = [
    "ActiveContract",
    "ConsumerState",
    "CreatedEvent",
    "DepositLifecycle",
    "DepositRecord",
    "HoldingInfo",
    "LedgerUpdate",
    "TemplateId",
    "Transaction",
    "WithdrawalRecord",
    "WithdrawalStatus",
]
