"""Canonical records produced by reconciliation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .enums import WithdrawalStatus

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class DepositRecord:
    offset: int
    effective_time: datetime | None
    amount: str = ""
    recipient: str = ""
    external_tx_hash: str = ""
    fingerprint: str = ""
    lifecycle: str = ""


@dataclass(frozen=True, slots=True)
class WithdrawalRecord:
    offset: int
    effective_time: datetime | None
    amount: str = ""
    external_destination: str = ""
    external_tx_hash: str = ""
    request_contract_id: str = ""
    fingerprint: str = ""
    holding_contract_id: str = ""
    raw_status: WithdrawalStatus = WithdrawalStatus.UNKNOWN


@dataclass(frozen=True, slots=True)
class HoldingInfo:
    contract_id: str
    owner: str = ""
    balance: str = ""
    token_id: str = ""
