"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class DepositLifecycle(StrEnum):
    PENDING = "Pending"
    COMPLETED = "Completed"


class WithdrawalStatus(IntEnum):
    """Withdrawal progress; the integer value is the merge rank."""

    UNKNOWN = 0
    REQUEST = 1
    PENDING = 2
    COMPLETED = 3


class ConsumerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINED = "drained"
    CANCELLED = "cancelled"
    FAILED = "failed"
