"""Ledger events as consumed by the reconciliation core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .values import Record

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class TemplateId:
    module_name: str
    entity_name: str
    package_id: str = ""

    @property
    def qualified_name(self) -> str:
        return f"{self.module_name}.{self.entity_name}"

    def __str__(self) -> str:
        return f"{self.module_name}:{self.entity_name}"


@dataclass(frozen=True, slots=True)
class CreatedEvent:
    """A contract instance becoming active, with its create arguments."""

    contract_id: str
    template_id: TemplateId
    arguments: Record = field(default_factory=Record)


@dataclass(frozen=True, slots=True)
class Transaction:
    update_id: str
    offset: int
    effective_at: datetime | None = None
    created_events: tuple[CreatedEvent, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class LedgerUpdate:
    """One frame of the update stream.

    Frames without a transaction (offset checkpoints, reassignments) carry ``None``.
    """

    transaction: Transaction | None = None


@dataclass(frozen=True, slots=True)
class ActiveContract:
    created_event: CreatedEvent
    synchronizer_id: str = ""
