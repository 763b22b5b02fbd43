"""Deposit correlation: one canonical record per fingerprint and external tx hash."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import DEBUG, getLogger
from typing import TYPE_CHECKING

from bridgetally.domain import decode
from bridgetally.domain.classify import DEPOSIT_EVENT, PENDING_DEPOSIT
from bridgetally.domain.model.enums import DepositLifecycle
from bridgetally.domain.model.records import DepositRecord

if TYPE_CHECKING:
    from datetime import datetime

    from bridgetally.domain.model.ledger import CreatedEvent

log = getLogger(__name__)

_RECIPIENT_LABELS = ("recipient", "owner")
_TX_HASH_LABELS = ("evmTxHash", "txHash")

_LIFECYCLE_BY_ENTITY = {
    PENDING_DEPOSIT: DepositLifecycle.PENDING,
    DEPOSIT_EVENT: DepositLifecycle.COMPLETED,
}

_LIFECYCLE_RANK: dict[str, int] = {
    DepositLifecycle.PENDING: 1,
    DepositLifecycle.COMPLETED: 2,
}


def parse_deposit(
    event: CreatedEvent,
    *,
    offset: int,
    effective_time: datetime | None,
) -> DepositRecord:
    """Read a deposit observation from a classified created event.

    When both ``recipient`` and ``owner`` (or both tx hash labels) are present, the first
    non-empty one in label priority order is used.
    """

    fields = decode.record_fields(event.arguments)
    entity_name = event.template_id.entity_name
    if log.isEnabledFor(DEBUG):
        log.debug("%s fields @ %s: %s", entity_name, offset, decode.describe_fields(fields))
    lifecycle = _LIFECYCLE_BY_ENTITY.get(entity_name, entity_name)
    return DepositRecord(
        offset=offset,
        effective_time=effective_time,
        amount=decode.numeric(fields.get("amount")),
        recipient=decode.first_party(fields, _RECIPIENT_LABELS),
        external_tx_hash=decode.first_text(fields, _TX_HASH_LABELS),
        fingerprint=decode.text(fields.get("fingerprint")),
        lifecycle=str(lifecycle),
    )


def deposit_key(deposit: DepositRecord) -> str:
    """Correlation key ``fingerprint:txhash``, or an offset key when both are empty."""

    key = f"{deposit.fingerprint}:{deposit.external_tx_hash}"
    if key == ":":
        return f"offset:{deposit.offset}"
    return key


def lifecycle_rank(lifecycle: str) -> int:
    return _LIFECYCLE_RANK.get(lifecycle, 0)


def supersedes(new: DepositRecord, stored: DepositRecord) -> bool:
    """Return True when ``new`` should replace ``stored`` for the same key.

    A later lifecycle stage always wins; among equal stages the higher offset wins.
    """

    new_rank = lifecycle_rank(new.lifecycle)
    stored_rank = lifecycle_rank(stored.lifecycle)
    if new_rank != stored_rank:
        return new_rank > stored_rank
    return new.offset > stored.offset


@dataclass(slots=True)
class DepositCorrelator:
    """Accumulates deposit observations for a single stream pass."""

    _records: dict[str, DepositRecord] = field(default_factory=dict[str, DepositRecord])

    def __len__(self) -> int:
        return len(self._records)

    def observe(
        self,
        event: CreatedEvent,
        *,
        offset: int,
        effective_time: datetime | None,
    ) -> DepositRecord:
        """Fold one event into its canonical deposit and return the retained record."""

        deposit = parse_deposit(event, offset=offset, effective_time=effective_time)
        return self.merge(deposit)

    def merge(self, deposit: DepositRecord) -> DepositRecord:
        key = deposit_key(deposit)
        stored = self._records.get(key)
        if stored is None or supersedes(deposit, stored):
            log.debug("Deposit %s at offset %s: %s", key, deposit.offset, deposit.lifecycle)
            self._records[key] = deposit
            return deposit
        return stored

    def get(self, key: str) -> DepositRecord | None:
        return self._records.get(key)

    def records(self, *, limit: int | None = None) -> list[DepositRecord]:
        """Retained deposits in first-seen key order, truncated to ``limit``."""

        retained = list(self._records.values())
        if limit is None:
            return retained
        return retained[:limit]
