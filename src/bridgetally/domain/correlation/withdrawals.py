"""Withdrawal correlation.

A withdrawal shows up on the ledger as a ``WithdrawalRequest`` that names the holding
being burned, followed by one or more ``WithdrawalEvent`` status contracts. The status
contracts do not always reference the request, so they are attached to the request
created shortly before them (within ``lookback_window`` offsets). Status only ever
advances: Completed > Pending > Request > unknown.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import DEBUG, getLogger
from typing import TYPE_CHECKING, Final

from bridgetally.domain import decode
from bridgetally.domain.classify import WITHDRAWAL_EVENT, WITHDRAWAL_REQUEST
from bridgetally.domain.model.enums import WithdrawalStatus
from bridgetally.domain.model.records import WithdrawalRecord

if TYPE_CHECKING:
    from datetime import datetime

    from bridgetally.domain.model.ledger import CreatedEvent

log = getLogger(__name__)

DEFAULT_LOOKBACK_WINDOW: Final = 10
HOLDING_KEY_PREFIX: Final = "holding:"
CONTRACT_KEY_PREFIX: Final = "cid:"

_DESTINATION_LABELS = ("evmDestination", "destination")

_STATUS_BY_ENTITY = {
    WITHDRAWAL_REQUEST: WithdrawalStatus.REQUEST,
    WITHDRAWAL_EVENT: WithdrawalStatus.PENDING,
}

_STATUS_BY_CONSTRUCTOR = {
    "Pending": WithdrawalStatus.PENDING,
    "Completed": WithdrawalStatus.COMPLETED,
}


def parse_withdrawal(
    event: CreatedEvent,
    *,
    offset: int,
    effective_time: datetime | None,
) -> WithdrawalRecord:
    fields = decode.record_fields(event.arguments)
    if log.isEnabledFor(DEBUG):
        log.debug(
            "%s fields @ %s: %s",
            event.template_id.entity_name,
            offset,
            decode.describe_fields(fields),
        )
    status = _STATUS_BY_ENTITY.get(event.template_id.entity_name, WithdrawalStatus.UNKNOWN)
    constructor = decode.variant_constructor(fields.get("status"))
    status = _STATUS_BY_CONSTRUCTOR.get(constructor, status)

    return WithdrawalRecord(
        offset=offset,
        effective_time=effective_time,
        amount=decode.numeric(fields.get("amount")),
        external_destination=decode.first_text(fields, _DESTINATION_LABELS),
        external_tx_hash=decode.text(fields.get("evmTxHash")),
        request_contract_id=event.contract_id,
        fingerprint=decode.text(fields.get("fingerprint")),
        holding_contract_id=decode.contract_id(fields.get("holdingCid")),
        raw_status=status,
    )


@dataclass(slots=True)
class WithdrawalCorrelator:
    """Accumulates withdrawal observations for a single stream pass."""

    lookback_window: int = DEFAULT_LOOKBACK_WINDOW
    _records: dict[str, WithdrawalRecord] = field(default_factory=dict[str, WithdrawalRecord])
    _contract_keys: dict[str, str] = field(default_factory=dict[str, str])

    def __len__(self) -> int:
        return len(self._records)

    def observe(
        self,
        event: CreatedEvent,
        *,
        offset: int,
        effective_time: datetime | None,
    ) -> WithdrawalRecord:
        """Fold one event into its canonical withdrawal and return the retained record."""

        withdrawal = parse_withdrawal(event, offset=offset, effective_time=effective_time)
        return self.merge(withdrawal)

    def merge(self, withdrawal: WithdrawalRecord) -> WithdrawalRecord:
        key = self.key_for(withdrawal)
        if withdrawal.request_contract_id:
            self._contract_keys.setdefault(withdrawal.request_contract_id, key)
        stored = self._records.get(key)
        if stored is None:
            self._records[key] = withdrawal
            return withdrawal

        if withdrawal.raw_status <= stored.raw_status:
            return stored

        if not withdrawal.holding_contract_id and stored.holding_contract_id:
            withdrawal = replace(withdrawal, holding_contract_id=stored.holding_contract_id)
        log.debug(
            "Withdrawal %s advanced %s -> %s at offset %s",
            key,
            stored.raw_status.name,
            withdrawal.raw_status.name,
            withdrawal.offset,
        )
        self._records[key] = withdrawal
        return withdrawal

    def key_for(self, withdrawal: WithdrawalRecord) -> str:
        """Resolve the correlation key for an observation.

        Explicit holding reference first, then the entity this contract was already
        folded into, then a holding-keyed request stored within ``lookback_window``
        offsets before it, then the observation's own contract id.
        """

        if withdrawal.holding_contract_id:
            return HOLDING_KEY_PREFIX + withdrawal.holding_contract_id

        assigned = self._contract_keys.get(withdrawal.request_contract_id)
        if assigned is not None:
            return assigned

        matched = self._find_preceding_request(withdrawal.offset)
        if matched is not None:
            return matched
        return CONTRACT_KEY_PREFIX + withdrawal.request_contract_id

    def _find_preceding_request(self, offset: int) -> str | None:
        # Smallest stored offset wins; first-seen order breaks ties.
        best_key: str | None = None
        best_offset: int | None = None
        for key, stored in self._records.items():
            if not key.startswith(HOLDING_KEY_PREFIX):
                continue
            if not stored.offset < offset <= stored.offset + self.lookback_window:
                continue
            if best_offset is None or stored.offset < best_offset:
                best_key = key
                best_offset = stored.offset
        return best_key

    def get(self, key: str) -> WithdrawalRecord | None:
        return self._records.get(key)

    def records(self, *, limit: int | None = None) -> list[WithdrawalRecord]:
        """Retained withdrawals in first-seen key order, truncated to ``limit``."""

        retained = list(self._records.values())
        if limit is None:
            return retained
        return retained[:limit]
