from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from bridgetally.domain.correlation import DepositCorrelator, deposit_key, parse_deposit
from bridgetally.domain.correlation.deposits import supersedes
from bridgetally.domain.model.enums import DepositLifecycle
from bridgetally.domain.model.records import DepositRecord
from bridgetally.domain.model.values import Party, Text
from tests.support.ledger import (
    ALICE,
    EPOCH,
    completed_deposit,
    created,
    pending_deposit,
)

if TYPE_CHECKING:
    from bridgetally.domain.model.ledger import CreatedEvent


def _observe(correlator: DepositCorrelator, offset: int, event: CreatedEvent) -> DepositRecord:
    return correlator.observe(event, offset=offset, effective_time=EPOCH)


def test_parse_pending_deposit_reads_recipient_and_lifecycle() -> None:
    deposit = parse_deposit(
        pending_deposit("F1", tx_hash="0xAA", amount="2.5"), offset=7, effective_time=EPOCH
    )

    assert deposit.offset == 7
    assert deposit.effective_time == EPOCH
    assert deposit.amount == "2.5"
    assert deposit.recipient == ALICE
    assert deposit.external_tx_hash == "0xAA"
    assert deposit.fingerprint == "F1"
    assert deposit.lifecycle == DepositLifecycle.PENDING


def test_parse_completed_deposit_uses_owner_and_completed_lifecycle() -> None:
    deposit = parse_deposit(completed_deposit("F1"), offset=3, effective_time=None)

    assert deposit.recipient == ALICE
    assert deposit.lifecycle == "Completed"
    assert deposit.external_tx_hash == ""


def test_recipient_label_wins_over_owner() -> None:
    event = created(
        "Bridge.Contracts",
        "DepositEvent",
        recipient=Party("bob"),
        owner=Party("carol"),
        txHash=Text("0xfallback"),
    )

    deposit = parse_deposit(event, offset=1, effective_time=None)

    assert deposit.recipient == "bob"
    assert deposit.external_tx_hash == "0xfallback"


def test_deposit_key_uses_offset_when_fingerprint_and_hash_are_empty() -> None:
    assert deposit_key(DepositRecord(offset=9, effective_time=None)) == "offset:9"
    assert deposit_key(DepositRecord(offset=9, effective_time=None, fingerprint="F1")) == "F1:"
    assert (
        deposit_key(DepositRecord(offset=9, effective_time=None, external_tx_hash="0xAA"))
        == ":0xAA"
    )


def test_pending_and_completed_with_different_hash_stay_separate() -> None:
    correlator = DepositCorrelator()

    _observe(correlator, 1, pending_deposit("F1"))
    _observe(correlator, 2, completed_deposit("F1", tx_hash="0xAA"))

    records = correlator.records()
    assert [deposit_key(record) for record in records] == ["F1:", "F1:0xAA"]
    pending = correlator.get("F1:")
    completed = correlator.get("F1:0xAA")
    assert pending is not None
    assert pending.lifecycle == "Pending"
    assert completed is not None
    assert completed.lifecycle == "Completed"


def test_completed_replaces_pending_for_same_key() -> None:
    correlator = DepositCorrelator()

    _observe(correlator, 1, pending_deposit("F1", tx_hash="0xAA"))
    retained = _observe(correlator, 4, completed_deposit("F1", tx_hash="0xAA"))

    assert len(correlator) == 1
    assert retained.lifecycle == "Completed"
    assert retained.offset == 4


def test_later_pending_never_downgrades_completed() -> None:
    correlator = DepositCorrelator()

    _observe(correlator, 4, completed_deposit("F1", tx_hash="0xAA"))
    retained = _observe(correlator, 9, pending_deposit("F1", tx_hash="0xAA"))

    assert retained.lifecycle == "Completed"
    assert retained.offset == 4


def test_equal_lifecycle_keeps_highest_offset() -> None:
    correlator = DepositCorrelator()

    _observe(correlator, 5, pending_deposit("F1", tx_hash="0xAA", amount="1"))
    _observe(correlator, 3, pending_deposit("F1", tx_hash="0xAA", amount="2"))
    _observe(correlator, 8, pending_deposit("F1", tx_hash="0xAA", amount="3"))

    (record,) = correlator.records()
    assert record.offset == 8
    assert record.amount == "3"


def test_replaying_the_same_event_is_idempotent() -> None:
    correlator = DepositCorrelator()
    event = completed_deposit("F1", tx_hash="0xAA")

    first = _observe(correlator, 2, event)
    second = _observe(correlator, 2, event)

    assert first == second
    assert correlator.records() == [first]


def test_unknown_lifecycle_ranks_below_pending() -> None:
    stored = DepositRecord(offset=1, effective_time=None, lifecycle="Pending")
    unknown = DepositRecord(offset=5, effective_time=None, lifecycle="Mystery")

    assert not supersedes(unknown, stored)
    assert supersedes(stored, unknown)


def test_records_are_in_first_seen_order_and_limited() -> None:
    correlator = DepositCorrelator()
    for offset, fingerprint in enumerate(("C", "A", "B"), start=1):
        _observe(correlator, offset, pending_deposit(fingerprint, tx_hash="0x1"))
    _observe(correlator, 10, completed_deposit("C", tx_hash="0x1"))

    assert [record.fingerprint for record in correlator.records()] == ["C", "A", "B"]
    assert [record.fingerprint for record in correlator.records(limit=2)] == ["C", "A"]


def test_parse_deposit_logs_fields_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="bridgetally.domain.correlation.deposits"):
        parse_deposit(pending_deposit("F1", tx_hash="0xAA"), offset=7, effective_time=EPOCH)

    assert "PendingDeposit fields @ 7:" in caplog.text
    assert "fingerprint=F1" in caplog.text
    assert "evmTxHash=0xAA" in caplog.text
    assert ALICE not in caplog.text


def test_parse_deposit_skips_field_dump_above_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="bridgetally.domain.correlation.deposits"):
        parse_deposit(pending_deposit("F1"), offset=7, effective_time=EPOCH)

    assert "fields @" not in caplog.text
