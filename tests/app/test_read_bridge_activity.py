from __future__ import annotations

from typing import TYPE_CHECKING

import jwt
import pytest

from bridgetally.adapters.auth import StaticTokenProvider
from bridgetally.app import read_bridge_activity
from bridgetally.config import ActivityConfig, LedgerConfig
from bridgetally.domain.model.enums import ConsumerState, WithdrawalStatus
from bridgetally.domain.ports import LedgerTransportError
from tests.support.ledger import (
    ALICE,
    FakeLedgerReader,
    completed_deposit,
    holding,
    pending_deposit,
    transaction,
    withdrawal_event,
    withdrawal_request,
)

if TYPE_CHECKING:
    from pathlib import Path

CONFIG = LedgerConfig(api_url="https://ledger.example", party_id=ALICE)


def test_empty_ledger_skips_streaming(fake_reader: FakeLedgerReader) -> None:
    result = read_bridge_activity(CONFIG, activity=ActivityConfig(), reader=fake_reader)

    assert result.ledger_end == 0
    assert result.start_offset == 0
    assert result.state is ConsumerState.DRAINED
    assert result.deposits == []
    assert result.holdings == []
    assert fake_reader.update_calls == []
    assert fake_reader.snapshot_calls == []


def test_reads_lookback_window_and_holdings(fake_reader: FakeLedgerReader) -> None:
    fake_reader.end = 1500
    fake_reader.frames = [
        transaction(600, pending_deposit("F1")),
        transaction(601, completed_deposit("F1", tx_hash="0xAA")),
        transaction(700, withdrawal_request("H1")),
        transaction(705, withdrawal_event("Completed")),
    ]
    fake_reader.contracts = [holding("HC1"), holding("HC2")]

    result = read_bridge_activity(
        CONFIG, activity=ActivityConfig(limit=1, lookback=1000), reader=fake_reader
    )

    assert fake_reader.update_calls == [(ALICE, 500, 1500)]
    assert fake_reader.snapshot_calls == [(ALICE, 1500)]
    assert result.party == ALICE
    assert result.start_offset == 500
    assert result.ledger_end == 1500
    assert result.state is ConsumerState.DRAINED
    assert [d.external_tx_hash for d in result.deposits] == [""]
    (withdrawal,) = result.withdrawals
    assert withdrawal.raw_status is WithdrawalStatus.COMPLETED
    assert [h.contract_id for h in result.holdings] == ["HC1", "HC2"]
    assert result.contract_types["Bridge.Contracts.WithdrawalRequest"] == 1
    assert result.subject is None


def test_start_offset_is_clamped_at_zero(fake_reader: FakeLedgerReader) -> None:
    fake_reader.end = 40

    result = read_bridge_activity(
        CONFIG, activity=ActivityConfig(lookback=1000), reader=fake_reader
    )

    assert result.start_offset == 0
    assert fake_reader.update_calls == [(ALICE, 0, 40)]


def test_configuration_is_read_from_environment(
    monkeypatch: pytest.MonkeyPatch, fake_reader: FakeLedgerReader
) -> None:
    monkeypatch.setenv("LEDGER_API_URL", "https://ledger.example")
    monkeypatch.setenv("LEDGER_PARTY_ID", "bob::1220")
    monkeypatch.setenv("BRIDGE_ACTIVITY_LOOKBACK", "10")
    fake_reader.end = 25

    result = read_bridge_activity(reader=fake_reader)

    assert result.party == "bob::1220"
    assert fake_reader.update_calls == [("bob::1220", 15, 25)]


def test_subject_comes_from_token_provider(
    tmp_path: Path, fake_reader: FakeLedgerReader
) -> None:
    token_file = tmp_path / "token"
    token_file.write_text(
        jwt.encode({"sub": "svc-report"}, "bridgetally-test-signing-key-0123456789"),
        encoding="utf-8",
    )
    provider = StaticTokenProvider(token_file)
    provider.get_token()

    result = read_bridge_activity(
        CONFIG, activity=ActivityConfig(), reader=fake_reader, token_provider=provider
    )

    assert result.subject == "svc-report"


def test_transport_failures_propagate(fake_reader: FakeLedgerReader) -> None:
    fake_reader.end = 10
    fake_reader.frames = [transaction(5)]
    fake_reader.fail_at = 0

    with pytest.raises(LedgerTransportError):
        read_bridge_activity(CONFIG, activity=ActivityConfig(), reader=fake_reader)


def test_deadline_marks_result_truncated(fake_reader: FakeLedgerReader) -> None:
    fake_reader.end = 10
    fake_reader.frames = [transaction(3, pending_deposit("F1")), transaction(4)]
    fake_reader.stall_at = 1
    fake_reader.contracts = [holding("HC1")]

    result = read_bridge_activity(
        CONFIG, activity=ActivityConfig(timeout_seconds=0.05), reader=fake_reader
    )

    assert result.truncated
    assert result.state is ConsumerState.CANCELLED
    assert len(result.deposits) == 1
    assert result.holdings == []
    assert fake_reader.snapshot_calls == []


def test_deadline_also_bounds_the_holdings_query(fake_reader: FakeLedgerReader) -> None:
    fake_reader.end = 10
    fake_reader.frames = [transaction(3, pending_deposit("F1"))]
    fake_reader.contracts = [holding("HC1"), holding("HC2")]
    fake_reader.stall_contracts_at = 1

    result = read_bridge_activity(
        CONFIG, activity=ActivityConfig(timeout_seconds=0.05), reader=fake_reader
    )

    assert result.state is ConsumerState.CANCELLED
    assert len(result.deposits) == 1
    assert [h.contract_id for h in result.holdings] == ["HC1"]
