from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from bridgetally import main as main_module
from bridgetally.app import BridgeActivity
from bridgetally.config import ActivityConfig
from bridgetally.domain.model.enums import ConsumerState, WithdrawalStatus
from bridgetally.domain.model.records import DepositRecord, HoldingInfo, WithdrawalRecord
from tests.support.ledger import ALICE

if TYPE_CHECKING:
    from collections.abc import Callable


def _result(state: ConsumerState = ConsumerState.DRAINED) -> BridgeActivity:
    return BridgeActivity(
        party=ALICE,
        ledger_end=1500,
        start_offset=500,
        state=state,
        subject="svc-report",
        deposits=[
            DepositRecord(
                offset=601,
                effective_time=None,
                amount="1.0",
                recipient=ALICE,
                external_tx_hash="0x" + "a" * 64,
                fingerprint="F1",
                lifecycle="Completed",
            )
        ],
        withdrawals=[
            WithdrawalRecord(
                offset=705,
                effective_time=None,
                amount="5.0",
                external_destination="0xdest",
                raw_status=WithdrawalStatus.PENDING,
            )
        ],
        holdings=[HoldingInfo(contract_id="HC1", owner=ALICE, balance="10.0", token_id="wETH")],
    )


def _fake_read(
    captured: dict[str, object], result: BridgeActivity
) -> Callable[..., BridgeActivity]:
    def fake(**kwargs: object) -> BridgeActivity:
        captured.update(kwargs)
        return result

    return fake


def test_main_prints_report(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(main_module, "read_bridge_activity", _fake_read(captured, _result()))

    main_module.main([])

    assert captured["activity"] == ActivityConfig()
    out = capsys.readouterr().out
    assert "Offsets: (500, 1500]" in out
    assert "Subject: svc-report" in out
    assert "Deposits (1):" in out
    assert "0x" + "a" * 15 + "..." in out
    assert "PENDING" in out
    assert "wETH" in out
    assert ALICE not in out
    assert "partial" not in out


def test_main_flags_override_activity_config(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}
    monkeypatch.setattr(
        main_module,
        "read_bridge_activity",
        _fake_read(captured, _result(ConsumerState.CANCELLED)),
    )

    main_module.main(["--limit", "5", "--lookback", "200", "--timeout", "3"])

    assert captured["activity"] == ActivityConfig(limit=5, lookback=200, timeout_seconds=3.0)
    assert "partial" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [["--limit", "0"], ["--lookback", "-1"], ["--timeout", "0"]])
def test_main_rejects_invalid_flags(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], argv: list[str]
) -> None:
    monkeypatch.setattr(main_module, "read_bridge_activity", _fake_read({}, _result()))

    with pytest.raises(SystemExit) as exc:
        main_module.main(argv)

    assert exc.value.code == 2
    assert "Error:" in capsys.readouterr().err


def test_main_reports_runtime_failures(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def failing(**_: object) -> BridgeActivity:
        raise RuntimeError("ledger unreachable")

    monkeypatch.setattr(main_module, "read_bridge_activity", failing)

    with pytest.raises(SystemExit) as exc:
        main_module.main([])

    assert exc.value.code == 1
    assert "ledger unreachable" in capsys.readouterr().err


def test_main_exits_with_usage_code_when_ledger_is_not_configured(
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit) as exc:
        main_module.main([])

    assert exc.value.code == 2
    err = capsys.readouterr().err
    assert "LEDGER_API_URL" in err
    assert "LEDGER_PARTY_ID" in err
