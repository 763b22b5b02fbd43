from __future__ import annotations

import pytest

from tests.support.ledger import FakeLedgerReader

_BRIDGETALLY_ENV = (
    "LEDGER_API_URL",
    "LEDGER_PARTY_ID",
    "LEDGER_TLS_VERIFY",
    "LEDGER_TIMEOUT_SECONDS",
    "LEDGER_AUTH_CLIENT_ID",
    "LEDGER_AUTH_CLIENT_SECRET",
    "LEDGER_AUTH_AUDIENCE",
    "LEDGER_AUTH_TOKEN_URL",
    "LEDGER_AUTH_TOKEN_FILE",
    "LEDGER_AUTH_EXPIRY_LEEWAY_SECONDS",
    "BRIDGE_ACTIVITY_LIMIT",
    "BRIDGE_ACTIVITY_LOOKBACK",
    "BRIDGE_ACTIVITY_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _BRIDGETALLY_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_reader() -> FakeLedgerReader:
    return FakeLedgerReader()
