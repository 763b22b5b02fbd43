"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from bridgetally.adapters.auth import (
    OAuthClientCredentialsProvider,
    StaticTokenProvider,
    build_token_provider,
)
from bridgetally.adapters.ledger import JsonLedgerClient
from bridgetally.config import get_activity_config, get_ledger_config, load_environment
from bridgetally.domain.consumer import ActivityQuery, BridgeActivityConsumer
from bridgetally.domain.holdings import snapshot_holdings
from bridgetally.domain.model.enums import ConsumerState

if TYPE_CHECKING:
    from pathlib import Path

    from bridgetally.config import ActivityConfig, LedgerConfig
    from bridgetally.domain.model.records import DepositRecord, HoldingInfo, WithdrawalRecord
    from bridgetally.domain.ports import LedgerReader, TokenProvider

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BridgeActivity:
    """Recent bridge activity and current holdings for one party."""

    party: str
    ledger_end: int
    start_offset: int
    state: ConsumerState
    subject: str | None = None
    deposits: list[DepositRecord] = field(default_factory=list)
    withdrawals: list[WithdrawalRecord] = field(default_factory=list)
    holdings: list[HoldingInfo] = field(default_factory=list)
    contract_types: Counter[str] = field(default_factory=Counter[str])

    @property
    def truncated(self) -> bool:
        return self.state is ConsumerState.CANCELLED


async def collect_bridge_activity(
    reader: LedgerReader,
    *,
    party: str,
    activity: ActivityConfig,
) -> BridgeActivity:
    """Scan the last ``activity.lookback`` offsets and snapshot holdings at the ledger end.

    One ``activity.timeout_seconds`` deadline, started once the ledger end is known,
    bounds both the update stream and the holdings query. Reaching it yields a partial
    result in state ``CANCELLED``.
    """

    end = await reader.ledger_end()
    if end == 0:
        log.info("Ledger end is 0; nothing to read for %s", party)
        return BridgeActivity(
            party=party, ledger_end=0, start_offset=0, state=ConsumerState.DRAINED
        )

    start = max(0, end - activity.lookback)
    loop = asyncio.get_running_loop()
    deadline = loop.time() + activity.timeout_seconds
    consumer = BridgeActivityConsumer(reader)
    snapshot = await consumer.consume(
        ActivityQuery(
            party=party, begin_exclusive=start, end_inclusive=end, limit=activity.limit
        ),
        timeout_seconds=activity.timeout_seconds,
    )
    holdings = await snapshot_holdings(reader, party=party, offset=end, deadline=deadline)
    state = snapshot.state
    if loop.time() >= deadline:
        state = ConsumerState.CANCELLED

    return BridgeActivity(
        party=party,
        ledger_end=end,
        start_offset=start,
        state=state,
        deposits=snapshot.deposits,
        withdrawals=snapshot.withdrawals,
        holdings=holdings,
        contract_types=snapshot.contract_types,
    )


def read_bridge_activity(
    config: LedgerConfig | None = None,
    *,
    activity: ActivityConfig | None = None,
    reader: LedgerReader | None = None,
    token_provider: TokenProvider | None = None,
    env_file: Path | str | None = None,
) -> BridgeActivity:
    """Read recent deposits, withdrawals and holdings using the configured adapters.

    ``reader`` replaces the JSON gateway client entirely; otherwise one is built from
    ``config`` (or the environment) and authenticated with ``token_provider`` or the
    provider described by the configuration.
    """

    if env_file is not None:
        load_environment(env_file)
    ledger_config = config or get_ledger_config()
    activity_config = activity or get_activity_config()

    owns_provider = token_provider is None and reader is None
    provider = token_provider
    if owns_provider:
        provider = build_token_provider(ledger_config.auth)

    log.info(
        "Starting bridge activity read for %s: lookback=%s, limit=%s, timeout=%ss",
        ledger_config.party_id,
        activity_config.lookback,
        activity_config.limit,
        activity_config.timeout_seconds,
    )
    try:
        result = asyncio.run(
            _read_bridge_activity_async(
                ledger_config, activity_config, reader=reader, token_provider=provider
            )
        )
    finally:
        if owns_provider and isinstance(provider, OAuthClientCredentialsProvider):
            provider.close()

    result = replace(result, subject=_token_subject(provider))
    log.info(
        f"Finished bridge activity read: offsets=({result.start_offset}, {result.ledger_end}], "
        f"deposits={len(result.deposits)}, withdrawals={len(result.withdrawals)}, "
        f"holdings={len(result.holdings)}, state={result.state}"
    )
    return result


async def _read_bridge_activity_async(
    config: LedgerConfig,
    activity: ActivityConfig,
    *,
    reader: LedgerReader | None,
    token_provider: TokenProvider | None,
) -> BridgeActivity:
    if reader is not None:
        return await collect_bridge_activity(reader, party=config.party_id, activity=activity)
    async with JsonLedgerClient(config=config, token_provider=token_provider) as client:
        return await collect_bridge_activity(client, party=config.party_id, activity=activity)


def _token_subject(provider: TokenProvider | None) -> str | None:
    if isinstance(provider, OAuthClientCredentialsProvider | StaticTokenProvider):
        return provider.subject
    return None
