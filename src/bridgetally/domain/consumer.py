"""Single-pass consumer of the ledger update stream.

The consumer drives one pass over ``(begin_exclusive, end_inclusive]`` for a party,
classifies every created event, and feeds it to the deposit and/or withdrawal
correlator. A caller deadline truncates the pass without failing it; any other
transport failure aborts the pass and discards what was accumulated.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from contextlib import aclosing
from dataclasses import dataclass, field
from logging import DEBUG, getLogger
from typing import TYPE_CHECKING

from .classify import is_deposit_event, is_withdrawal_event
from .correlation import DEFAULT_LOOKBACK_WINDOW, DepositCorrelator, WithdrawalCorrelator
from .model.enums import ConsumerState
from .ports.ledger import LedgerTransportError

if TYPE_CHECKING:
    from .model.ledger import Transaction
    from .model.records import DepositRecord, WithdrawalRecord
    from .ports.ledger import LedgerReader

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActivityQuery:
    party: str
    begin_exclusive: int
    end_inclusive: int
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.begin_exclusive < 0:
            raise ValueError("begin_exclusive must be non-negative")
        if self.end_inclusive < self.begin_exclusive:
            raise ValueError("end_inclusive must not precede begin_exclusive")
        if self.limit is not None and self.limit < 1:
            raise ValueError("limit must be positive")


@dataclass(slots=True)
class ActivitySnapshot:
    """Deduplicated activity for one pass, in correlator insertion order."""

    deposits: list[DepositRecord]
    withdrawals: list[WithdrawalRecord]
    state: ConsumerState
    contract_types: Counter[str] = field(default_factory=Counter[str])
    last_offset: int | None = None

    @property
    def truncated(self) -> bool:
        return self.state is ConsumerState.CANCELLED


@dataclass(slots=True)
class _Pass:
    deposits: DepositCorrelator
    withdrawals: WithdrawalCorrelator
    contract_types: Counter[str] = field(default_factory=Counter[str])
    last_offset: int | None = None

    def apply(self, transaction: Transaction) -> None:
        self.last_offset = transaction.offset
        for event in transaction.created_events:
            template_id = event.template_id
            self.contract_types[template_id.qualified_name] += 1
            if is_deposit_event(template_id):
                self.deposits.observe(
                    event, offset=transaction.offset, effective_time=transaction.effective_at
                )
            if is_withdrawal_event(template_id):
                self.withdrawals.observe(
                    event, offset=transaction.offset, effective_time=transaction.effective_at
                )


@dataclass(slots=True)
class BridgeActivityConsumer:
    reader: LedgerReader
    lookback_window: int = DEFAULT_LOOKBACK_WINDOW
    state: ConsumerState = ConsumerState.IDLE

    async def consume(
        self,
        query: ActivityQuery,
        *,
        timeout_seconds: float | None = None,
    ) -> ActivitySnapshot:
        """Run one pass and return the deduplicated deposits and withdrawals.

        Raises:
            LedgerTransportError: the stream failed before the deadline expired.
        """

        current = _Pass(
            deposits=DepositCorrelator(),
            withdrawals=WithdrawalCorrelator(lookback_window=self.lookback_window),
        )
        self.state = ConsumerState.RUNNING
        log.info(
            "Reading updates for %s in (%s, %s]",
            query.party,
            query.begin_exclusive,
            query.end_inclusive,
        )

        try:
            async with asyncio.timeout(timeout_seconds) as deadline:
                try:
                    await self._drain(query, current)
                except LedgerTransportError:
                    if not deadline.expired():
                        raise
                    log.debug("Transport error after deadline treated as end of pass")
                    self.state = ConsumerState.CANCELLED
        except TimeoutError:
            self.state = ConsumerState.CANCELLED
        except Exception:
            self.state = ConsumerState.FAILED
            raise

        if self.state is ConsumerState.CANCELLED:
            log.warning(
                "Deadline reached after offset %s; returning partial activity",
                current.last_offset,
            )
        else:
            self.state = ConsumerState.DRAINED

        if log.isEnabledFor(DEBUG):
            for name, count in sorted(current.contract_types.items()):
                log.debug("Contract type %s: %s", name, count)

        snapshot = ActivitySnapshot(
            deposits=current.deposits.records(limit=query.limit),
            withdrawals=current.withdrawals.records(limit=query.limit),
            state=self.state,
            contract_types=current.contract_types,
            last_offset=current.last_offset,
        )
        log.info(
            "Deduplicated %s deposit(s) and %s withdrawal(s)",
            len(snapshot.deposits),
            len(snapshot.withdrawals),
        )
        return snapshot

    async def _drain(self, query: ActivityQuery, current: _Pass) -> None:
        stream = self.reader.updates(
            party=query.party,
            begin_exclusive=query.begin_exclusive,
            end_inclusive=query.end_inclusive,
        )
        async with aclosing(stream) as updates:
            async for update in updates:
                if update.transaction is None:
                    continue
                current.apply(update.transaction)
