"""Point-in-time token holdings from the active-contract set."""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from logging import DEBUG, getLogger
from typing import TYPE_CHECKING, Final

from . import decode
from .classify import is_holding_contract
from .model.records import HoldingInfo
from .ports.ledger import LedgerTransportError

if TYPE_CHECKING:
    from .model.ledger import CreatedEvent
    from .model.values import Value
    from .ports.ledger import LedgerReader

log = getLogger(__name__)

TOKEN_ID_LABELS: Final = ("tokenId", "id", "instrumentId", "assetId", "symbol", "name")


def resolve_token_id(meta: Value | None, issuer: str) -> str:
    """Pick a display identifier for the held token.

    ``meta`` sub-fields in ``TOKEN_ID_LABELS`` order win, then the Splice metadata symbol,
    then ``meta`` itself if it is plain text, then the shortened issuer party.
    """

    token_id = decode.first_text(decode.record_fields(meta), TOKEN_ID_LABELS)
    if not token_id:
        token_id = decode.meta_symbol(meta) or decode.text(meta)
    if not token_id and issuer:
        token_id = decode.truncate_party(issuer)
    return token_id


def build_holding(event: CreatedEvent) -> HoldingInfo:
    fields = decode.record_fields(event.arguments)
    if log.isEnabledFor(DEBUG):
        log.debug("Holding %s fields: %s", event.contract_id, decode.describe_fields(fields))
    return HoldingInfo(
        contract_id=event.contract_id,
        owner=decode.party(fields.get("owner")),
        balance=decode.numeric(fields.get("amount")),
        token_id=resolve_token_id(fields.get("meta"), decode.party(fields.get("issuer"))),
    )


async def snapshot_holdings(
    reader: LedgerReader,
    *,
    party: str,
    offset: int,
    deadline: float | None = None,
) -> list[HoldingInfo]:
    """Return one ``HoldingInfo`` per active holding contract visible at ``offset``.

    ``deadline`` is an event-loop time shared with the update stream. Once it passes,
    the holdings read so far are returned and a warning is logged; a transport error
    raised after that point is treated the same way.
    """

    holdings: list[HoldingInfo] = []
    if deadline is not None and asyncio.get_running_loop().time() >= deadline:
        log.warning("Deadline reached before reading holdings at offset %s", offset)
        return holdings

    scope = asyncio.timeout_at(deadline)
    truncated = False
    try:
        async with scope:
            await _read_holdings(reader, party=party, offset=offset, into=holdings)
    except TimeoutError:
        truncated = True
    except LedgerTransportError:
        if not scope.expired():
            raise
        truncated = True

    if truncated:
        log.warning(
            "Deadline reached after %s holding(s); returning partial holdings", len(holdings)
        )
    else:
        log.info("Found %s holding(s) for %s at offset %s", len(holdings), party, offset)
    return holdings


async def _read_holdings(
    reader: LedgerReader, *, party: str, offset: int, into: list[HoldingInfo]
) -> None:
    async with aclosing(reader.active_contracts(party=party, active_at_offset=offset)) as stream:
        async for contract in stream:
            event = contract.created_event
            if is_holding_contract(event.template_id):
                into.append(build_holding(event))
