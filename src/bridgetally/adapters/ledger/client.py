"""HTTP client for the ledger JSON gateway."""

from __future__ import annotations

from contextlib import aclosing
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import BaseModel, ValidationError

from bridgetally.adapters.auth import BearerTokenAuth
from bridgetally.adapters.http_client import ResilientClient
from bridgetally.domain.ports.ledger import LedgerTransportError

from .schema import ActiveContractsFrame, LedgerEndPayload, UpdateFrame
from .translator import parse_active_contract, parse_update

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable
    from types import TracebackType

    from bridgetally.config.http_client import ResilienceConfig
    from bridgetally.config.ledger import LedgerConfig
    from bridgetally.domain.model.ledger import ActiveContract, LedgerUpdate
    from bridgetally.domain.ports.auth import TokenProvider
    from bridgetally.domain.ports.ledger import LedgerReader

log = getLogger(__name__)

LEDGER_END_PATH: Final = "/v2/state/ledger-end"
UPDATES_PATH: Final = "/v2/updates"
ACTIVE_CONTRACTS_PATH: Final = "/v2/state/active-contracts"
TRANSACTION_SHAPE_ACS_DELTA: Final = "TRANSACTION_SHAPE_ACS_DELTA"

_ERROR_BODY_PREVIEW = 200


def event_format(party: str) -> dict[str, object]:
    """All templates visible to ``party``, with field labels."""

    return {
        "filtersByParty": {party: {"cumulative": [{"wildcardFilter": {}}]}},
        "verbose": True,
    }


def updates_request(*, party: str, begin_exclusive: int, end_inclusive: int) -> dict[str, object]:
    return {
        "beginExclusive": begin_exclusive,
        "endInclusive": end_inclusive,
        "updateFormat": {
            "includeTransactions": {
                "eventFormat": event_format(party),
                "transactionShape": TRANSACTION_SHAPE_ACS_DELTA,
            }
        },
    }


def active_contracts_request(*, party: str, active_at_offset: int) -> dict[str, object]:
    return {"activeAtOffset": active_at_offset, "eventFormat": event_format(party)}


def _default_client_factory(config: ResilienceConfig, auth: httpx.Auth | None) -> ResilientClient:
    return ResilientClient(config, auth=auth)


def _validate[ModelT: BaseModel](model: type[ModelT], raw: str | bytes, *, path: str) -> ModelT:
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise LedgerTransportError(f"Malformed payload from {path}: {exc}") from exc


async def _check_response(response: httpx.Response, *, method: str, path: str) -> None:
    if response.is_success:
        return
    await response.aread()
    raise LedgerTransportError(
        f"{method} {path} returned HTTP {response.status_code}: "
        f"{response.text[:_ERROR_BODY_PREVIEW]}",
        status_code=response.status_code,
    )


@dataclass(slots=True)
class JsonLedgerClient:
    """``LedgerReader`` backed by the ledger's JSON gateway.

    Use as an async context manager; every request carries the bearer token of
    ``token_provider`` when one is configured. Stream errors reported in-band as
    ``{"error": ...}`` frames surface as ``LedgerTransportError`` with the gRPC status
    code in ``status_code``.
    """

    config: LedgerConfig
    token_provider: TokenProvider | None = None
    client_factory: Callable[[ResilienceConfig, httpx.Auth | None], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> JsonLedgerClient:
        auth = BearerTokenAuth(self.token_provider) if self.token_provider else None
        self._client = self.client_factory(self.config.resolve_resilience(), auth)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def ledger_end(self) -> int:
        client = self._require_client()
        try:
            response = await client.get(LEDGER_END_PATH)
        except httpx.HTTPError as exc:
            raise LedgerTransportError(f"GET {LEDGER_END_PATH} failed: {exc}") from exc
        await _check_response(response, method="GET", path=LEDGER_END_PATH)

        offset = _validate(LedgerEndPayload, response.content, path=LEDGER_END_PATH).offset
        log.debug("Ledger end offset is %s", offset)
        return offset

    async def updates(
        self,
        *,
        party: str,
        begin_exclusive: int,
        end_inclusive: int,
    ) -> AsyncGenerator[LedgerUpdate, None]:
        body = updates_request(
            party=party, begin_exclusive=begin_exclusive, end_inclusive=end_inclusive
        )
        async with aclosing(self._stream_lines(UPDATES_PATH, body)) as lines:
            async for line in lines:
                frame = _validate(UpdateFrame, line, path=UPDATES_PATH)
                if frame.error is not None:
                    raise LedgerTransportError(
                        f"Update stream failed: {frame.error.message}",
                        status_code=frame.error.code,
                    )
                if frame.result is not None:
                    yield parse_update(frame.result)

    async def active_contracts(
        self,
        *,
        party: str,
        active_at_offset: int,
    ) -> AsyncGenerator[ActiveContract, None]:
        body = active_contracts_request(party=party, active_at_offset=active_at_offset)
        async with aclosing(self._stream_lines(ACTIVE_CONTRACTS_PATH, body)) as lines:
            async for line in lines:
                frame = _validate(ActiveContractsFrame, line, path=ACTIVE_CONTRACTS_PATH)
                if frame.error is not None:
                    raise LedgerTransportError(
                        f"Active contracts query failed: {frame.error.message}",
                        status_code=frame.error.code,
                    )
                if frame.result is not None and frame.result.active_contract is not None:
                    yield parse_active_contract(frame.result.active_contract)

    async def _stream_lines(
        self, path: str, body: dict[str, object]
    ) -> AsyncGenerator[str, None]:
        client = self._require_client()
        frames = 0
        try:
            async with client.stream("POST", path, json=body) as response:
                await _check_response(response, method="POST", path=path)
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    frames += 1
                    yield line
        except httpx.HTTPError as exc:
            raise LedgerTransportError(f"POST {path} stream broke: {exc}") from exc
        log.debug("Read %s frame(s) from %s", frames, path)

    def _require_client(self) -> ResilientClient:
        if self._client is None:
            raise RuntimeError("JsonLedgerClient must be used as an async context manager")
        return self._client


if TYPE_CHECKING:

    def _reader_check(client: JsonLedgerClient) -> LedgerReader:
        return client
