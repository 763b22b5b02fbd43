"""Port for reading the ledger's update stream and active-contract snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from bridgetally.domain.model.ledger import ActiveContract, LedgerUpdate


class LedgerTransportError(RuntimeError):
    """Raised when the ledger cannot be reached or a stream breaks."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@runtime_checkable
class LedgerReader(Protocol):
    """Read-only view of the ledger for one party.

    Implementations request every template (wildcard filter) with verbose field labels;
    update streams use the ACS-delta transaction shape.
    """

    async def ledger_end(self) -> int: ...

    def updates(
        self,
        *,
        party: str,
        begin_exclusive: int,
        end_inclusive: int,
    ) -> AsyncGenerator[LedgerUpdate, None]: ...

    def active_contracts(
        self,
        *,
        party: str,
        active_at_offset: int,
    ) -> AsyncGenerator[ActiveContract, None]: ...


__all__ = ["LedgerReader", "LedgerTransportError"]
