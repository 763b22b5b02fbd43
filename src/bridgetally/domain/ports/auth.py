"""Port for obtaining bearer credentials for the ledger."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class AuthenticationError(RuntimeError):
    """Raised when a bearer credential cannot be obtained."""


@runtime_checkable
class TokenProvider(Protocol):
    """Thread-safe source of a currently valid bearer token."""

    def get_token(self) -> str: ...


def authorization_header(provider: TokenProvider) -> dict[str, str]:
    """Return the header that authenticates one ledger call."""

    return {"Authorization": f"Bearer {provider.get_token()}"}


__all__ = ["AuthenticationError", "TokenProvider", "authorization_header"]
