"""Public interface for the ledger credential adapter."""

from __future__ import annotations

from .client import (
    BearerTokenAuth,
    CachedCredential,
    OAuthClientCredentialsProvider,
    StaticTokenProvider,
    build_token_provider,
    compute_expiry,
    decode_subject,
)
from .schema import ClientCredentialsRequest, TokenResponse

__all__ = [
    "BearerTokenAuth",
    "CachedCredential",
    "ClientCredentialsRequest",
    "OAuthClientCredentialsProvider",
    "StaticTokenProvider",
    "TokenResponse",
    "build_token_provider",
    "compute_expiry",
    "decode_subject",
]
