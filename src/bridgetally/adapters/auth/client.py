"""Bearer credentials for the ledger gateway."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

import httpx
import jwt
from pydantic import ValidationError

from bridgetally.domain.ports.auth import AuthenticationError, TokenProvider, authorization_header

from .schema import ClientCredentialsRequest, TokenResponse

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

    from bridgetally.config.ledger import AuthConfig, OAuthConfig

log = getLogger(__name__)

type Clock = Callable[[], datetime]

DEFAULT_TOKEN_LIFETIME: Final = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class CachedCredential:
    access_token: str
    expires_at: datetime
    subject: str | None = None

    def valid_at(self, now: datetime) -> bool:
        return now < self.expires_at


def compute_expiry(now: datetime, expires_in: int | None, leeway_seconds: int) -> datetime:
    """Return when a token issued at ``now`` should be considered stale.

    Short-lived tokens (``expires_in <= leeway``) use half their lifetime as leeway.
    A missing or non-positive lifetime falls back to five minutes.
    """

    if expires_in is None or expires_in <= 0:
        return now + DEFAULT_TOKEN_LIFETIME
    leeway: float = leeway_seconds
    if expires_in <= leeway:
        leeway = expires_in / 2
    return now + timedelta(seconds=expires_in - leeway)


def decode_subject(token: str) -> str | None:
    """Read the ``sub`` claim without verifying the signature, if the token is a JWT."""

    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        log.debug("Access token subject not readable: %s", exc)
        return None
    subject = claims.get("sub")
    if isinstance(subject, str) and subject:
        return subject
    return None


class OAuthClientCredentialsProvider:
    """OAuth2 client-credentials token source with a cached, shared credential.

    The lock is held across the token request so concurrent callers wait for a single
    refresh instead of issuing their own.
    """

    def __init__(
        self,
        config: OAuthConfig,
        *,
        http_client: httpx.Client | None = None,
        clock: Clock = _utcnow,
    ) -> None:
        self.config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=config.timeout_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._credential: CachedCredential | None = None

    @property
    def credential(self) -> CachedCredential | None:
        return self._credential

    @property
    def subject(self) -> str | None:
        credential = self._credential
        return credential.subject if credential is not None else None

    def get_token(self) -> str:
        with self._lock:
            now = self._clock()
            credential = self._credential
            if credential is not None and credential.valid_at(now):
                return credential.access_token
            credential = self._request_token(now)
            self._credential = credential
            return credential.access_token

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request_token(self, now: datetime) -> CachedCredential:
        body = ClientCredentialsRequest(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            audience=self.config.audience,
        )
        try:
            response = self._client.post(self.config.token_url, json=body.model_dump())
        except httpx.HTTPError as exc:
            raise AuthenticationError(f"Token endpoint unreachable: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise AuthenticationError(
                f"Token endpoint returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = TokenResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise AuthenticationError("Malformed token endpoint response") from exc

        credential = CachedCredential(
            access_token=payload.access_token,
            expires_at=compute_expiry(
                now, payload.expires_in, self.config.expiry_leeway_seconds
            ),
            subject=decode_subject(payload.access_token),
        )
        log.info(
            "Obtained ledger access token for %s, refreshing after %s",
            credential.subject or "unknown subject",
            credential.expires_at.isoformat(),
        )
        return credential


class StaticTokenProvider:
    """Serves a pre-issued token read once from ``path``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._token: str | None = None

    @property
    def subject(self) -> str | None:
        return decode_subject(self._token) if self._token else None

    def get_token(self) -> str:
        with self._lock:
            if self._token is None:
                self._token = self._read()
            return self._token

    def _read(self) -> str:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise AuthenticationError(f"Cannot read token file {self.path}: {exc}") from exc
        if not token:
            raise AuthenticationError(f"Token file {self.path} is empty")
        log.info("Using static ledger token from %s", self.path)
        return token


def build_token_provider(
    auth: AuthConfig,
    *,
    http_client: httpx.Client | None = None,
    clock: Clock = _utcnow,
) -> TokenProvider | None:
    """Pick the credential source for the ledger; ``None`` means unauthenticated."""

    if auth.oauth is not None:
        return OAuthClientCredentialsProvider(auth.oauth, http_client=http_client, clock=clock)
    if auth.token_file is not None:
        return StaticTokenProvider(auth.token_file)
    log.warning("No ledger credentials configured; requests are sent unauthenticated")
    return None


class BearerTokenAuth(httpx.Auth):
    """Attach ``Authorization: Bearer`` from a blocking ``TokenProvider`` to every request."""

    def __init__(self, provider: TokenProvider) -> None:
        self.provider = provider

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers.update(authorization_header(self.provider))
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        header = await asyncio.to_thread(authorization_header, self.provider)
        request.headers.update(header)
        yield request
