"""Ledger gateway and authentication configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger

from .env import env_bool, env_float, env_int, optional_env_var, require_env_vars
from .http_client import ResilienceConfig

log = getLogger(__name__)

DEFAULT_EXPIRY_LEEWAY_SECONDS = 60
DEFAULT_LEDGER_TIMEOUT_SECONDS = 30.0
DEFAULT_TOKEN_TIMEOUT_SECONDS = 10.0

_OAUTH_VARIABLES = {
    "client_id": "LEDGER_AUTH_CLIENT_ID",
    "client_secret": "LEDGER_AUTH_CLIENT_SECRET",
    "audience": "LEDGER_AUTH_AUDIENCE",
    "token_url": "LEDGER_AUTH_TOKEN_URL",
}


@dataclass(frozen=True, slots=True)
class OAuthConfig:
    """OAuth2 client-credentials parameters for the ledger's token issuer."""

    client_id: str
    client_secret: str = field(repr=False)
    audience: str
    token_url: str
    expiry_leeway_seconds: int = DEFAULT_EXPIRY_LEEWAY_SECONDS
    timeout_seconds: float = DEFAULT_TOKEN_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class AuthConfig:
    oauth: OAuthConfig | None = None
    token_file: str | None = None

    @property
    def enabled(self) -> bool:
        return self.oauth is not None or self.token_file is not None


@dataclass(frozen=True, slots=True)
class LedgerConfig:
    api_url: str
    party_id: str
    auth: AuthConfig = field(default_factory=AuthConfig)
    resilience: ResilienceConfig | None = None

    def resolve_resilience(self) -> ResilienceConfig:
        return self.resilience or ResilienceConfig(name="ledger", base_url=self.api_url)


def get_auth_config() -> AuthConfig:
    """Client credentials when all four OAuth2 variables are set, plus any token file.

    An incomplete OAuth2 set is ignored with a warning naming the missing variables.
    """

    present = {key: optional_env_var(name) for key, name in _OAUTH_VARIABLES.items()}
    missing = [_OAUTH_VARIABLES[key] for key, value in present.items() if value is None]

    oauth: OAuthConfig | None = None
    if not missing:
        oauth = OAuthConfig(
            client_id=present["client_id"] or "",
            client_secret=present["client_secret"] or "",
            audience=present["audience"] or "",
            token_url=present["token_url"] or "",
            expiry_leeway_seconds=env_int(
                "LEDGER_AUTH_EXPIRY_LEEWAY_SECONDS",
                default=DEFAULT_EXPIRY_LEEWAY_SECONDS,
                minimum=0,
            ),
        )
    elif len(missing) < len(_OAUTH_VARIABLES):
        log.warning(
            "Ignoring incomplete OAuth2 client-credentials configuration, missing: %s",
            ", ".join(sorted(missing)),
        )

    return AuthConfig(oauth=oauth, token_file=optional_env_var("LEDGER_AUTH_TOKEN_FILE"))


def get_ledger_config() -> LedgerConfig:
    values = require_env_vars(("LEDGER_API_URL", "LEDGER_PARTY_ID"))
    api_url = values["LEDGER_API_URL"]
    return LedgerConfig(
        api_url=api_url,
        party_id=values["LEDGER_PARTY_ID"],
        auth=get_auth_config(),
        resilience=ResilienceConfig(
            name="ledger",
            base_url=api_url,
            timeout_seconds=env_float(
                "LEDGER_TIMEOUT_SECONDS", default=DEFAULT_LEDGER_TIMEOUT_SECONDS
            ),
            verify_tls=env_bool("LEDGER_TLS_VERIFY", default=True),
        ),
    )
