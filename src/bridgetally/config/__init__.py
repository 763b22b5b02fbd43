"""Application configuration helpers."""

from __future__ import annotations

from .activity import ActivityConfig, get_activity_config
from .env import load_environment, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_client import RateLimit, ResilienceConfig
from .ledger import AuthConfig, LedgerConfig, OAuthConfig, get_auth_config, get_ledger_config
from .logging import configure_logging, log_level

__all__ = [
    "ActivityConfig",
    "AuthConfig",
    "ConfigurationError",
    "LedgerConfig",
    "MissingConfigurationError",
    "OAuthConfig",
    "RateLimit",
    "ResilienceConfig",
    "configure_logging",
    "get_activity_config",
    "get_auth_config",
    "get_ledger_config",
    "load_environment",
    "log_level",
    "optional_env_var",
    "require_env_vars",
]
