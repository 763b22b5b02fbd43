"""Defaults for bridge activity reads."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int

DEFAULT_ACTIVITY_LIMIT = 20
DEFAULT_OFFSET_LOOKBACK = 1000
DEFAULT_STREAM_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True, slots=True)
class ActivityConfig:
    limit: int = DEFAULT_ACTIVITY_LIMIT
    lookback: int = DEFAULT_OFFSET_LOOKBACK
    timeout_seconds: float = DEFAULT_STREAM_TIMEOUT_SECONDS


def get_activity_config() -> ActivityConfig:
    return ActivityConfig(
        limit=env_int("BRIDGE_ACTIVITY_LIMIT", default=DEFAULT_ACTIVITY_LIMIT, minimum=1),
        lookback=env_int("BRIDGE_ACTIVITY_LOOKBACK", default=DEFAULT_OFFSET_LOOKBACK, minimum=0),
        timeout_seconds=env_float(
            "BRIDGE_ACTIVITY_TIMEOUT_SECONDS", default=DEFAULT_STREAM_TIMEOUT_SECONDS
        ),
    )
