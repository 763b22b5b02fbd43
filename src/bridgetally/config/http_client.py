"""Configuration types for the shared async HTTP client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Transport settings for one upstream service.

    Requests are never retried or cached; a failure surfaces to the caller once.
    """

    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    verify_tls: bool = True
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = field(default=None)
