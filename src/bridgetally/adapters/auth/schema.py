"""Pydantic models describing the OAuth2 token endpoint payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TokenBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ClientCredentialsRequest(TokenBaseModel):
    client_id: str
    client_secret: str
    audience: str
    grant_type: str = "client_credentials"


class TokenResponse(TokenBaseModel):
    access_token: str = Field(min_length=1)
    token_type: str | None = None
    expires_in: int | None = None

    @field_validator("expires_in", mode="before")
    @classmethod
    def _parse_expires_in(cls, value: object) -> object:
        # some issuers send the lifetime as a string
        if isinstance(value, str):
            stripped = value.strip()
            return int(stripped) if stripped else None
        return value
