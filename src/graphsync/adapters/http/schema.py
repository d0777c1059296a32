"""Pydantic models describing OAuth token endpoint payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OAuthBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TokenResponse(OAuthBaseModel):
    access_token: str = Field(min_length=1)
    token_type: str | None = None
    expires_in: int | None = None


class TokenErrorResponse(OAuthBaseModel):
    error: str
    error_description: str | None = None
