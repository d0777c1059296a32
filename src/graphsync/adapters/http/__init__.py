"""Public interface for the HTTP source adapter."""

from __future__ import annotations

from .auth import ClientCredentialsTokenProvider, TokenError
from .fetcher import HttpSnapshotFetcher, SnapshotPayloadError
from .schema import TokenErrorResponse, TokenResponse

__all__ = [
    "ClientCredentialsTokenProvider",
    "HttpSnapshotFetcher",
    "SnapshotPayloadError",
    "TokenError",
    "TokenErrorResponse",
    "TokenResponse",
]
