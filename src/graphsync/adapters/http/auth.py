"""Client-credentials token acquisition."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from graphsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from graphsync.config.credentials import ClientCredentialsConfig, get_client_credentials_config

from .schema import TokenErrorResponse, TokenResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from graphsync.domain.ports.fetching import TokenProvider

log = getLogger(__name__)


class TokenError(RuntimeError):
    """Raised when the token endpoint does not return an access token."""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _parse_error(content: bytes) -> TokenErrorResponse | None:
    try:
        return TokenErrorResponse.model_validate_json(content)
    except ValidationError:
        return None


@dataclass(slots=True)
class ClientCredentialsTokenProvider:
    """Fetch a bearer token once and reuse it for the provider's lifetime."""

    config: ClientCredentialsConfig = field(default_factory=get_client_credentials_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _token: str | None = field(default=None, init=False, repr=False)

    def __call__(self) -> str:
        if self._token is None:
            self._token = asyncio.run(self._request_token())
        return self._token

    def invalidate(self) -> None:
        self._token = None

    async def _request_token(self) -> str:
        form = {
            "grant_type": "client_credentials",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "audience": self.config.audience,
        }
        async with self.client_factory(self.config.resilience) as client:
            response = await client.post(
                self.config.token_url,
                data=form,
                headers={"Accept": "application/json"},
            )

        if response.is_error:
            error = _parse_error(response.content)
            if error is not None:
                log.error("Token request rejected: %s", error.error)
                raise TokenError(error.error_description or error.error)
        response.raise_for_status()

        try:
            token = TokenResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise TokenError("Token endpoint returned no access token") from exc
        log.info("Obtained access token for client %s", self.config.client_id)
        return token.access_token


if TYPE_CHECKING:
    _provider_check: TokenProvider = ClientCredentialsTokenProvider()
