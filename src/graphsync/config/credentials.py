"""OAuth client-credentials configuration for upstream APIs."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

DEFAULT_TOKEN_URL = "https://auth.idp.hashicorp.com/oauth2/token"
DEFAULT_AUDIENCE = "https://api.hashicorp.cloud"
TOKEN_TIMEOUT_SECONDS = 10.0


def _default_auth_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="oauth",
        timeout_seconds=TOKEN_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
    )


@dataclass(frozen=True)
class ClientCredentialsConfig:
    """Holds the service principal used to obtain bearer tokens."""

    client_id: str
    client_secret: str = field(repr=False)
    token_url: str = DEFAULT_TOKEN_URL
    audience: str = DEFAULT_AUDIENCE
    resilience: ResilienceConfig = field(default_factory=_default_auth_resilience)


def get_client_credentials_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> ClientCredentialsConfig:
    values = require_env_vars(("HCP_CLIENT_ID", "HCP_CLIENT_SECRET"))
    return ClientCredentialsConfig(
        client_id=values["HCP_CLIENT_ID"],
        client_secret=values["HCP_CLIENT_SECRET"],
        token_url=optional_env_var("HCP_AUTH_URL", DEFAULT_TOKEN_URL),
        audience=optional_env_var("HCP_AUDIENCE", DEFAULT_AUDIENCE),
        resilience=resilience or _default_auth_resilience(),
    )
