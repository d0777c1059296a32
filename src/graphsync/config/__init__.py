"""Application configuration helpers."""

from __future__ import annotations

from .credentials import ClientCredentialsConfig, get_client_credentials_config
from .env import float_env_var, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import (
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    get_snapshot_resilience_config,
)
from .integrations import load_integrations, parse_integrations
from .logging import configure_logging
from .neo4j import Neo4jConfig, get_neo4j_config
from .storage import (
    StateDatabaseConfig,
    StorageConfig,
    get_state_database_config,
    get_storage_config,
)

__all__ = [
    "ClientCredentialsConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "Neo4jConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StateDatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "float_env_var",
    "get_client_credentials_config",
    "get_neo4j_config",
    "get_snapshot_resilience_config",
    "get_state_database_config",
    "get_storage_config",
    "load_integrations",
    "optional_env_var",
    "parse_integrations",
    "require_env_var",
    "require_env_vars",
]
