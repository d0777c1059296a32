"""Neo4j connection configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .env import require_env_vars


@dataclass(frozen=True)
class Neo4jConfig:
    uri: str
    username: str
    password: str = field(repr=False)
    database: str | None = None


def get_neo4j_config() -> Neo4jConfig:
    values = require_env_vars(("NEO4J_URI", "NEO4J_DB_USERNAME", "NEO4J_DB_PASSWORD"))
    database = os.getenv("NEO4J_DATABASE")
    return Neo4jConfig(
        uri=values["NEO4J_URI"],
        username=values["NEO4J_DB_USERNAME"],
        password=values["NEO4J_DB_PASSWORD"],
        database=database.strip() if database and database.strip() else None,
    )
