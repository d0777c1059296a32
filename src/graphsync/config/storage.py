"""Where durable partition state lives on disk."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "graphsync"
DEFAULT_STATE_DB_FILENAME: Final[str] = "state.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    state_database_filename: str = DEFAULT_STATE_DB_FILENAME

    def state_database_path(self) -> Path:
        """Return the state database path, creating the data directory if needed."""

        directory = self.data_dir.expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        return directory / self.state_database_filename

    def state_database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.state_database_path()}"


@dataclass(frozen=True, slots=True)
class StateDatabaseConfig:
    uri: str


def default_data_dir() -> Path:
    if sys.platform == "win32":
        root = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        root = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return (Path(root) / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    override = os.getenv("GRAPHSYNC_DATA_DIR")
    return StorageConfig(data_dir=Path(override) if override else default_data_dir())


def get_state_database_config(*, storage: StorageConfig | None = None) -> StateDatabaseConfig:
    """Use ``STATE_DATABASE_URI`` when set, else a SQLite file in the data directory."""

    uri = os.getenv("STATE_DATABASE_URI")
    if uri:
        return StateDatabaseConfig(uri=uri)
    return StateDatabaseConfig(uri=(storage or get_storage_config()).state_database_uri())
