"""Reading configuration values from the process environment."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable


def _lookup(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def require_env_vars(names: Iterable[str]) -> dict[str, str]:
    """Return every named variable, or raise once listing all that are unset or blank."""

    values = {name: _lookup(name) for name in names}
    missing = sorted(name for name, value in values.items() if value is None)
    if missing:
        raise MissingConfigurationError(missing)
    return {name: value for name, value in values.items() if value is not None}


def require_env_var(name: str) -> str:
    return require_env_vars([name])[name]


def optional_env_var(name: str, default: str) -> str:
    value = _lookup(name)
    return default if value is None else value


def float_env_var(name: str, default: float) -> float:
    value = _lookup(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
