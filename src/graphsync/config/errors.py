"""Configuration error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ConfigurationError(RuntimeError):
    """Raised when environment values or the integrations file are unusable."""


class MissingConfigurationError(ConfigurationError):
    def __init__(self, names: Sequence[str]) -> None:
        self.names = tuple(names)
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")
