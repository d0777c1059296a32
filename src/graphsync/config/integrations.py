"""Loading integration descriptors from a TOML file."""

from __future__ import annotations

import tomllib
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from graphsync.domain.model import IntegrationItem, Operation, OperationCategory

from .errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class OperationModel(_ConfigModel):
    name: str = Field(min_length=1)
    category: OperationCategory
    params: tuple[str, ...] = ()
    transform: str | None = None

    def to_domain(self) -> Operation:
        return Operation(
            name=self.name,
            category=self.category,
            params=self.params,
            transform=self.transform,
        )


class IntegrationModel(_ConfigModel):
    kind: str = Field(min_length=1)
    url: str = ""
    name: str | None = None
    operations: tuple[OperationModel, ...] = ()

    @model_validator(mode="after")
    def _unique_operation_names(self) -> Self:
        seen: set[str] = set()
        for operation in self.operations:
            if operation.name in seen:
                raise ValueError(f"Duplicate operation name: {operation.name}")
            seen.add(operation.name)
        return self

    def to_domain(self) -> IntegrationItem:
        return IntegrationItem(
            kind=self.kind,
            url=self.url,
            name=self.name,
            operations=tuple(operation.to_domain() for operation in self.operations),
        )


class IntegrationsDocument(_ConfigModel):
    integrations: tuple[IntegrationModel, ...] = ()


def parse_integrations(document: dict[str, object]) -> tuple[IntegrationItem, ...]:
    """Validate an already-parsed document and return domain descriptors."""

    try:
        parsed = IntegrationsDocument.model_validate(document)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid integrations configuration: {exc}") from exc
    return tuple(integration.to_domain() for integration in parsed.integrations)


def load_integrations(path: Path) -> tuple[IntegrationItem, ...]:
    """Read integration descriptors from the TOML file at ``path``."""

    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Integrations file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Integrations file {path} is not valid TOML: {exc}") from exc
    return parse_integrations(document)
