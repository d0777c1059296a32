"""Jinja2-based transformation of raw payloads into normalized records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, cast

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from graphsync.domain.model import Record

if TYPE_CHECKING:
    from collections.abc import Mapping

    from graphsync.domain.model import Operation
    from graphsync.domain.ports.transform import RecordTransformer

log = getLogger(__name__)


class TransformError(RuntimeError):
    """Raised when a template cannot produce a JSON list of records."""


def _add(a: int, b: int) -> int:
    return a + b


def _sub(a: int, b: int) -> int:
    return a - b


def build_environment(template_dir: Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        undefined=StrictUndefined,
        autoescape=False,  # noqa: S701 - output is JSON, never HTML
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals["add"] = _add
    env.globals["sub"] = _sub
    return env


def parse_records(text: str, *, source: str) -> list[Record]:
    """Parse rendered template output into records."""

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TransformError(f"Template {source} did not render valid JSON: {exc}") from exc
    if not isinstance(document, list):
        raise TransformError(f"Template {source} must render a JSON list")
    records: list[Record] = []
    for position, entry in enumerate(cast(list[object], document)):
        if not isinstance(entry, dict):
            raise TransformError(f"Template {source} entry {position} is not a JSON object")
        records.append(Record(cast(dict[str, object], entry)))
    return records


@dataclass(slots=True)
class JinjaRecordTransformer:
    """Render ``operation.transform`` against the payload and parse the output.

    The payload's top-level keys are available as template variables and the whole
    payload as ``payload``.
    """

    template_dir: Path = field(default_factory=Path.cwd)
    _env: Environment | None = field(default=None, init=False, repr=False)

    def __call__(self, operation: Operation, payload: Mapping[str, object]) -> list[Record]:
        if not operation.transform:
            raise TransformError(f"Operation {operation.name} has no transform template")
        env = self._environment()
        try:
            template = env.get_template(operation.transform)
            rendered = template.render({**payload, "payload": payload})
        except TemplateError as exc:
            raise TransformError(
                f"Template {operation.transform} failed for operation {operation.name}: {exc}"
            ) from exc
        records = parse_records(rendered, source=operation.transform)
        log.debug("Transformed %d records for operation %s", len(records), operation.name)
        return records

    def _environment(self) -> Environment:
        if self._env is None:
            self._env = build_environment(self.template_dir)
        return self._env


if TYPE_CHECKING:
    _transformer_check: RecordTransformer = JinjaRecordTransformer()
