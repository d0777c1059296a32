from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from graphsync import __version__
from graphsync.domain.data_integration import OperationSyncResult, SyncResult
from graphsync.ui import cli as cli_module

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def integrations_file(tmp_path: Path) -> Path:
    path = tmp_path / "integrations.toml"
    path.write_text("")
    return path


def _result() -> SyncResult:
    return SyncResult(
        integration="packer",
        operations=[
            OperationSyncResult(
                operation="buckets",
                partition=None,
                created=1,
                deleted=0,
                written=True,
            ),
        ],
    )


def test_sync_command_passes_flags(
    monkeypatch: pytest.MonkeyPatch,
    integrations_file: Path,
    tmp_path: Path,
) -> None:
    captured: dict[str, object] = {}

    def fake_sync(path: Path, **kwargs: object) -> list[SyncResult]:
        captured["path"] = path
        captured.update(kwargs)
        return [_result()]

    monkeypatch.setattr(cli_module, "sync_graph", fake_sync)

    cli_module.main(
        [
            "sync",
            "--integrations",
            str(integrations_file),
            "--templates",
            str(tmp_path),
            "--verify",
            "--state-db",
            "sqlite+pysqlite:///:memory:",
        ]
    )

    assert captured["path"] == integrations_file
    assert captured["template_dir"] == tmp_path
    assert captured["verify_convergence"] is True
    assert captured["durable_state"] is False
    assert captured["state_database_uri"] == "sqlite+pysqlite:///:memory:"


def test_plan_command_is_a_dry_run(
    monkeypatch: pytest.MonkeyPatch,
    integrations_file: Path,
) -> None:
    captured: dict[str, object] = {}

    def fake_sync(_path: Path, **kwargs: object) -> list[SyncResult]:
        captured.update(kwargs)
        return []

    monkeypatch.setattr(cli_module, "sync_graph", fake_sync)

    cli_module.main(["plan", "--integrations", str(integrations_file)])

    assert captured["dry_run"] is True
    assert captured["template_dir"] is None
    assert captured["durable_state"] is False
    assert captured["state_database_uri"] is None


def test_plan_command_reads_durable_state(
    monkeypatch: pytest.MonkeyPatch,
    integrations_file: Path,
) -> None:
    captured: dict[str, object] = {}

    def fake_sync(_path: Path, **kwargs: object) -> list[SyncResult]:
        captured.update(kwargs)
        return [_result()]

    monkeypatch.setattr(cli_module, "sync_graph", fake_sync)

    cli_module.main(
        [
            "plan",
            "--integrations",
            str(integrations_file),
            "--durable-state",
            "--state-db",
            "sqlite+pysqlite:///state.db",
        ]
    )

    assert captured["dry_run"] is True
    assert captured["durable_state"] is True
    assert captured["state_database_uri"] == "sqlite+pysqlite:///state.db"


def test_missing_integrations_file_exits_2(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync", "--integrations", str(tmp_path / "absent.toml")])

    assert excinfo.value.code == 2


def test_sync_failure_exits_1(
    monkeypatch: pytest.MonkeyPatch,
    integrations_file: Path,
) -> None:
    def fake_sync(*_: object, **__: object) -> list[SyncResult]:
        raise ConnectionError("graph unavailable")

    monkeypatch.setattr(cli_module, "sync_graph", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync", "--integrations", str(integrations_file)])

    assert excinfo.value.code == 1


def test_command_is_required() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out
