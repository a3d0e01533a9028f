from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tunevault.config import ConfigurationError
from tunevault.domain.reconciliation import SyncMode, SyncReport
from tunevault.ui import cli as cli_module

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    captured: dict[str, object] = {}
    engine = object()

    def fake_build_engine(*, notify: Callable[[str], None]) -> object:
        captured["notify"] = notify
        return engine

    def fake_full(**kwargs: object) -> SyncReport:
        captured["full"] = kwargs
        return SyncReport(mode=SyncMode.FULL)

    def fake_incremental(**kwargs: object) -> SyncReport:
        captured["incremental"] = kwargs
        return SyncReport(mode=SyncMode.INCREMENTAL)

    def fake_watch(**kwargs: object) -> None:
        captured["watch"] = kwargs

    monkeypatch.setattr(cli_module, "build_engine", fake_build_engine)
    monkeypatch.setattr(cli_module, "run_full_sync", fake_full)
    monkeypatch.setattr(cli_module, "run_incremental_sync", fake_incremental)
    monkeypatch.setattr(cli_module, "watch", fake_watch)
    captured["engine"] = engine
    return captured


def test_main_cli_full(captured: dict[str, object]) -> None:
    cli_module.main(["full"])

    assert captured["full"] == {"engine": captured["engine"]}


def test_main_cli_incremental_silent(captured: dict[str, object]) -> None:
    cli_module.main(["incremental", "--silent"])

    assert captured["incremental"] == {"engine": captured["engine"], "silent": True}


def test_main_cli_watch(captured: dict[str, object]) -> None:
    cli_module.main(["--verbose", "watch", "--interval-minutes", "5", "--sync-on-start"])

    assert captured["watch"] == {
        "engine": captured["engine"],
        "interval_minutes": 5.0,
        "sync_on_start": True,
    }


def test_main_cli_rejects_non_positive_interval(captured: dict[str, object]) -> None:
    with pytest.raises(SystemExit) as exc:
        cli_module.main(["watch", "--interval-minutes", "0"])

    assert exc.value.code == 2
    assert "watch" not in captured


def test_main_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit) as exc:
        cli_module.main([])

    assert exc.value.code == 2


def test_main_cli_exits_nonzero_when_pass_fails(
    captured: dict[str, object], monkeypatch: pytest.MonkeyPatch
) -> None:
    def failed_full(**kwargs: object) -> SyncReport:
        return SyncReport(mode=SyncMode.FULL, failed=True, error="boom")

    monkeypatch.setattr(cli_module, "run_full_sync", failed_full)

    with pytest.raises(SystemExit) as exc:
        cli_module.main(["full"])

    assert exc.value.code == 1


def test_main_cli_exits_nonzero_on_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_build_engine(**kwargs: object) -> object:
        raise ConfigurationError("Missing configuration for: TUNEVAULT_VAULT_DIR")

    monkeypatch.setattr(cli_module, "build_engine", broken_build_engine)

    with pytest.raises(SystemExit) as exc:
        cli_module.main(["full"])

    assert exc.value.code == 1
