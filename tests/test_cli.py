"""Tests for CLI entrypoints."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from stability_tracker import cli
from stability_tracker.model import DailyRecord
from stability_tracker.stores.base import RecordStore, StoreUnavailable

_ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "STABILITY_TABLE",
    "STABILITY_TIMEOUT",
    "STABILITY_DB_PATH",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def _env_file(tmp_path: Path, content: str) -> Path:
    path = tmp_path / ".env"
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_args_custom_values() -> None:
    ns = cli.parse_args(
        ["--no-pushups", "--deep-work", "--steps", "1200", "--cigarettes", "2", "--save"]
    )
    assert ns.pushups is False
    assert ns.deep_work is True
    assert ns.steps == "1200"
    assert ns.cigarettes == "2"
    assert ns.save is True


def test_parse_args_defaults_leave_form_untouched() -> None:
    ns = cli.parse_args([])
    assert ns.pushups is None
    assert ns.deep_work is None
    assert ns.steps is None
    assert ns.save is False


def test_main_not_configured_prints_setup(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = _env_file(tmp_path, "SUPABASE_URL=https://YOUR_PROJECT.supabase.co\n")
    code = cli.main(["--env-file", str(env_file), "--save"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Setup required" in out
    assert "create table stability_logs" in out


def test_main_save_and_reload_with_local_store(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = _env_file(tmp_path, f"STABILITY_DB_PATH={tmp_path / 'log.sqlite3'}\n")

    code = cli.main(
        ["--env-file", str(env_file), "--pushups", "--steps", "15000", "--save"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "Score:           3/4" in out
    assert "Saved." in out
    assert "Today" in out
    assert "3 / 4 pts" in out

    code = cli.main(["--env-file", str(env_file)])
    out = capsys.readouterr().out
    assert code == 0
    assert "Pushups done:    yes" in out
    assert "Goal reached" in out
    assert "Saved." not in out


def test_main_reports_store_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    class _BrokenStore(RecordStore):
        async def fetch_recent(self, limit: int) -> list[DailyRecord]:
            raise StoreUnavailable("permission denied for table stability_logs")

        async def upsert(self, record: DailyRecord) -> DailyRecord:
            raise AssertionError("save must not run after a failed load")

    def _build_store(_: Any) -> RecordStore:
        return _BrokenStore()

    monkeypatch.setattr(cli, "build_store", _build_store)

    code = cli.main(["--steps", "100", "--save"])
    out = capsys.readouterr().out
    assert code == 1
    assert "Error: permission denied for table stability_logs" in out
    assert "No entries yet" in out
