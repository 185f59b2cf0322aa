"""Tests for the command-line entry point against the local backend."""

from __future__ import annotations

import json
import sys

import pytest

from vita.__main__ import main


@pytest.fixture
def local_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("VITA_BACKEND", "local")
    monkeypatch.setenv("VITA_LOCAL_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("VITA_DEBOUNCE", "30")
    return tmp_path / "data"


def run(monkeypatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["vita", *argv])
    with pytest.raises(SystemExit) as exc:
        main()
    return exc.value.code


class TestCli:
    def test_unknown_command(self, local_env, monkeypatch, capsys):
        assert run(monkeypatch, "dance") == 1
        assert "Usage" in capsys.readouterr().out

    def test_show_does_not_write(self, local_env, monkeypatch, capsys):
        assert run(monkeypatch, "show", "2024-01-01") == 0
        day = json.loads(capsys.readouterr().out)
        assert day["habits"] == {}
        assert not local_env.exists()

    def test_habit_toggle_is_saved_on_exit(self, local_env, monkeypatch, capsys):
        assert run(monkeypatch, "habit", "Gym", "2024-01-01") == 0
        assert "Gym: done" in capsys.readouterr().out

        stored = json.loads((local_env / "health-tracker-data.json").read_text("utf-8"))
        assert stored["days"]["2024-01-01"]["habits"] == {"Gym": True}

    def test_migrate_rewrites_legacy_document(self, local_env, monkeypatch, capsys):
        local_env.mkdir()
        path = local_env / "health-tracker-data.json"
        path.write_text(json.dumps({"settings": {"habits": ["Long Walk"]}}), "utf-8")

        assert run(monkeypatch, "migrate") == 0
        assert "at version 1.4" in capsys.readouterr().out
        stored = json.loads(path.read_text("utf-8"))
        assert stored["version"] == "1.4"
        assert stored["settings"]["habits"] == ["Photo Stroll"]

    def test_corrupt_document_reports_error(self, local_env, monkeypatch, capsys):
        local_env.mkdir()
        (local_env / "health-tracker-data.json").write_text("{broken", "utf-8")

        assert run(monkeypatch, "show") == 1
        assert "Error:" in capsys.readouterr().err
