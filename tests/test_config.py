# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from tally_lists.config import Settings


def test_settings_defaults(monkeypatch) -> None:
    for name in (
        "TALLY_DATA_DIR",
        "TALLY_LISTS_DB_PATH",
        "TALLY_PREVIEW_LIMIT",
        "TALLY_SUBTASK_TEXT",
        "TALLY_CHECK_IDS",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()
    assert s.data_dir == Path(".local/tally")
    assert s.lists_db_path == Path(".local/tally") / "lists.sqlite3"
    assert s.preview_limit == 4
    assert s.subtask_text == "New sub-task"
    assert s.check_ids is False


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TALLY_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TALLY_LISTS_DB_PATH", raising=False)
    monkeypatch.setenv("TALLY_PREVIEW_LIMIT", "7")
    monkeypatch.setenv("TALLY_DEFAULT_PRIORITY", " HIGH ")
    monkeypatch.setenv("TALLY_CHECK_IDS", "yes")

    s = Settings.from_env()
    assert s.lists_db_path == tmp_path / "lists.sqlite3"
    assert s.preview_limit == 7
    assert s.default_priority == "high"
    assert s.check_ids is True


def test_bad_int_falls_back(monkeypatch) -> None:
    monkeypatch.setenv("TALLY_PREVIEW_LIMIT", "many")
    assert Settings.from_env().preview_limit == 4
