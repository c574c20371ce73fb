# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tally_lists.core.state import AppState
from tally_lists.todos.list_store import ListStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the list API.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tally-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        lists_db_path=tmp_path / "lists.sqlite3",
        preview_limit=4,
        subtask_text="New sub-task",
        default_priority="low",
        default_color="#6366f1",
        check_ids=True,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired to a real SQLite ListStore in tmp_path.

    The store is cheap to create and its correctness is part of what we test.
    """
    return AppState(
        settings=settings,
        list_store=ListStore(settings.lists_db_path, check_ids=settings.check_ids),
    )
