# tests/test_list_store.py

from __future__ import annotations

import sqlite3
import time
from pathlib import Path

import pytest

from tally_lists.todos.list_store import ListStore
from tally_lists.todos.models import InvariantViolation, TaskNode


def test_list_create_get_save_delete(tmp_path: Path) -> None:
    store = ListStore(tmp_path / "lists.sqlite3")

    tl = store.create_list(title="  Home  ", color="#22c55e")
    assert tl.title == "Home"
    assert store.count_lists() == 1

    loaded = store.get_list(tl.id)
    assert loaded is not None
    assert loaded.items == ()
    assert loaded.color == "#22c55e"

    time.sleep(0.01)
    items = (TaskNode(id="n1", text="sweep", children=(TaskNode(id="n2", text="hall"),)),)
    saved = store.save_items(tl.id, items)
    assert saved is not None
    assert saved.items == items
    assert saved.updated_at > tl.updated_at
    assert saved.created_at == tl.created_at

    assert store.delete_list(tl.id) is True
    assert store.get_list(tl.id) is None
    assert store.delete_list(tl.id) is False


def test_save_items_unknown_list(tmp_path: Path) -> None:
    store = ListStore(tmp_path / "lists.sqlite3")
    assert store.save_items("missing", ()) is None


def test_create_list_requires_title(tmp_path: Path) -> None:
    store = ListStore(tmp_path / "lists.sqlite3")
    with pytest.raises(ValueError):
        store.create_list(title="   ")


def test_list_lists_sort_and_search(tmp_path: Path) -> None:
    store = ListStore(tmp_path / "lists.sqlite3")
    b = store.create_list(title="beta")
    time.sleep(0.01)
    store.create_list(title="Alpha")
    time.sleep(0.01)
    store.save_items(b.id, (TaskNode(id="x", text="x"),))

    assert [tl.title for tl in store.list_lists()] == ["beta", "Alpha"]
    assert [tl.title for tl in store.list_lists(sort="alpha")] == ["Alpha", "beta"]
    assert [tl.title for tl in store.list_lists(search="ALP")] == ["Alpha"]
    assert len(store.list_lists(limit=1)) == 1

    with pytest.raises(ValueError):
        store.list_lists(sort="random")


def test_update_list_fields(tmp_path: Path) -> None:
    store = ListStore(tmp_path / "lists.sqlite3")
    tl = store.create_list(title="Work")

    assert store.update_list_fields(tl.id) is False
    assert store.update_list_fields(tl.id, title="Office", color="#000") is True
    got = store.get_list(tl.id)
    assert got is not None
    assert (got.title, got.color) == ("Office", "#000")
    assert store.update_list_fields("missing", title="x") is False


def test_check_ids_rejects_duplicates(tmp_path: Path) -> None:
    store = ListStore(tmp_path / "lists.sqlite3", check_ids=True)
    tl = store.create_list(title="Dup")
    dup = (TaskNode(id="same", text="a"), TaskNode(id="same", text="b"))
    with pytest.raises(InvariantViolation):
        store.save_items(tl.id, dup)
    assert store.get_list(tl.id).items == ()


def test_corrupt_items_document_reads_as_empty(tmp_path: Path) -> None:
    db = tmp_path / "lists.sqlite3"
    store = ListStore(db)
    tl = store.create_list(title="Broken")

    conn = sqlite3.connect(str(db))
    conn.execute("UPDATE lists SET items = ? WHERE id = ?", ("{not json", tl.id))
    conn.commit()
    conn.close()

    got = store.get_list(tl.id)
    assert got is not None
    assert got.items == ()


def test_reopen_keeps_data(tmp_path: Path) -> None:
    db = tmp_path / "lists.sqlite3"
    tl = ListStore(db).create_list(title="Persist")
    assert ListStore(db).get_list(tl.id).title == "Persist"
