# tests/test_list_api.py

from __future__ import annotations

from tally_lists.todos import editor, list_api
from tally_lists.todos.models import Priority


def test_add_items_newest_first_with_default_priority(state) -> None:
    tl = list_api.create_list(state, "Chores")
    assert tl.color == "#6366f1"

    first = list_api.add_item(state, tl.id, "dishes")
    second = list_api.add_item(state, tl.id, " laundry ", priority=Priority.HIGH)
    assert first is not None and second is not None

    items = state.list_store.get_list(tl.id).items
    assert [n.text for n in items] == ["laundry", "dishes"]
    assert items[0].priority == Priority.HIGH
    assert items[1].priority == Priority.LOW
    assert items[1].expanded is True and items[1].completed is False


def test_add_subtask_expands_parent(state) -> None:
    tl = list_api.create_list(state, "Trip")
    parent = list_api.add_item(state, tl.id, "pack")
    list_api.toggle_item_expanded(state, tl.id, parent.id)
    assert state.list_store.get_list(tl.id).items[0].expanded is False

    child = list_api.add_subtask(state, tl.id, parent.id)
    assert child is not None
    assert child.text == "New sub-task"

    node = state.list_store.get_list(tl.id).items[0]
    assert node.expanded is True
    assert [c.id for c in node.children] == [child.id]


def test_add_subtask_unknown_parent_or_list(state) -> None:
    tl = list_api.create_list(state, "Trip")
    assert list_api.add_subtask(state, tl.id, "nope", "x") is None
    assert list_api.add_subtask(state, "missing", "nope", "x") is None
    assert state.list_store.get_list(tl.id).items == ()


def test_edits_and_delete(state) -> None:
    tl = list_api.create_list(state, "Work")
    root = list_api.add_item(state, tl.id, "report")
    kid = list_api.add_subtask(state, tl.id, root.id, "draft")
    list_api.add_subtask(state, tl.id, kid.id, "outline")

    list_api.toggle_item(state, tl.id, kid.id)
    list_api.rename_item(state, tl.id, kid.id, "first draft")
    list_api.set_item_priority(state, tl.id, kid.id, Priority.MEDIUM)
    list_api.cycle_item_priority(state, tl.id, kid.id)
    list_api.set_item_due_date(state, tl.id, kid.id, 1_800_000_000.0)

    node = editor.find_node(state.list_store.get_list(tl.id).items, kid.id)
    assert node.completed is True
    assert node.text == "first draft"
    assert node.priority == Priority.HIGH
    assert node.due_date == 1_800_000_000.0

    after = list_api.delete_item(state, tl.id, kid.id)
    assert editor.count_nodes(after.items) == 1


def test_missing_node_does_not_touch_updated_at(state) -> None:
    tl = list_api.create_list(state, "Quiet")
    list_api.add_item(state, tl.id, "one")
    before = state.list_store.get_list(tl.id)

    after = list_api.toggle_item(state, tl.id, "stale-id")
    assert after == before
    assert list_api.delete_item(state, tl.id, "stale-id").updated_at == before.updated_at


def test_missing_list_returns_none(state) -> None:
    assert list_api.toggle_item(state, "missing", "x") is None
    assert list_api.add_item(state, "missing", "x") is None
    assert list_api.preview_list(state, "missing") == []


def test_preview_list_uses_configured_limit(state) -> None:
    tl = list_api.create_list(state, "Big")
    for i in range(3):
        parent = list_api.add_item(state, tl.id, f"item {i}")
        for j in range(3):
            list_api.add_subtask(state, tl.id, parent.id, f"sub {i}.{j}")

    preview = list_api.preview_list(state, tl.id)
    assert [(p.text, p.depth) for p in preview] == [
        ("item 2", 0),
        ("sub 2.0", 1),
        ("sub 2.1", 1),
        ("sub 2.2", 1),
    ]
    assert len(list_api.preview_list(state, tl.id, limit=100)) == 12
